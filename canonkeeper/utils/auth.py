"""Author identity for write requests.

Authentication itself happens upstream; the engine only needs to know which
author is acting, passed in the ``X-Author-Id`` header.
"""

from typing import Optional

from fastapi import Header

from canonkeeper.errors import AuthenticationRequired

AUTHOR_HEADER = "X-Author-Id"


async def get_author_id(x_author_id: Optional[str] = Header(default=None, alias=AUTHOR_HEADER)) -> str:
    if not x_author_id or not x_author_id.strip():
        raise AuthenticationRequired(f"Missing {AUTHOR_HEADER} header")
    return x_author_id.strip()
