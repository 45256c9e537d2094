"""Shared FastAPI dependencies for the REST routers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from canonkeeper.database import get_session_factory
from canonkeeper.services.continuity_engine import ContinuityEngine


def get_engine(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> ContinuityEngine:
    return ContinuityEngine(session_factory)
