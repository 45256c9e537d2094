import asyncio
import uuid

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

# Configuration
BASE_URL = "http://localhost:8000"
AUTHOR_ID = f"sim-author-{uuid.uuid4().hex[:8]}"


class Retryable(Exception):
    """Server answered 503 (ConflictRetryable) or the connection dropped."""


async def call(client: httpx.AsyncClient, method: str, path: str, **kwargs) -> httpx.Response:
    async for attempt in AsyncRetrying(
        retry=retry_if_exception_type((Retryable, httpx.TransportError)),
        stop=stop_after_attempt(4),
        wait=wait_exponential(multiplier=0.5, max=4),
        reraise=True,
    ):
        with attempt:
            response = await client.request(method, path, **kwargs)
            if response.status_code == 503:
                raise Retryable(response.text)
            return response


async def simulate_embercrest():
    print(f"Connecting to {BASE_URL} as {AUTHOR_ID}...")
    async with httpx.AsyncClient(base_url=BASE_URL, headers={"X-Author-Id": AUTHOR_ID}, timeout=15) as client:
        # --- Step 1: Series + first book ---
        r = await call(client, "POST", "/series", json={"title": "Embercrest", "genre": "fantasy", "targetBookCount": 3})
        r.raise_for_status()
        series_id = r.json()["id"]
        print(f"[Client] Series created: {series_id}")

        r = await call(client, "POST", f"/series/{series_id}/books", json={
            "bookNumber": 1, "title": "Ashfall", "timelineStart": 0, "timelineEnd": 100,
        })
        r.raise_for_status()
        print("[Client] Book 1 created (0-100)")

        # --- Step 2: A hard-locked character ---
        r = await call(client, "POST", "/characters", json={
            "seriesId": series_id,
            "name": "Vael",
            "canonLockLevel": "hard",
            "lockedAttributes": ["eyeColor"],
            "physicalDescription": {"eyeColor": "amber"},
        })
        r.raise_for_status()
        vael = r.json()["character"]
        print(f"[Client] Vael created with eyeColor={vael['physicalDescription']['eyeColor']}")

        # --- Step 3: Try to break canon ---
        r = await call(client, "PATCH", f"/characters/{vael['id']}", json={
            "physicalDescription": {"eyeColor": "blue"}, "bookContext": 1,
        })
        if r.status_code == 409:
            body = r.json()
            print(f"[Server] Rejected: {body['message']}")
            for v in body.get("violations", []):
                print(f"  - [{v['severity']}] {v['category']}: {v['description']}")
        else:
            print(f"[Server] Unexpected response {r.status_code}: {r.text}")

        r = await call(client, "GET", f"/characters/{vael['id']}")
        r.raise_for_status()
        print(f"[Client] Vael's eyeColor is still {r.json()['physicalDescription']['eyeColor']}")

        # --- Step 4: Overview ---
        r = await call(client, "GET", f"/series/{series_id}")
        r.raise_for_status()
        overview = r.json()
        print("\n--- Overview ---")
        print(f"Books: {len(overview['books'])}  Characters: {overview['characterCount']}  "
              f"Pending violations: {overview['pendingViolations']}")


if __name__ == "__main__":
    try:
        asyncio.run(simulate_embercrest())
    except httpx.HTTPError as e:
        print(f"Simulation failed: {e}")
