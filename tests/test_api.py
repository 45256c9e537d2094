"""HTTP surface: camelCase bodies, author header and error-to-status mapping."""


async def _series(client, **extra):
    r = await client.post("/series", json={"title": "Embercrest", "genre": "fantasy", "targetBookCount": 3, **extra})
    assert r.status_code == 201, r.text
    return r.json()


async def _vael(client, series_id, **extra):
    body = {
        "seriesId": series_id,
        "name": "Vael",
        "canonLockLevel": "hard",
        "lockedAttributes": ["eyeColor"],
        "physicalDescription": {"eyeColor": "amber"},
        **extra,
    }
    r = await client.post("/characters", json=body)
    assert r.status_code == 201, r.text
    return r.json()["character"]


class TestAuthAndValidation:
    async def test_health(self, client):
        r = await client.get("/health")
        assert r.json() == {"status": "ok"}

    async def test_write_without_author_header(self, client):
        r = await client.post("/series", json={"title": "X", "genre": "y"}, headers={"X-Author-Id": ""})
        assert r.status_code == 401
        assert r.json() == {
            "error": "authentication_required",
            "message": "Missing X-Author-Id header",
            "retryable": False,
        }

    async def test_body_author_must_match_header(self, client):
        r = await client.post("/series", json={"title": "X", "genre": "y", "authorId": "someone-else"})
        assert r.status_code == 422
        assert r.json()["error"] == "validation_error"

    async def test_unknown_locked_attribute_is_rejected(self, client):
        series = await _series(client)
        r = await client.post("/characters", json={
            "seriesId": series["id"], "name": "Vael", "lockedAttributes": ["favouriteSong"],
        })
        assert r.status_code == 422

    async def test_missing_series(self, client):
        r = await client.get("/series/does-not-exist")
        assert r.status_code == 404
        assert r.json()["error"] == "not_found"


class TestSeriesEndpoints:
    async def test_create_and_read_camel_case(self, client):
        series = await _series(client, themes=["legacy"])
        assert series["authorId"] == "author-1"
        assert series["targetBookCount"] == 3
        assert series["themes"] == ["legacy"]

        r = await client.get(f"/series/{series['id']}")
        overview = r.json()
        assert overview["series"]["title"] == "Embercrest"
        assert overview["characterCount"] == 0
        assert overview["pendingViolations"] == 0

    async def test_list_by_author(self, client):
        await _series(client)
        r = await client.get("/series", params={"authorId": "author-1"})
        [summary] = r.json()
        assert summary["bookCount"] == 0

    async def test_patch_and_delete(self, client):
        series = await _series(client)
        r = await client.patch(f"/series/{series['id']}", json={"seriesStatus": "active"})
        assert r.json()["seriesStatus"] == "active"

        r = await client.delete(f"/series/{series['id']}")
        assert r.status_code == 204
        assert (await client.get(f"/series/{series['id']}")).status_code == 404

    async def test_book_overlap_is_409(self, client):
        series = await _series(client)
        r = await client.post(f"/series/{series['id']}/books", json={
            "bookNumber": 1, "title": "Ashfall", "timelineStart": 0, "timelineEnd": 100,
        })
        assert r.status_code == 201
        assert r.json()["violations"] == []

        r = await client.post(f"/series/{series['id']}/books", json={
            "bookNumber": 2, "title": "Cinders", "timelineStart": 90, "timelineEnd": 200,
        })
        assert r.status_code == 409
        assert r.json()["violations"][0]["category"] == "timeline-overlap"

    async def test_book_window_must_be_ordered(self, client):
        series = await _series(client)
        r = await client.post(f"/series/{series['id']}/books", json={
            "bookNumber": 1, "title": "Ashfall", "timelineStart": 100, "timelineEnd": 0,
        })
        assert r.status_code == 422


class TestContinuityEndpoints:
    async def test_embercrest_over_http(self, client):
        series = await _series(client)
        await client.post(f"/series/{series['id']}/books", json={
            "bookNumber": 1, "title": "Ashfall", "timelineStart": 0, "timelineEnd": 100,
        })
        vael = await _vael(client, series["id"])

        r = await client.patch(f"/characters/{vael['id']}", json={"physicalDescription": {"eyeColor": "blue"}})
        assert r.status_code == 409
        body = r.json()
        assert body["error"] == "continuity_violation"
        assert body["retryable"] is False
        [violation] = body["violations"]
        assert violation["severity"] == "hard"
        assert violation["attribute"] == "eyeColor"

        r = await client.get(f"/characters/{vael['id']}")
        assert r.json()["physicalDescription"]["eyeColor"] == "amber"

        r = await client.get("/characters", params={"seriesId": series["id"]})
        [listed] = r.json()
        assert listed["canonLockLevel"] == "hard"
        assert listed["lockedAttributes"] == ["eyeColor"]

    async def test_soft_violation_review(self, client):
        series = await _series(client)
        vael = await _vael(client, series["id"], canonLockLevel="soft", lockedAttributes=["motivation"])

        r = await client.patch(f"/characters/{vael['id']}", json={"motivation": "Reclaim the throne"})
        assert r.status_code == 200
        [violation] = r.json()["violations"]
        assert violation["status"] == "pending"

        r = await client.get(f"/series/{series['id']}/violations", params={"status": "pending"})
        assert [v["id"] for v in r.json()] == [violation["id"]]

        r = await client.patch(f"/violations/{violation['id']}", json={"status": "acknowledged"})
        assert r.json()["status"] == "acknowledged"
        r = await client.get(f"/series/{series['id']}/violations", params={"status": "pending"})
        assert r.json() == []

    async def test_world_elements(self, client):
        series = await _series(client)
        r = await client.post("/world-elements", json={
            "seriesId": series["id"], "elementType": "location", "name": "Ashkeep",
        })
        assert r.status_code == 201
        element = r.json()["worldElement"]

        r = await client.post("/characters", json={"seriesId": series["id"], "name": "ASHKEEP"})
        assert r.status_code == 409
        assert r.json()["violations"][0]["category"] == "identity"

        r = await client.patch(f"/world-elements/{element['id']}", json={"shortDescription": "A ruined hold"})
        assert r.json()["worldElement"]["shortDescription"] == "A ruined hold"
        r = await client.get("/world-elements", params={"seriesId": series["id"]})
        assert len(r.json()) == 1

    async def test_notes(self, client):
        series = await _series(client)
        r = await client.post(f"/series/{series['id']}/notes", json={
            "title": "Scar", "content": "Vael's scar is on the left hand", "priority": "high",
        })
        assert r.status_code == 201
        note = r.json()

        r = await client.patch(f"/notes/{note['id']}", json={"isResolved": True})
        assert r.json()["isResolved"] is True

        r = await client.get(f"/series/{series['id']}/notes", params={"unresolvedOnly": "true"})
        assert r.json() == []
