# backend/tests/test_feedback_api.py

import json
import os
from datetime import datetime, timezone

import httpx
import pytest

from citizen_feedback.analytics.numbers import ensure_aware_utc
from citizen_feedback.core.config import settings
from citizen_feedback.crud import feedback as feedback_crud
from citizen_feedback.main import app

DEPARTMENT_RATINGS = [
    {"department": "Traffic", "rating": 4},
    {"department": "महिला सुरक्षा", "rating": 9},
]


def form_data(**overrides):
    data = {
        "name": "Asha Patil",
        "phone": "9876543210",
        "description": "Quick response at the station.",
        "policeStation": "Kotwali",
        "overallRating": "8",
        "departmentRatings": json.dumps(DEPARTMENT_RATINGS, ensure_ascii=False),
    }
    data.update(overrides)
    return data


class TestSubmitFeedback:
    @pytest.mark.asyncio
    async def test_round_trip(self, client, auth_headers):
        before = datetime.now(timezone.utc).replace(microsecond=0)

        res = await client.post("/api/feedback", data=form_data())
        assert res.status_code == 201
        assert res.json() == {"message": "Feedback submitted successfully."}

        res = await client.get("/api/feedback", headers=auth_headers)
        assert res.status_code == 200
        items = res.json()
        assert len(items) == 1
        item = items[0]
        assert item["name"] == "Asha Patil"
        assert item["phone"] == "9876543210"
        assert item["description"] == "Quick response at the station."
        assert item["policeStation"] == "Kotwali"
        assert item["overallRating"] == 8
        assert item["departmentRatings"] == DEPARTMENT_RATINGS
        assert item["status"] == "new"
        assert item["imageUrl"] is None
        created = ensure_aware_utc(datetime.fromisoformat(item["createdAt"].replace("Z", "+00:00")))
        assert created >= before

    @pytest.mark.asyncio
    async def test_json_body_with_decoded_ratings(self, client, auth_headers):
        body = form_data(overallRating=6, departmentRatings=DEPARTMENT_RATINGS)
        res = await client.post("/api/feedback", json=body)
        assert res.status_code == 201

        items = (await client.get("/api/feedback", headers=auth_headers)).json()
        assert items[0]["overallRating"] == 6
        assert items[0]["departmentRatings"] == DEPARTMENT_RATINGS

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", ["", "0"])
    async def test_overall_rating_required(self, client, rating):
        res = await client.post("/api/feedback", data=form_data(overallRating=rating))
        assert res.status_code == 400
        assert res.json() == {"error": "Overall rating is required."}

    @pytest.mark.asyncio
    async def test_missing_overall_rating(self, client):
        data = form_data()
        del data["overallRating"]
        res = await client.post("/api/feedback", data=data)
        assert res.status_code == 400
        assert res.json()["error"] == "Overall rating is required."

    @pytest.mark.asyncio
    async def test_non_integer_rating(self, client):
        res = await client.post("/api/feedback", data=form_data(overallRating="great"))
        assert res.status_code == 400
        assert "error" in res.json()

    @pytest.mark.asyncio
    async def test_missing_name(self, client):
        data = form_data()
        del data["name"]
        res = await client.post("/api/feedback", data=data)
        assert res.status_code == 400
        assert "name" in res.json()["error"]

    @pytest.mark.asyncio
    async def test_malformed_department_ratings_are_ignored(self, client, auth_headers):
        res = await client.post("/api/feedback", data=form_data(departmentRatings="[{oops"))
        assert res.status_code == 201

        items = (await client.get("/api/feedback", headers=auth_headers)).json()
        assert items[0]["departmentRatings"] == []

    @pytest.mark.asyncio
    async def test_image_upload(self, client, auth_headers):
        files = {"image": ("my photo.png", b"\x89PNG\r\n\x1a\nfake", "image/png")}
        res = await client.post("/api/feedback", data=form_data(), files=files)
        assert res.status_code == 201

        item = (await client.get("/api/feedback", headers=auth_headers)).json()[0]
        assert item["imageUrl"].startswith("/uploads/feedbacks/")
        assert item["imageUrl"].endswith("-my_photo.png")

        stored = os.path.join(settings.UPLOAD_DIR, "feedbacks", item["imageUrl"].rsplit("/", 1)[-1])
        assert os.path.exists(stored)

        served = await client.get(item["imageUrl"])
        assert served.status_code == 200

    @pytest.mark.asyncio
    async def test_non_image_upload_rejected(self, client):
        files = {"image": ("notes.txt", b"hello", "text/plain")}
        res = await client.post("/api/feedback", data=form_data(), files=files)
        assert res.status_code == 400

    @pytest.mark.asyncio
    async def test_oversized_image_rejected(self, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 10)
        files = {"image": ("big.png", b"x" * 11, "image/png")}
        res = await client.post("/api/feedback", data=form_data(), files=files)
        assert res.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", ["99999999999999999999", "-9223372036854775809"])
    async def test_overall_rating_beyond_int64_form(self, client, rating):
        res = await client.post("/api/feedback", data=form_data(overallRating=rating))
        assert res.status_code == 400
        assert res.json() == {"error": "Overall rating is out of range."}

    @pytest.mark.asyncio
    async def test_overall_rating_beyond_int64_json(self, client, auth_headers):
        res = await client.post("/api/feedback", json=form_data(overallRating=2 ** 63))
        assert res.status_code == 400
        assert res.json() == {"error": "Overall rating is out of range."}

        items = (await client.get("/api/feedback", headers=auth_headers)).json()
        assert items == []

    @pytest.mark.asyncio
    async def test_image_removed_when_insert_fails(self, test_db, monkeypatch):
        async def failing_create(*args, **kwargs):
            raise RuntimeError("insert failed")

        monkeypatch.setattr(feedback_crud, "create_feedback", failing_create)
        feedback_dir = os.path.join(settings.UPLOAD_DIR, "feedbacks")
        before = set(os.listdir(feedback_dir)) if os.path.isdir(feedback_dir) else set()

        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            files = {"image": ("orphan.png", b"\x89PNG\r\n\x1a\nfake", "image/png")}
            res = await client.post("/api/feedback", data=form_data(), files=files)

        assert res.status_code == 500
        assert res.json() == {"error": "Server error"}
        after = set(os.listdir(feedback_dir)) if os.path.isdir(feedback_dir) else set()
        assert after == before


class TestQueryFeedback:
    async def _submit(self, client, **overrides):
        res = await client.post("/api/feedback", data=form_data(**overrides))
        assert res.status_code == 201

    @pytest.mark.asyncio
    async def test_requires_auth(self, client):
        res = await client.get("/api/feedback")
        assert res.status_code == 401
        assert "error" in res.json()

        res = await client.get("/api/feedback", headers={"Authorization": "Bearer nope"})
        assert res.status_code == 401

    @pytest.mark.asyncio
    async def test_newest_first_and_no_store(self, client, auth_headers):
        await self._submit(client, name="First")
        await self._submit(client, name="Second")

        res = await client.get("/api/feedback", headers=auth_headers)
        assert res.headers["cache-control"] == "no-store"
        assert [i["name"] for i in res.json()] == ["Second", "First"]

    @pytest.mark.asyncio
    async def test_get_by_id(self, client, auth_headers):
        await self._submit(client)
        item = (await client.get("/api/feedback", headers=auth_headers)).json()[0]

        res = await client.get(f"/api/feedback/{item['id']}", headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["id"] == item["id"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("feedback_id", ["65f000000000000000000000", "not-an-id"])
    async def test_unknown_id(self, client, auth_headers, feedback_id):
        res = await client.get(f"/api/feedback/{feedback_id}", headers=auth_headers)
        assert res.status_code == 404
        assert res.json() == {"error": "Feedback not found"}

    @pytest.mark.asyncio
    async def test_mark_read_is_idempotent(self, client, auth_headers):
        await self._submit(client)
        item = (await client.get("/api/feedback", headers=auth_headers)).json()[0]

        for _ in range(2):
            res = await client.put(f"/api/feedback/{item['id']}/read", headers=auth_headers)
            assert res.status_code == 200

        res = await client.get(f"/api/feedback/{item['id']}", headers=auth_headers)
        assert res.json()["status"] == "read"

        res = await client.put("/api/feedback/65f000000000000000000000/read", headers=auth_headers)
        assert res.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_one_and_all(self, client, auth_headers):
        for name in ("A", "B", "C"):
            await self._submit(client, name=name)
        items = (await client.get("/api/feedback", headers=auth_headers)).json()

        res = await client.delete(f"/api/feedback/{items[0]['id']}", headers=auth_headers)
        assert res.json() == {"message": "Feedback deleted."}
        res = await client.delete(f"/api/feedback/{items[0]['id']}", headers=auth_headers)
        assert res.status_code == 404

        res = await client.delete("/api/feedback", headers=auth_headers)
        assert res.json() == {"message": "All feedback deleted."}
        assert (await client.get("/api/feedback", headers=auth_headers)).json() == []
