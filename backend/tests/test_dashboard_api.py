# backend/tests/test_dashboard_api.py

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from bson import ObjectId


def _doc(overall_rating, department_ratings=None, station="Kotwali", days_ago=0, status="new"):
    return {
        "_id": ObjectId(),
        "name": "Citizen",
        "phone": "9999999999",
        "description": "Feedback",
        "policeStation": station,
        "overallRating": overall_rating,
        "departmentRatings": department_ratings or [],
        "imageUrl": None,
        "status": status,
        "createdAt": datetime.now(timezone.utc) - timedelta(days=days_ago),
    }


@pytest_asyncio.fixture
async def seeded(test_db):
    await test_db["feedbacks"].insert_many([
        _doc(3, [{"department": "Traffic", "rating": 2}]),
        _doc(8, [{"department": "वाहतूक", "rating": 6}], station="Shirdi", days_ago=2, status="read"),
        _doc(10, [{"department": "Cyber Crime", "rating": 9}], station="Shirdi", days_ago=40),
    ])


class TestDashboard:
    @pytest.mark.asyncio
    async def test_requires_auth(self, client):
        res = await client.get("/api/dashboard")
        assert res.status_code == 401

    @pytest.mark.asyncio
    async def test_empty_collection(self, client, auth_headers):
        res = await client.get("/api/dashboard", headers=auth_headers)
        assert res.status_code == 200
        assert res.headers["cache-control"] == "no-store"
        body = res.json()
        assert body["summary"] == {"todayFeedback": 0, "totalFeedback": 0, "averageRating": "0.0"}
        assert body["departments"] == []
        assert len(body["dailyTrend"]) == 11

    @pytest.mark.asyncio
    async def test_full_view(self, client, auth_headers, seeded):
        body = (await client.get("/api/dashboard?tz=UTC", headers=auth_headers)).json()

        assert body["summary"]["totalFeedback"] == 3
        assert body["summary"]["todayFeedback"] == 1
        assert body["summary"]["averageRating"] == "7.0"
        departments = {d["department"]: d for d in body["departments"]}
        assert departments["Traffic"]["averageRating"] == 4.0
        assert departments["Traffic"]["needsImprovement"] is True
        assert departments["Cyber Crime"]["needsImprovement"] is False
        assert sum(p["feedbackCount"] for p in body["dailyTrend"]) == 2

    @pytest.mark.asyncio
    async def test_filters(self, client, auth_headers, seeded):
        res = await client.get("/api/dashboard/overview?station=Shirdi&status=read", headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["summary"]["totalFeedback"] == 1

        res = await client.get("/api/dashboard/feedback?sentiment=negative", headers=auth_headers)
        items = res.json()
        assert len(items) == 1
        assert items[0]["overallRating"] == 3
        assert items[0]["sentiment"] == "negative"

    @pytest.mark.asyncio
    async def test_feedback_list_newest_first(self, client, auth_headers, seeded):
        items = (await client.get("/api/dashboard/feedback", headers=auth_headers)).json()
        assert [i["overallRating"] for i in items] == [3, 8, 10]
        assert [i["sentiment"] for i in items] == ["negative", "positive", "positive"]

    @pytest.mark.asyncio
    async def test_stations_zero_filled(self, client, auth_headers, seeded):
        body = (await client.get("/api/dashboard/stations", headers=auth_headers)).json()
        assert len(body["stations"]) == 32
        assert [s["station"] for s in body["topByCount"]] == ["Shirdi", "Kotwali"]
        assert [s["station"] for s in body["topByRating"]] == ["Shirdi", "Kotwali"]

    @pytest.mark.asyncio
    async def test_departments_sentiment_and_measures(self, client, auth_headers, seeded):
        departments = (await client.get("/api/dashboard/departments", headers=auth_headers)).json()
        assert [d["department"] for d in departments] == ["Traffic", "Cyber Crime"]

        sentiment = (await client.get("/api/dashboard/sentiment", headers=auth_headers)).json()
        assert sentiment["distribution"]["counts"] == {"positive": 2, "neutral": 0, "negative": 1}

        measures = (await client.get("/api/dashboard/corrective-measures", headers=auth_headers)).json()
        assert measures["threshold"] == 5.0
        assert [m["department"] for m in measures["needsImprovement"]] == ["Traffic"]
        assert measures["needsImprovement"][0]["measures"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query",
        [
            "start_date=yesterday",
            "start_date=2024-03-10&end_date=2024-03-01",
            "tz=Mars/Olympus_Mons",
            "sentiment=angry",
            "status=archived",
        ],
    )
    async def test_invalid_filters(self, client, auth_headers, query):
        res = await client.get(f"/api/dashboard?{query}", headers=auth_headers)
        assert res.status_code == 400
        assert "error" in res.json()


class TestCatalog:
    @pytest.mark.asyncio
    async def test_stations(self, client):
        stations = (await client.get("/api/catalog/stations")).json()
        assert len(stations) == 32
        assert {"value": "Kotwali", "en": "Kotwali", "mr": "कोतवाली"} in stations

    @pytest.mark.asyncio
    async def test_departments(self, client):
        departments = (await client.get("/api/catalog/departments")).json()
        assert [d["value"] for d in departments] == ["Traffic", "Women Safety", "Narcotic Drugs", "Cyber Crime"]
        assert departments[2]["en"] == "Action against Narcotics"


@pytest.mark.asyncio
async def test_health_shape(client):
    body = (await client.get("/health")).json()
    assert body["status"] in ("ok", "degraded")
    assert isinstance(body["mongo"], bool)
