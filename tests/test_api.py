import csv
from io import StringIO

import pytest
from httpx import ASGITransport, AsyncClient

from pyxi.api import create_app


@pytest.fixture(scope="module")
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="module")
async def client():
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


def _lineup_request(**overrides) -> dict:
    request = {
        "players": [
            {
                "id": "p1",
                "name": "Delantero",
                "cards": [{"id": "c1", "name": "Base", "ratingsByPosition": {"DC": [8.0, 8.5]}}],
            },
            {
                "id": "p2",
                "name": "Portero",
                "liveForm": "a",
                "cards": [{"id": "c2", "name": "Base", "ratingsByPosition": {"PT": [7.0]}}],
            },
        ],
        "formation": {
            "id": "f1",
            "name": "Prueba",
            "playStyle": "Por las bandas",
            "slots": [{"position": "DC"}, {"position": "PT"}],
        },
        "ideal_builds": [
            {"position": "DC", "style": "Ninguno"},
            {"position": "PT", "style": "Ninguno"},
        ],
    }
    request.update(overrides)
    return request


@pytest.mark.anyio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_stats_endpoint(client):
    resp = await client.post("/stats", json={"ratings": [8.0, 7.5, 9.0]})
    assert resp.status_code == 200
    body = resp.json()
    assert body["matches"] == 3
    assert body["average"] == pytest.approx(8.1667, abs=1e-3)
    assert body["std_dev"] == pytest.approx(0.6236, abs=1e-3)


@pytest.mark.anyio
async def test_project_accepts_camel_case_stats(client):
    payload = {"base_stats": {"ballControl": 80, "finishing": 70}, "build": {"dribbling": 3, "shooting": 2}}
    resp = await client.post("/progression/project", json=payload)
    assert resp.status_code == 200
    assert resp.json()["stats"] == {"ball_control": 83, "finishing": 72}

    special = await client.post("/progression/project", json={**payload, "card_name": "POTM Forward"})
    assert special.json()["stats"] == {"ball_control": 80, "finishing": 70}


@pytest.mark.anyio
async def test_project_rejects_unknown_stat(client):
    resp = await client.post("/progression/project", json={"base_stats": {"charisma": 99}})
    assert resp.status_code == 400
    assert "charisma" in resp.json()["detail"]


@pytest.mark.anyio
async def test_suggest_reports_points_used(client):
    payload = {
        "base_stats": {"finishing": 80, "curl": 80},
        "ideal_build": {"position": "DC", "style": "Ninguno", "build": {"finishing": 85}},
        "budget": 5,
    }
    resp = await client.post("/progression/suggest", json=payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["build"]["shooting"] == 4
    assert body["points_used"] == 5


@pytest.mark.anyio
async def test_resolve_ideal_build(client):
    payload = {
        "style": "Señuelo",
        "position": "DC",
        "ideal_builds": [
            {"id": "b1", "position": "DC", "style": "Ninguno"},
            {"id": "b2", "position": "DC", "style": "Segundo delantero"},
        ],
    }
    resp = await client.post("/ideal-builds/resolve", json=payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["build"]["id"] == "b2"
    assert body["resolved_style"] == "Segundo delantero"

    bad = await client.post("/ideal-builds/resolve", json={**payload, "position": "XX"})
    assert bad.status_code == 400


@pytest.mark.anyio
async def test_affinity_endpoint(client):
    payload = {
        "projected_stats": {"finishing": 94},
        "ideal_build": {"position": "DC", "style": "Ninguno", "build": {"finishing": 90}, "primarySkills": ["Cabezazo"]},
        "skills": ["Cabezazo"],
    }
    resp = await client.post("/affinity", json=payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["score"] == pytest.approx(102.0)
    assert body["breakdown"][0]["stat"] == "finishing"
    assert body["skills_breakdown"][0]["present"] is True

    empty = await client.post("/affinity", json={"projected_stats": {"finishing": 94}})
    assert empty.json()["score"] == 0.0


@pytest.mark.anyio
async def test_general_score_endpoint(client):
    payload = {"affinity": 90.0, "average": 8.0, "matches": 50, "flags": {"consistent": True}, "live_form": "B"}
    resp = await client.post("/general-score", json=payload)
    assert resp.status_code == 200
    assert resp.json()["score"] == pytest.approx(116.0)

    bad = await client.post("/general-score", json={**payload, "live_form": "Z"})
    assert bad.status_code == 422


@pytest.mark.anyio
async def test_generate_lineup_endpoint(client):
    resp = await client.post("/lineups", json=_lineup_request())
    assert resp.status_code == 200
    body = resp.json()
    assert body["tactic"] == "Por las bandas"
    assert [slot["starter"]["card_id"] for slot in body["slots"]] == ["c1", "c2"]
    assert body["slots"][1]["starter"]["live_form"] == "A"
    assert body["slots"][1]["starter"]["affinity_status"] == "never"
    assert body["slots"][0]["substitute"]["is_placeholder"] is True
    assert body["extra_substitute"] is None


@pytest.mark.anyio
async def test_lineup_request_validation(client):
    resp = await client.post("/lineups", json=_lineup_request(sort_by="salary"))
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_export_lineup_csv(client):
    resp = await client.post("/lineups/export.csv", json=_lineup_request(discarded_card_ids=["c2"]))
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    rows = list(csv.reader(StringIO(resp.text)))
    assert rows[0][0] == "Role"
    assert rows[1][5] == "c1"
    assert rows[2][3] == "placeholder-S-1"
