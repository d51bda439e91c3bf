import pytest


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_scenarios(client):
    resp = await client.get("/api/v1/scenarios")
    assert resp.status_code == 200
    data = resp.json()

    assert [s["id"] for s in data] == list(range(1, 13))
    dollar_safety = data[0]
    assert dollar_safety["must_have"] == {"btc": ["down"], "usdjpy": ["up"], "eurusd": ["down"]}
    assert dollar_safety["confluence"] == {"gold": ["up", "flat"]}
    assert dollar_safety["trades"]["usdjpy"]["action"] == "BUY"
    assert list(dollar_safety["confluence_notes"]) == ["gold"]
    assert len(dollar_safety["confluence_notes"]["gold"]) == 2
    assert data[8]["confluence_notes"] == {}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_scenario(client):
    resp = await client.get("/api/v1/scenarios/12")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Conflicted Signals - Transition 2"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_unknown_scenario(client):
    resp = await client.get("/api/v1/scenarios/99")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Scenario not found: 99"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_transitions(client):
    resp = await client.get("/api/v1/scenarios/transitions")
    assert resp.status_code == 200
    assert resp.json() == {"11": [2, 7, 3], "12": [6, 3, 2]}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health_and_ready(client):
    resp = await client.get("/health")
    assert resp.json() == {"status": "ok"}

    resp = await client.get("/ready")
    assert resp.json() == {"status": "ready", "db_connected": True, "config_loaded": True}
