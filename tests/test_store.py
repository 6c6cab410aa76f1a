"""Tests for the in-memory and JSON store backends."""

import json
from decimal import Decimal

import pytest
import pytest_asyncio

from incidentboard.schemas import Agent, IncidentCategory
from incidentboard.store import (
    InMemoryStore,
    JsonStore,
    StoreDataset,
    StoreUnavailableError,
)


@pytest_asyncio.fixture(params=["memory", "json"])
async def store(request, tmp_path):
    if request.param == "memory":
        backend = InMemoryStore()
    else:
        backend = JsonStore(tmp_path / "data" / "board.json")
    await backend.initialize()
    yield backend
    await backend.close()


@pytest.mark.asyncio
async def test_register_agent_assigns_next_number(store):
    first = await store.register_agent("  Agent Smith  ")
    second = await store.register_agent("Agent Jones")

    assert first.name == "Agent Smith"
    assert (first.agent_number, second.agent_number) == (1, 2)
    assert first.total_incidents == 0
    assert first.total_cost == Decimal("0")
    assert first.id != second.id


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   "])
async def test_register_agent_rejects_blank_names(store, name):
    with pytest.raises(ValueError):
        await store.register_agent(name)
    assert await store.list_agents() == []


@pytest.mark.asyncio
async def test_record_incident_updates_running_totals(store):
    agent = await store.register_agent("Agent Smith")

    await store.record_incident(agent.id, IncidentCategory.CAR, Decimal("1200.10"))
    await store.record_incident(agent.id, "boat", Decimal("0.20"), description="Sank")

    [stored] = await store.list_agents()
    assert stored.total_incidents == 2
    assert stored.total_cost == Decimal("1200.30")

    incidents = await store.list_incidents(agent.id)
    assert [incident.category for incident in incidents] == [
        IncidentCategory.CAR,
        IncidentCategory.BOAT,
    ]
    assert incidents[1].description == "Sank"


@pytest.mark.asyncio
async def test_record_incident_validation(store):
    agent = await store.register_agent("Agent Smith")

    with pytest.raises(KeyError):
        await store.record_incident("missing", IncidentCategory.CAR, Decimal("1"))
    with pytest.raises(ValueError):
        await store.record_incident(agent.id, IncidentCategory.CAR, Decimal("-1"))
    with pytest.raises(ValueError):
        await store.record_incident(agent.id, "submarine", Decimal("1"))

    assert await store.list_incidents() == []


@pytest.mark.asyncio
async def test_list_incidents_filters_by_agent(store):
    smith = await store.register_agent("Agent Smith")
    jones = await store.register_agent("Agent Jones")
    await store.record_incident(smith.id, IncidentCategory.PLANE, Decimal("10"))
    await store.record_incident(jones.id, IncidentCategory.OTHER, Decimal("20"))

    assert len(await store.list_incidents()) == 2
    [only] = await store.list_incidents(jones.id)
    assert only.agent_id == jones.id


@pytest.mark.asyncio
async def test_active_content_sorted_by_order(store):
    await store.add_content_item("third", order=30)
    await store.add_content_item("hidden", order=5, is_active=False)
    await store.add_content_item("first", order=10)
    appended = await store.add_content_item("last")

    items = await store.list_active_content_items()

    assert [item.text for item in items] == ["first", "third", "last"]
    assert appended.order == 31


@pytest.mark.asyncio
async def test_in_memory_store_returns_copies():
    store = InMemoryStore()
    agent = await store.register_agent("Agent Smith")
    agent.total_incidents = 99

    [stored] = await store.list_agents()
    assert stored.total_incidents == 0


@pytest.mark.asyncio
async def test_in_memory_store_seeded_and_sorted():
    dataset = StoreDataset(
        agents=[
            Agent(id="b", name="B", agent_number=2),
            Agent(id="a", name="A", agent_number=1),
        ]
    )
    store = InMemoryStore(dataset)

    assert [agent.id for agent in await store.list_agents()] == ["a", "b"]


@pytest.mark.asyncio
async def test_json_store_writes_decimal_strings(tmp_path):
    path = tmp_path / "board.json"
    store = JsonStore(path)
    await store.initialize()
    agent = await store.register_agent("Agent Smith")
    await store.record_incident(agent.id, IncidentCategory.CAR, Decimal("0.10"))

    payload = json.loads(path.read_text("utf-8"))
    assert payload["agents"][0]["total_cost"] == "0.10"
    assert payload["incidents"][0]["category"] == "car"

    reopened = JsonStore(path)
    [stored] = await reopened.list_agents()
    assert stored.total_cost == Decimal("0.10")


@pytest.mark.asyncio
async def test_json_store_missing_file_reads_empty(tmp_path):
    store = JsonStore(tmp_path / "absent.json")
    assert await store.list_agents() == []
    assert await store.list_active_content_items() == []


@pytest.mark.asyncio
async def test_json_store_malformed_file_is_unavailable(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", "utf-8")
    store = JsonStore(path)

    with pytest.raises(StoreUnavailableError):
        await store.list_agents()


@pytest.mark.asyncio
async def test_json_store_invalid_records_are_unavailable(tmp_path):
    path = tmp_path / "invalid.json"
    path.write_text(json.dumps({"agents": [{"id": "a", "name": ""}]}), "utf-8")

    with pytest.raises(StoreUnavailableError):
        await JsonStore(path).list_incidents()


@pytest.mark.asyncio
async def test_json_store_non_utf8_file_is_unavailable(tmp_path):
    path = tmp_path / "binary.json"
    path.write_bytes(b"\xff\xfe garbage")
    store = JsonStore(path)

    with pytest.raises(StoreUnavailableError):
        await store.list_agents()
    with pytest.raises(StoreUnavailableError):
        await store.list_active_content_items()
