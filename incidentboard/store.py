"""
IncidentStore interface for pluggable data store backends.

The ranking core performs no I/O. Everything it ranks is fetched through an
IncidentStore, which owns validation on write, agent numbering and the
running totals kept on each agent.

Two included implementations:
1. InMemoryStore - Dict-based storage, data lost on exit (testing, prototyping)
2. JsonStore - One human-readable JSON dataset file (small deployments, demos)

Key responsibilities:
- List agents ordered by display number
- List incidents, optionally for a single agent
- Register agents (non-empty name, next display number, zero totals)
- Record incidents and keep the agent's running totals in step
- List the active content pool sorted by order

Usage pattern:
    store = InMemoryStore()
    await store.initialize()

    agent = await store.register_agent("Agent Smith")
    await store.record_incident(agent.id, IncidentCategory.CAR, Decimal("1200"))

    agents = await store.list_agents()
    incidents = await store.list_incidents()

    await store.close()
"""

import asyncio
import json
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, ValidationError

from incidentboard.schemas import (
    Agent,
    ContentItem,
    IncidentCategory,
    IncidentRecord,
)


class StoreUnavailableError(Exception):
    """Raised when the data store cannot be read or written right now.

    Transient by nature: callers may retry later and should keep whatever
    they computed from the last successful read.
    """


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Agent name is required")
    return cleaned


def _check_cost(cost: Decimal) -> Decimal:
    cost = Decimal(cost)
    if cost < 0:
        raise ValueError(f"Incident cost must be non-negative (got {cost})")
    return cost


class IncidentStore(ABC):
    """Abstract base class for agent, incident and content storage.

    All methods are async so database or file backends can do I/O without
    blocking callers; they are no-ops in spirit for InMemoryStore.

    Method categories:
    1. Lifecycle: initialize(), close()
    2. Agents: list_agents(), register_agent()
    3. Incidents: list_incidents(), record_incident()
    4. Content: list_active_content_items(), add_content_item()
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create files, open connections)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass

    @abstractmethod
    async def list_agents(self) -> List[Agent]:
        """
        Return every agent ordered by agent_number ascending.

        Raises:
            StoreUnavailableError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def list_incidents(self, agent_id: Optional[str] = None) -> List[IncidentRecord]:
        """
        Return all incidents, or only those of `agent_id` when given.

        Raises:
            StoreUnavailableError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def register_agent(self, name: str) -> Agent:
        """
        Create an agent with the next display number and zero totals.

        Args:
            name: Display name; surrounding whitespace is stripped

        Returns:
            The stored Agent

        Raises:
            ValueError: If the name is blank
        """
        pass

    @abstractmethod
    async def record_incident(
        self,
        agent_id: str,
        category: IncidentCategory,
        cost: Decimal,
        description: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> IncidentRecord:
        """
        Append an incident and add it to the agent's running totals.

        Raises:
            KeyError: If the agent does not exist
            ValueError: If the cost is negative or the category unknown
        """
        pass

    @abstractmethod
    async def list_active_content_items(self) -> List[ContentItem]:
        """Return active content items sorted by order ascending."""
        pass

    @abstractmethod
    async def add_content_item(
        self,
        text: str,
        author: Optional[str] = None,
        order: Optional[int] = None,
        is_active: bool = True,
    ) -> ContentItem:
        """Add an item to the rotation pool (appended when order is None)."""
        pass


class StoreDataset(BaseModel):
    """Full contents of a store, as kept in memory or in a JSON file."""

    agents: List[Agent] = Field(default_factory=list)
    incidents: List[IncidentRecord] = Field(default_factory=list)
    content_items: List[ContentItem] = Field(default_factory=list)

    def sorted_agents(self) -> List[Agent]:
        return sorted(self.agents, key=lambda agent: agent.agent_number)

    def incidents_for(self, agent_id: Optional[str]) -> List[IncidentRecord]:
        if agent_id is None:
            return list(self.incidents)
        return [incident for incident in self.incidents if incident.agent_id == agent_id]

    def active_content(self) -> List[ContentItem]:
        active = [item for item in self.content_items if item.is_active]
        return sorted(active, key=lambda item: item.order)

    def add_agent(self, name: str) -> Agent:
        next_number = max((agent.agent_number for agent in self.agents), default=0) + 1
        agent = Agent(
            id=str(uuid4()),
            name=_clean_name(name),
            agent_number=next_number,
            created_at=datetime.now(timezone.utc),
        )
        self.agents.append(agent)
        return agent

    def add_incident(
        self,
        agent_id: str,
        category: IncidentCategory,
        cost: Decimal,
        description: Optional[str],
        occurred_at: Optional[datetime],
    ) -> IncidentRecord:
        agent = next((agent for agent in self.agents if agent.id == agent_id), None)
        if agent is None:
            raise KeyError(f"Agent {agent_id} not found")

        incident = IncidentRecord(
            id=str(uuid4()),
            agent_id=agent_id,
            category=IncidentCategory(category),
            cost=_check_cost(cost),
            description=description,
            occurred_at=occurred_at or datetime.now(timezone.utc),
        )
        self.incidents.append(incident)
        agent.total_incidents += 1
        agent.total_cost += incident.cost
        return incident

    def add_content(
        self,
        text: str,
        author: Optional[str],
        order: Optional[int],
        is_active: bool,
    ) -> ContentItem:
        if order is None:
            order = max((item.order for item in self.content_items), default=0) + 1
        item = ContentItem(
            id=str(uuid4()),
            order=order,
            is_active=is_active,
            text=text,
            author=author,
        )
        self.content_items.append(item)
        return item


class InMemoryStore(IncidentStore):
    """In-memory store using a StoreDataset held in process memory.

    Data is ephemeral: lost when the process exits. Returned records are deep
    copies so callers cannot mutate stored totals by accident.

    Perfect for:
    - Unit testing (fast, isolated, no cleanup needed)
    - Seeding a demo from a prepared dataset

    Can be seeded:
        store = InMemoryStore(StoreDataset(agents=[...], incidents=[...]))
    """

    def __init__(self, dataset: Optional[StoreDataset] = None):
        self.dataset = dataset.model_copy(deep=True) if dataset else StoreDataset()

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        # Data is kept on close so callers can still inspect it afterwards
        pass

    async def list_agents(self) -> List[Agent]:
        return [agent.model_copy(deep=True) for agent in self.dataset.sorted_agents()]

    async def list_incidents(self, agent_id: Optional[str] = None) -> List[IncidentRecord]:
        return [incident.model_copy() for incident in self.dataset.incidents_for(agent_id)]

    async def register_agent(self, name: str) -> Agent:
        return self.dataset.add_agent(name).model_copy(deep=True)

    async def record_incident(
        self,
        agent_id: str,
        category: IncidentCategory,
        cost: Decimal,
        description: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> IncidentRecord:
        incident = self.dataset.add_incident(agent_id, category, cost, description, occurred_at)
        return incident.model_copy()

    async def list_active_content_items(self) -> List[ContentItem]:
        return [item.model_copy() for item in self.dataset.active_content()]

    async def add_content_item(
        self,
        text: str,
        author: Optional[str] = None,
        order: Optional[int] = None,
        is_active: bool = True,
    ) -> ContentItem:
        return self.dataset.add_content(text, author, order, is_active).model_copy()


class JsonStore(IncidentStore):
    """File-based store keeping the whole dataset in one JSON file.

    File layout:
    ```json
    {
      "agents": [{"id": "...", "name": "...", "agent_number": 1, ...}],
      "incidents": [{"id": "...", "agent_id": "...", "category": "car", "cost": "1200.00"}],
      "content_items": [{"id": "...", "order": 1, "is_active": true, "text": "..."}]
    }
    ```

    Costs are written as decimal strings so no precision is lost. Each call
    re-reads the file, so edits made by hand are picked up on the next read.
    A missing file reads as an empty dataset.

    Async operations:
    - File I/O runs in a worker thread (asyncio.to_thread)
    - Writes within one process are serialized with an asyncio.Lock
    - Unreadable or malformed files raise StoreUnavailableError
    """

    def __init__(self, path: Path | str = "incidentboard.json"):
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    async def initialize(self) -> None:
        await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)
        if not self.path.exists():
            await self._save(StoreDataset())

    async def close(self) -> None:
        # Nothing to clean up for JSON storage
        return None

    async def _load(self) -> StoreDataset:
        def _read() -> StoreDataset:
            if not self.path.exists():
                return StoreDataset()
            payload = json.loads(self.path.read_text("utf-8"))
            return StoreDataset.model_validate(payload)

        try:
            return await asyncio.to_thread(_read)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            raise StoreUnavailableError(f"Cannot read dataset {self.path}: {exc}") from exc

    async def _save(self, dataset: StoreDataset) -> None:
        payload = json.dumps(dataset.model_dump(mode="json"), indent=2)
        try:
            await asyncio.to_thread(self.path.write_text, payload, "utf-8")
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot write dataset {self.path}: {exc}") from exc

    async def list_agents(self) -> List[Agent]:
        return (await self._load()).sorted_agents()

    async def list_incidents(self, agent_id: Optional[str] = None) -> List[IncidentRecord]:
        return (await self._load()).incidents_for(agent_id)

    async def register_agent(self, name: str) -> Agent:
        _clean_name(name)
        async with self._write_lock:
            dataset = await self._load()
            agent = dataset.add_agent(name)
            await self._save(dataset)
        return agent

    async def record_incident(
        self,
        agent_id: str,
        category: IncidentCategory,
        cost: Decimal,
        description: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> IncidentRecord:
        async with self._write_lock:
            dataset = await self._load()
            incident = dataset.add_incident(agent_id, category, cost, description, occurred_at)
            await self._save(dataset)
        return incident

    async def list_active_content_items(self) -> List[ContentItem]:
        return (await self._load()).active_content()

    async def add_content_item(
        self,
        text: str,
        author: Optional[str] = None,
        order: Optional[int] = None,
        is_active: bool = True,
    ) -> ContentItem:
        async with self._write_lock:
            dataset = await self._load()
            item = dataset.add_content(text, author, order, is_active)
            await self._save(dataset)
        return item
