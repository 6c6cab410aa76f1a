"""
Pydantic schemas for the incidentboard library.

All data structures shared by the aggregation, ranking and daily selection
engines (and by the store backends) are defined here.

Design Philosophy:
- Money is always `Decimal`; float arithmetic drifts across repeated sums
- Stored records (Agent, IncidentRecord, ContentItem) mirror the data store rows
- Derived records (AgentSummary, LeaderboardEntry, LeaderboardSnapshot) are
  produced by the core and never written back
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Stored records
# ============================================================================


class IncidentCategory(str, Enum):
    """Closed set of incident kinds."""

    BOAT = "boat"
    CAR = "car"
    PLANE = "plane"
    MOTORCYCLE = "motorcycle"
    OTHER = "other"


class Agent(BaseModel):
    """An agent being ranked.

    The two running totals are maintained by the data store when incidents are
    recorded. They are the source of truth for overall counts and cost, even
    when they disagree with the raw incident log.
    """

    id: str = Field(..., description="Opaque unique identifier")
    name: str = Field(..., min_length=1, description="Display name")
    agent_number: int = Field(..., description="Monotonically assigned display number")
    total_incidents: int = Field(0, description="Running incident total kept by the store")
    total_cost: Decimal = Field(Decimal("0"), description="Running cost total kept by the store")
    created_at: Optional[datetime] = Field(None, description="When the agent was registered")


class IncidentRecord(BaseModel):
    """A single incident attributed to one agent. Immutable once recorded."""

    id: str = Field(..., description="Opaque unique identifier")
    agent_id: str = Field(..., description="Agent this incident is attributed to")
    category: IncidentCategory = Field(..., description="Incident kind")
    cost: Decimal = Field(Decimal("0"), description="Cost attributable to this incident")
    description: Optional[str] = Field(None, description="Free-form account of what happened")
    occurred_at: Optional[datetime] = Field(None, description="When the incident happened")


class ContentItem(BaseModel):
    """An entry of the daily rotation pool (e.g. a quote of the day)."""

    id: str = Field(..., description="Opaque unique identifier")
    order: int = Field(..., description="Position of the item in the pool")
    is_active: bool = Field(True, description="Only active items take part in the rotation")
    text: str = Field("", description="Content shown to viewers")
    author: Optional[str] = Field(None, description="Optional attribution")


# ============================================================================
# Derived records
# ============================================================================


def empty_category_counts() -> Dict[IncidentCategory, int]:
    """Return a per-category mapping with every category set to zero."""
    return {category: 0 for category in IncidentCategory}


class AgentSummary(BaseModel):
    """An agent enriched with its per-category breakdown and combined score.

    `incidents_by_category` always carries every IncidentCategory key so that
    consumers never guard against missing entries. `combined_score` comes from
    the stored totals and is kept unrounded.
    """

    id: str
    name: str
    agent_number: int
    total_incidents: int
    total_cost: Decimal
    incidents_by_category: Dict[IncidentCategory, int] = Field(
        default_factory=empty_category_counts
    )
    combined_score: Decimal = Field(Decimal("0"))

    def category_count(self, category: IncidentCategory) -> int:
        return self.incidents_by_category.get(category, 0)


class LeaderboardEntry(BaseModel):
    """One row of a leaderboard: a 1-based row number plus the summary."""

    rank: int = Field(..., ge=1, description="Row number within the view")
    agent: AgentSummary


class FleetStatistics(BaseModel):
    """Totals across every agent (the general statistics panel)."""

    agent_count: int = 0
    total_incidents: int = 0
    total_cost: Decimal = Decimal("0")
    average_incidents: int = Field(0, description="Incidents per agent, rounded half up")


class LeaderboardSnapshot(BaseModel):
    """Every leaderboard computed from one fetch of agents and incidents.

    Agents and incidents are listed by separate store calls, so a write landing
    between them can make the breakdown and the stored totals disagree.
    """

    most_incidents: List[LeaderboardEntry] = Field(default_factory=list)
    highest_cost: List[LeaderboardEntry] = Field(default_factory=list)
    combined_score: List[LeaderboardEntry] = Field(default_factory=list)
    by_category: Dict[IncidentCategory, List[LeaderboardEntry]] = Field(default_factory=dict)
    statistics: FleetStatistics = Field(default_factory=FleetStatistics)
    computed_at: datetime
