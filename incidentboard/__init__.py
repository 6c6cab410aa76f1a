"""
Incidentboard - incident leaderboards and daily content rotation.

Turns agents and their incident log into ranked leaderboards, and picks a
date-seeded item of the day from a content pool.

The core (aggregation, ranking, daily selection) is pure.
No file I/O required. No database required.
Storage is injected through the IncidentStore interface.
"""

__version__ = "0.1.0"

# Core engines
from .aggregation import combined_score, fleet_statistics, summarize_agents
from .ranking import (
    RankingView,
    rank_agents,
    top_by_category,
    top_by_combined_score,
    top_by_cost,
    top_by_incidents,
)
from .daily import date_seed, select_daily_item, select_daily_item_for_today

# Recomputation
from .board import LeaderboardService, build_leaderboard_snapshot

# Store interface
from .store import (
    IncidentStore,
    InMemoryStore,
    JsonStore,
    StoreDataset,
    StoreUnavailableError,
)

# Schemas
from .schemas import (
    Agent,
    AgentSummary,
    ContentItem,
    FleetStatistics,
    IncidentCategory,
    IncidentRecord,
    LeaderboardEntry,
    LeaderboardSnapshot,
)

__all__ = [
    # Aggregation
    "summarize_agents",
    "combined_score",
    "fleet_statistics",
    # Ranking
    "RankingView",
    "rank_agents",
    "top_by_incidents",
    "top_by_cost",
    "top_by_combined_score",
    "top_by_category",
    # Daily rotation
    "date_seed",
    "select_daily_item",
    "select_daily_item_for_today",
    # Recomputation
    "build_leaderboard_snapshot",
    "LeaderboardService",
    # Store
    "IncidentStore",
    "InMemoryStore",
    "JsonStore",
    "StoreDataset",
    "StoreUnavailableError",
    # Schemas
    "Agent",
    "AgentSummary",
    "ContentItem",
    "FleetStatistics",
    "IncidentCategory",
    "IncidentRecord",
    "LeaderboardEntry",
    "LeaderboardSnapshot",
]
