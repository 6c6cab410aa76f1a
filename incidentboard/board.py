"""
Leaderboard recomputation and the store-backed service around it.

Fully decoupled from scheduling: nothing here decides when to refresh.
Callers trigger recomputation (on load, on a refresh signal, on a timer).

build_leaderboard_snapshot() is the pure operation:
1. Aggregate incidents into per-agent summaries
2. Rank the summaries under every view
3. Compute fleet statistics

LeaderboardService adds the store boundary:
1. Fetch agents and incidents from the injected IncidentStore
2. Recompute the snapshot
3. Keep the previous snapshot when the store is unavailable
"""

from datetime import date, datetime, timezone
from typing import Optional, Sequence

from .aggregation import fleet_statistics, summarize_agents
from .config import Config
from .daily import select_daily_item
from .logging_utils import log_deterministic, log_error, log_info, log_success
from .ranking import (
    top_by_category,
    top_by_combined_score,
    top_by_cost,
    top_by_incidents,
)
from .schemas import (
    Agent,
    ContentItem,
    IncidentCategory,
    IncidentRecord,
    LeaderboardSnapshot,
)
from .store import IncidentStore, StoreUnavailableError


def build_leaderboard_snapshot(
    agents: Sequence[Agent],
    incidents: Sequence[IncidentRecord],
    top_n: Optional[int] = None,
    category_top_n: Optional[int] = None,
    computed_at: Optional[datetime] = None,
) -> LeaderboardSnapshot:
    """Compute every leaderboard from already-fetched data.

    Args:
        agents: Agents in reference order (ties in every view keep this order)
        incidents: Full incident log
        top_n: Rows per global view (defaults to Config.LEADERBOARD_TOP_N)
        category_top_n: Rows per category view (defaults to Config.CATEGORY_TOP_N)
        computed_at: Timestamp to stamp on the snapshot (defaults to now, UTC)

    Returns:
        LeaderboardSnapshot with all views and fleet statistics
    """
    top_n = Config.LEADERBOARD_TOP_N if top_n is None else top_n
    category_top_n = Config.CATEGORY_TOP_N if category_top_n is None else category_top_n

    summaries = summarize_agents(agents, incidents)

    return LeaderboardSnapshot(
        most_incidents=top_by_incidents(summaries, top_n),
        highest_cost=top_by_cost(summaries, top_n),
        combined_score=top_by_combined_score(summaries, top_n),
        by_category={
            category: top_by_category(summaries, category, category_top_n)
            for category in IncidentCategory
        },
        statistics=fleet_statistics(summaries),
        computed_at=computed_at or datetime.now(timezone.utc),
    )


class LeaderboardService:
    """Fetch from a store, recompute, and remember the last good snapshot.

    A failed refresh never clears what was computed before: viewers keep the
    stale leaderboards and the failure is logged. Pass strict=True to
    refresh() to get the StoreUnavailableError instead.

    Usage:
        service = LeaderboardService(JsonStore("data.json"))
        snapshot = await service.refresh()
        quote = await service.daily_item(date.today())
    """

    def __init__(
        self,
        store: IncidentStore,
        top_n: Optional[int] = None,
        category_top_n: Optional[int] = None,
    ):
        self.store = store
        self.top_n = top_n
        self.category_top_n = category_top_n
        self.snapshot: Optional[LeaderboardSnapshot] = None
        self.last_error: Optional[StoreUnavailableError] = None

    async def refresh(self, strict: bool = False) -> Optional[LeaderboardSnapshot]:
        """Recompute the leaderboards from the store.

        Returns:
            The new snapshot, or the previous one (possibly None) if the
            store was unavailable and strict is False

        Raises:
            StoreUnavailableError: Only when strict is True
        """
        try:
            agents = await self.store.list_agents()
            incidents = await self.store.list_incidents()
        except StoreUnavailableError as exc:
            self.last_error = exc
            log_error(f"Leaderboard data unavailable: {exc}")
            if strict:
                raise
            return self.snapshot

        log_deterministic(
            f"Recomputing leaderboards ({len(agents)} agents, {len(incidents)} incidents)"
        )
        snapshot = build_leaderboard_snapshot(
            agents,
            incidents,
            top_n=self.top_n,
            category_top_n=self.category_top_n,
        )
        if Config.is_debug():
            for category, entries in snapshot.by_category.items():
                log_info(f"  {category.value}: {len(entries)} ranked agents")

        self.snapshot = snapshot
        self.last_error = None
        log_success("Leaderboards updated")
        return snapshot

    async def daily_item(self, day: date) -> Optional[ContentItem]:
        """Return the featured content item for `day`.

        An empty pool yields None: the selector is simply not called. An
        unavailable store also yields None, after logging the failure.
        """
        try:
            pool = await self.store.list_active_content_items()
        except StoreUnavailableError as exc:
            self.last_error = exc
            log_error(f"Content pool unavailable: {exc}")
            return None

        if not pool:
            log_info("No active content items; skipping daily selection")
            return None
        return select_daily_item(pool, day)
