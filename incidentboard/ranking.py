"""
Ranking engine producing leaderboards from agent summaries.

Each view sorts AgentSummary records on one key (descending) and keeps the
top N. Global views (incidents, cost, combined score) include every agent;
category views only include agents with at least one incident in that
category.

Ordering rules:
- Python's sort is stable, so agents with equal keys keep their input order.
  No secondary key (name, id) is applied.
- Ranks are row numbers: 1, 2, 3, ... in output order. Equal values never
  share a rank, so N rows always carry N distinct ranks.
- Asking for more rows than there are eligible agents returns all of them.

Usage:
    board = rank_agents(summaries, RankingView.COMBINED_SCORE, limit=10)
    boats = top_by_category(summaries, IncidentCategory.BOAT, limit=5)
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, ClassVar, List, Optional, Sequence, Union

from incidentboard.schemas import AgentSummary, IncidentCategory, LeaderboardEntry


SortKey = Callable[[AgentSummary], Union[int, Decimal]]


@dataclass(frozen=True)
class RankingView:
    """A named leaderboard: a sort key plus an optional category filter."""

    name: str
    key: SortKey
    category: Optional[IncidentCategory] = None

    # Global views, assigned below the class body
    INCIDENTS: ClassVar["RankingView"]
    COST: ClassVar["RankingView"]
    COMBINED_SCORE: ClassVar["RankingView"]

    def is_eligible(self, summary: AgentSummary) -> bool:
        if self.category is None:
            return True
        return summary.category_count(self.category) > 0

    @classmethod
    def for_category(cls, category: IncidentCategory) -> "RankingView":
        category = IncidentCategory(category)
        return cls(
            name=f"category:{category.value}",
            key=lambda summary: summary.category_count(category),
            category=category,
        )


RankingView.INCIDENTS = RankingView("incidents", lambda summary: summary.total_incidents)
RankingView.COST = RankingView("cost", lambda summary: summary.total_cost)
RankingView.COMBINED_SCORE = RankingView("combined_score", lambda summary: summary.combined_score)


def rank_agents(
    summaries: Sequence[AgentSummary],
    view: RankingView,
    limit: int,
) -> List[LeaderboardEntry]:
    """Sort, truncate and number one leaderboard.

    Args:
        summaries: Agent summaries in their reference order (ties keep it)
        view: Which key to sort on and which agents are eligible
        limit: Maximum number of rows; negative values yield no rows

    Returns:
        LeaderboardEntry list with ranks 1..len(result)
    """
    eligible = [summary for summary in summaries if view.is_eligible(summary)]
    # sorted(reverse=True) keeps equal elements in their original order
    ordered = sorted(eligible, key=view.key, reverse=True)
    top = ordered[: max(limit, 0)]
    return [
        LeaderboardEntry(rank=position, agent=summary)
        for position, summary in enumerate(top, start=1)
    ]


def top_by_incidents(summaries: Sequence[AgentSummary], limit: int) -> List[LeaderboardEntry]:
    return rank_agents(summaries, RankingView.INCIDENTS, limit)


def top_by_cost(summaries: Sequence[AgentSummary], limit: int) -> List[LeaderboardEntry]:
    return rank_agents(summaries, RankingView.COST, limit)


def top_by_combined_score(summaries: Sequence[AgentSummary], limit: int) -> List[LeaderboardEntry]:
    return rank_agents(summaries, RankingView.COMBINED_SCORE, limit)


def top_by_category(
    summaries: Sequence[AgentSummary],
    category: IncidentCategory,
    limit: int,
) -> List[LeaderboardEntry]:
    """Rank agents on one category, skipping agents with no incident in it."""
    return rank_agents(summaries, RankingView.for_category(category), limit)
