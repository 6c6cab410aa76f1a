"""
Aggregation of raw incident records into per-agent summaries.

The engine joins the agent list (with the running totals kept by the data
store) against the raw incident log and produces one AgentSummary per agent.

Two sources of truth are surfaced side by side and never reconciled:
- Stored totals (total_incidents, total_cost) drive the combined score
- Recounted incidents drive the per-category breakdown

If the store and the incident log drift apart, both numbers are reported as
computed. Incidents that reference an unknown agent are ignored. Nothing is
validated here; validation happens when the store accepts a write.

Usage:
    summaries = summarize_agents(agents, incidents)
    stats = fleet_statistics(summaries)
"""

from collections import Counter, defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Sequence, Union

from incidentboard.schemas import (
    Agent,
    AgentSummary,
    FleetStatistics,
    IncidentRecord,
    empty_category_counts,
)


def combined_score(total_incidents: int, total_cost: Decimal) -> Decimal:
    """Return incident count × total cost, without rounding."""
    return Decimal(total_incidents) * Decimal(total_cost)


def count_by_category(incidents: Iterable[IncidentRecord]) -> Dict[str, Counter]:
    """Group incidents into agent_id -> Counter(category) in a single pass."""
    counts: Dict[str, Counter] = defaultdict(Counter)
    for incident in incidents:
        counts[incident.agent_id][incident.category] += 1
    return counts


def summarize_agents(
    agents: Sequence[Agent],
    incidents: Iterable[IncidentRecord],
) -> List[AgentSummary]:
    """Build one AgentSummary per agent, preserving the agent order.

    Args:
        agents: Agents as returned by the store (ordering is kept)
        incidents: Raw incident log in any order; may be empty

    Returns:
        List of AgentSummary, one per input agent
    """
    counts = count_by_category(incidents)

    summaries: List[AgentSummary] = []
    for agent in agents:
        # .get keeps the defaultdict from growing entries for agents without incidents
        agent_counts = counts.get(agent.id, {})
        by_category = empty_category_counts()
        for category in by_category:
            by_category[category] = agent_counts.get(category, 0)
        summaries.append(
            AgentSummary(
                id=agent.id,
                name=agent.name,
                agent_number=agent.agent_number,
                total_incidents=agent.total_incidents,
                total_cost=agent.total_cost,
                incidents_by_category=by_category,
                combined_score=combined_score(agent.total_incidents, agent.total_cost),
            )
        )
    return summaries


def fleet_statistics(agents: Sequence[Union[Agent, AgentSummary]]) -> FleetStatistics:
    """Sum the stored totals across the fleet.

    The average is rounded half up to a whole number of incidents and is zero
    for an empty fleet.
    """
    if not agents:
        return FleetStatistics()

    total_incidents = sum(agent.total_incidents for agent in agents)
    total_cost = sum((Decimal(agent.total_cost) for agent in agents), Decimal("0"))
    average = (Decimal(total_incidents) / len(agents)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )

    return FleetStatistics(
        agent_count=len(agents),
        total_incidents=total_incidents,
        total_cost=total_cost,
        average_incidents=int(average),
    )
