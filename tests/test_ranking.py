"""Tests for leaderboard ranking views."""

from dataclasses import fields
from decimal import Decimal

import pytest

from incidentboard.aggregation import summarize_agents
from incidentboard.ranking import (
    RankingView,
    rank_agents,
    top_by_category,
    top_by_combined_score,
    top_by_cost,
    top_by_incidents,
)
from incidentboard.schemas import Agent, AgentSummary, IncidentCategory, IncidentRecord


def summary(agent_id: str, incidents: int, cost: str, **categories: int) -> AgentSummary:
    by_category = {category: 0 for category in IncidentCategory}
    for name, count in categories.items():
        by_category[IncidentCategory(name)] = count
    return AgentSummary(
        id=agent_id,
        name=f"Agent {agent_id}",
        agent_number=int(agent_id),
        total_incidents=incidents,
        total_cost=Decimal(cost),
        incidents_by_category=by_category,
        combined_score=incidents * Decimal(cost),
    )


def ids(entries) -> list[str]:
    return [entry.agent.id for entry in entries]


def test_ties_keep_input_order():
    a = summary("1", 5, "1000")
    b = summary("2", 5, "500")

    assert ids(top_by_incidents([a, b], 10)) == ["1", "2"]
    assert ids(top_by_incidents([b, a], 10)) == ["2", "1"]


def test_combined_score_ranking():
    a = summary("1", 5, "1000")
    b = summary("2", 5, "500")

    board = top_by_combined_score([b, a], 10)

    assert [(entry.agent.id, entry.rank) for entry in board] == [("1", 1), ("2", 2)]
    assert board[0].agent.combined_score == Decimal("5000")
    assert board[1].agent.combined_score == Decimal("2500")


def test_cost_ranking_descending():
    agents = [summary("1", 1, "10.50"), summary("2", 1, "10.49"), summary("3", 1, "99")]
    assert ids(top_by_cost(agents, 10)) == ["3", "1", "2"]


def test_ranks_are_row_numbers_even_for_ties():
    agents = [summary(str(n), 2, "10") for n in range(1, 5)]

    board = top_by_incidents(agents, 10)

    assert [entry.rank for entry in board] == [1, 2, 3, 4]


def test_truncates_to_limit():
    agents = [summary(str(n), n, "1") for n in range(1, 8)]

    board = top_by_incidents(agents, 3)

    assert len(board) == 3
    assert ids(board) == ["7", "6", "5"]


def test_limit_larger_than_population_returns_everyone():
    agents = [summary("1", 1, "1"), summary("2", 0, "0")]
    assert len(top_by_incidents(agents, 10)) == 2


@pytest.mark.parametrize("limit", [0, -3])
def test_non_positive_limit_returns_nothing(limit):
    assert rank_agents([summary("1", 1, "1")], RankingView.INCIDENTS, limit) == []


def test_empty_input():
    assert top_by_cost([], 10) == []
    assert top_by_category([], IncidentCategory.CAR, 5) == []


def test_category_view_excludes_agents_without_incidents_in_category():
    agents = [
        Agent(id="1", name="One", agent_number=1, total_incidents=3),
        Agent(id="2", name="Two", agent_number=2),
        Agent(id="3", name="Three", agent_number=3, total_incidents=1),
    ]
    incidents = [
        IncidentRecord(id="i1", agent_id="1", category="car"),
        IncidentRecord(id="i2", agent_id="1", category="car"),
        IncidentRecord(id="i3", agent_id="1", category="boat"),
        IncidentRecord(id="i4", agent_id="3", category="plane"),
    ]

    board = top_by_category(summarize_agents(agents, incidents), IncidentCategory.BOAT, 5)

    assert len(board) == 1
    assert board[0].rank == 1
    assert board[0].agent.id == "1"


def test_category_view_sorts_by_category_count():
    agents = [summary("1", 9, "1", car=1), summary("2", 2, "1", car=2), summary("3", 3, "1", car=2)]

    board = top_by_category(agents, "car", 5)

    assert ids(board) == ["2", "3", "1"]


def test_global_views_include_agents_with_zero_incidents():
    agents = [summary("1", 0, "0"), summary("2", 0, "0")]
    assert len(top_by_combined_score(agents, 10)) == 2


def test_for_category_view_metadata():
    view = RankingView.for_category(IncidentCategory.PLANE)
    assert view.name == "category:plane"
    assert view.category is IncidentCategory.PLANE
    assert RankingView.COST.category is None


def test_ranking_is_repeatable():
    agents = [summary("1", 3, "7"), summary("2", 3, "7"), summary("3", 1, "50")]
    assert top_by_cost(agents, 2) == top_by_cost(agents, 2)


def test_category_view_filters_before_truncating():
    agents = [
        summary("1", 4, "1"),
        summary("2", 1, "1", car=1),
        summary("3", 3, "1", car=3),
        summary("4", 2, "1", car=2),
        summary("5", 0, "0"),
    ]

    board = top_by_category(agents, IncidentCategory.CAR, 2)

    assert ids(board) == ["3", "4"]
    assert [entry.rank for entry in board] == [1, 2]
    assert [entry.agent.category_count(IncidentCategory.CAR) for entry in board] == [3, 2]


def test_global_views_are_class_constants_not_fields():
    assert [field.name for field in fields(RankingView)] == ["name", "key", "category"]
    assert isinstance(RankingView.INCIDENTS, RankingView)
    assert RankingView.COMBINED_SCORE.name == "combined_score"
