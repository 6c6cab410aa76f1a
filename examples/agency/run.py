"""Print every leaderboard and the quote of the day for a JSON dataset.

    uv run python examples/agency/run.py
    uv run python examples/agency/run.py --dataset path/to/data.json --top 3 --date 2024-05-01

The dataset defaults to `DATASET_PATH` (see incidentboard.config).
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date
from pathlib import Path
from typing import List

from incidentboard import (
    IncidentCategory,
    JsonStore,
    LeaderboardEntry,
    LeaderboardService,
)
from incidentboard.config import Config
from incidentboard.logging_utils import Color, colored, log_info


def format_board(title: str, entries: List[LeaderboardEntry], value) -> str:
    lines = [colored(title, Color.CYAN, bold=True)]
    if not entries:
        lines.append("  (nobody)")
    for entry in entries:
        agent = entry.agent
        lines.append(
            f"  #{entry.rank:<3} {agent.name:<20} Agent #{agent.agent_number:<4} {value(entry)}"
        )
    return "\n".join(lines)


async def main(dataset: Path, top_n: int, category_top_n: int, day: date) -> None:
    store = JsonStore(dataset)
    await store.initialize()
    service = LeaderboardService(store, top_n=top_n, category_top_n=category_top_n)

    snapshot = await service.refresh()
    if snapshot is None:
        log_info("Data unavailable; nothing to show")
        return

    print(format_board("Most incidents", snapshot.most_incidents,
                       lambda e: f"{e.agent.total_incidents} incidents"))
    print(format_board("Highest total cost", snapshot.highest_cost,
                       lambda e: f"{e.agent.total_cost:,.2f}"))
    print(format_board("Combined score (incidents x cost)", snapshot.combined_score,
                       lambda e: f"{e.agent.combined_score:,.2f}"))

    for category in IncidentCategory:
        print(format_board(
            f"Category: {category.value}",
            snapshot.by_category[category],
            lambda e, c=category: str(e.agent.incidents_by_category[c]),
        ))

    stats = snapshot.statistics
    print(colored("Fleet", Color.CYAN, bold=True))
    print(f"  Agents: {stats.agent_count}")
    print(f"  Incidents: {stats.total_incidents}")
    print(f"  Cost: {stats.total_cost:,.2f}")
    print(f"  Average incidents: {stats.average_incidents}")

    item = await service.daily_item(day)
    if item is not None:
        attribution = f" ({item.author})" if item.author else ""
        print(colored(f"\nQuote of {day.isoformat()}: \"{item.text}\"{attribution}", Color.GREEN))

    await store.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Incident leaderboards")
    parser.add_argument("--dataset", type=Path, default=Config.DATASET_PATH)
    parser.add_argument("--top", type=int, default=Config.LEADERBOARD_TOP_N,
                        help="Rows per global leaderboard")
    parser.add_argument("--category-top", type=int, default=Config.CATEGORY_TOP_N,
                        help="Rows per category leaderboard")
    parser.add_argument("--date", type=date.fromisoformat, default=date.today(),
                        help="Calendar day for the quote (YYYY-MM-DD)")
    args = parser.parse_args()

    Config.validate()
    asyncio.run(main(args.dataset, args.top, args.category_top, args.date))
