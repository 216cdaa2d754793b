"""Standalone verifier for the teamsort app.

Validates and scores an assignment CSV (as written by `teamsort`) against
an event config.
Usage: teamsort-verify <assignment.csv> [config.yaml]
"""

import csv
import sys
from pathlib import Path
from typing import Optional

from teamsort.config import (
    load_config, parse_gender, parse_lock_target, parse_rating,
)
from teamsort.constraints import (
    format_validation_report, gender_quota_feasible, validate_partition,
)
from teamsort.models import RESERVES, Partition, Player, Team
from teamsort.scoring import score_assignment
from teamsort.sorter import team_label
from teamsort.stats import (
    compute_team_stats, format_score_report, format_stats_report,
)


def parse_csv_assignment(csv_path: str, config: dict,
                         team_count: Optional[int] = None,
                         ) -> tuple[Partition, set[int]]:
    """Parse an assignment CSV back into a Partition.

    Rows for players in the config use the config's player record; unknown
    ids are rebuilt from the CSV columns so validation can report them.
    Returns (partition, ids of rows marked Locked).
    """
    roster = {p.id: p.with_default_rating() for p in config["players"]}
    placements: list[tuple[object, Player]] = []
    locked_ids: set[int] = set()

    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            pid_str = (row.get("Player_ID") or "").strip()
            label = (row.get("Team") or "").strip()
            if not pid_str or not label:
                continue

            pid = int(pid_str)
            if pid in roster:
                player = roster[pid]
            else:
                player = Player(
                    id=pid,
                    name=(row.get("Name") or f"#{pid}").strip(),
                    gender=parse_gender(row.get("Gender") or "male"),
                    rating=parse_rating(row.get("Rating")),
                    tier=(row.get("Tier") or "").strip(),
                ).with_default_rating()

            placements.append((parse_lock_target(label), player))
            locked = (row.get("Locked") or "").strip().lower()
            if locked in ("yes", "y", "true", "1", "x"):
                locked_ids.add(pid)

    indices = [t for t, _ in placements if t != RESERVES]
    count = max(indices) + 1 if indices else 0
    if team_count is not None:
        count = max(count, team_count)

    teams = [Team(team_label(i)) for i in range(count)]
    reserves = []
    for target, player in placements:
        if target == RESERVES:
            reserves.append(player)
        else:
            teams[target].players.append(player)

    return Partition(teams=teams, reserves=reserves), locked_ids


def verify_assignment(csv_path: str, config: dict) -> dict:
    """Validate and score an assignment CSV.

    Returns dict with partition, locked_ids, validation result and score.
    """
    partition, locked_ids = parse_csv_assignment(
        csv_path, config, team_count=config["event"].get("team_count")
    )
    roster = [p.with_default_rating() for p in config["players"]]
    enforce_gender = gender_quota_feasible(roster, len(partition.teams))

    result = validate_partition(partition, roster, locks=config["locks"],
                                enforce_gender=enforce_gender)
    breakdown = score_assignment(partition, config["preferences"])
    return {
        "partition": partition,
        "locked_ids": locked_ids,
        "validation": result,
        "score": breakdown,
    }


def main():
    if len(sys.argv) < 2:
        print("Usage: teamsort-verify <assignment.csv> [config.yaml]")
        print("  Validates an assignment CSV against the event config.")
        sys.exit(1)

    csv_path = sys.argv[1]
    config_path = sys.argv[2] if len(sys.argv) > 2 else "config.yaml"

    if not Path(csv_path).exists():
        print(f"Error: {csv_path} not found")
        sys.exit(1)
    if not Path(config_path).exists():
        print(f"Error: {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    config = load_config(config_path)

    print(f"Parsing assignment from {csv_path}...")
    report = verify_assignment(csv_path, config)
    partition = report["partition"]
    print(f"Loaded {len(partition.all_players())} players "
          f"in {len(partition.teams)} teams")

    print(format_validation_report(report["validation"]))
    print("\n" + format_stats_report(compute_team_stats(partition)))
    print("\n" + format_score_report(report["score"]))
    sys.exit(0 if report["validation"]["valid"] else 1)


if __name__ == "__main__":
    main()
