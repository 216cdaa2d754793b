#!/usr/bin/env python3
"""Pickup game team sorter.

Sort mode (default):
    teamsort [config.yaml] [--teams N] [--seed N] [-o DIR]

    Sorts the roster from the event YAML into balanced teams and writes:
      {DIR}/teams.txt       - Human-readable teams + reserves
      {DIR}/assignment.csv  - Editable assignment (mark Locked to keep)
      {DIR}/stats.txt       - Validation report, team stats, score breakdown

Options mode:
    teamsort --options [config.yaml]

    Lists every feasible team count for the roster size.

Re-sort mode:
    teamsort --resort output/assignment.csv [config.yaml]

    Keeps every row marked Locked in a previous assignment where it was and
    sorts everyone else again.

Verify mode:
    teamsort --verify assignment.csv [config.yaml]

    Re-imports an assignment CSV and checks it against the config.
    Exit code 0 if valid, 1 if violations found.

Examples:
    teamsort                              # default config, random seed
    teamsort --teams 3 --seed 42 -o sat   # reproducible, custom directory
    teamsort --resort sat/assignment.csv
"""

import argparse
import sys
from pathlib import Path

from teamsort.config import load_config
from teamsort.constants import HILL_CLIMB_STARTS
from teamsort.constraints import format_validation_report, validate_partition
from teamsort.output import format_teams, write_result
from teamsort.sorter import locks_from_result, sort_teams
from teamsort.stats import (
    compute_team_stats, format_score_report, format_stats_report,
)
from teamsort.teamcalc import (
    enumerate_feasible_sizes, find_option, format_options_table,
)
from teamsort.verify import parse_csv_assignment, verify_assignment


def main():
    parser = argparse.ArgumentParser(
        description="Pickup game team sorter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Output files (sort mode):
  {dir}/teams.txt        Human-readable teams and reserves
  {dir}/assignment.csv   Editable assignment CSV
  {dir}/stats.txt        Validation report + statistics + score

Exit codes:
  0  Teams valid
  1  Constraint violations found, or input error
""",
    )
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to event YAML file (default: config.yaml)"
    )
    parser.add_argument(
        "--teams", "-t", type=int, default=None,
        help="Number of teams (default: event.team_count, else the "
             "smallest feasible count)"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for reproducible teams"
    )
    parser.add_argument(
        "--starts", type=int, default=HILL_CLIMB_STARTS,
        help=f"Random restarts of the optimizer (default: {HILL_CLIMB_STARTS})"
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--options", action="store_true",
        help="List feasible team counts for the roster and exit"
    )
    parser.add_argument(
        "--resort", metavar="CSV",
        help="Keep rows marked Locked in a previous assignment CSV and "
             "sort the rest again"
    )
    parser.add_argument(
        "--verify", metavar="CSV",
        help="Verify an existing assignment CSV instead of sorting"
    )
    args = parser.parse_args()

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    config = load_config(config_path)
    players = config["players"]

    if not players:
        print("Error: no players in config!")
        sys.exit(1)

    if args.options:
        print(format_options_table(len(players)))
        return

    if args.verify:
        print(f"Verifying assignment from {args.verify}...")
        report = verify_assignment(args.verify, config)
        print(format_validation_report(report["validation"]))
        print("\n" + format_stats_report(
            compute_team_stats(report["partition"])
        ))
        print("\n" + format_score_report(report["score"]))
        sys.exit(0 if report["validation"]["valid"] else 1)

    team_count = args.teams or config["event"].get("team_count")
    locks = dict(config["locks"])

    if args.resort:
        print(f"Keeping locked placements from {args.resort}...")
        previous, locked_ids = parse_csv_assignment(args.resort, config)
        locks.update(locks_from_result(
            previous.teams, previous.reserves, locked_ids
        ))
        if team_count is None:
            team_count = len(previous.teams)
        print(f"  {len(locked_ids)} players locked")

    if team_count is None:
        options = enumerate_feasible_sizes(len(players))
        if options:
            team_count = options[0].team_count

    option = find_option(len(players), team_count) if team_count else None
    if option is None:
        print(f"Error: cannot split {len(players)} players into "
              f"{team_count} teams")
        print(format_options_table(len(players)))
        sys.exit(1)

    print(f"Sorting {len(players)} players into {option.team_count} teams "
          f"of {option.players_per_team} ({option.reserves} reserves, "
          f"seed={args.seed})...")
    result = sort_teams(
        players, option.team_count,
        preferences=config["preferences"],
        locks=locks,
        seed=args.seed,
        starts=args.starts,
    )

    locked_ids = set(locks)
    title = config["event"].get("name", "")
    print("\n" + format_teams(result, title=title, locked_ids=locked_ids))

    # Validate
    print("\nValidating...")
    roster = [p.with_default_rating() for p in players]
    validation = validate_partition(
        result.partition, roster, locks=locks,
        enforce_gender=result.gender_enforced,
    )
    report = format_validation_report(validation)
    print(report)

    # Stats
    stats_text = format_stats_report(compute_team_stats(result.partition))
    score_text = format_score_report(result.score)
    print("\n" + stats_text)
    print("\n" + score_text)

    print("\nWriting output files...")
    write_result(
        result, output_prefix=args.output_prefix, title=title,
        locked_ids=locked_ids,
        stats_text=report + "\n\n" + stats_text + "\n\n" + score_text,
    )

    if validation["valid"]:
        print("\nTeams sorted successfully!")
    else:
        print(f"\nTeams have {len(validation['errors'])} constraint violations.")
        print("Review errors above and adjust locks or team count.")
        sys.exit(1)


if __name__ == "__main__":
    main()
