"""Team-count feasibility for a roster of a given size."""

from typing import Optional

from teamsort.constants import MAX_TEAM_SIZE, MIN_TEAM_SIZE, MIN_TEAMS
from teamsort.models import TeamOption


def players_per_team(player_count: int, team_count: int) -> int:
    """Players per team for this split, capped at MAX_TEAM_SIZE."""
    if team_count <= 0:
        return 0
    return min(player_count // team_count, MAX_TEAM_SIZE)


def enumerate_feasible_sizes(player_count: int) -> list[TeamOption]:
    """List every valid team count for the roster, ascending.

    A team count is valid when each team gets at least MIN_TEAM_SIZE
    players. Players beyond MAX_TEAM_SIZE per team become reserves.
    Returns an empty list when the roster is too small.
    """
    options = []
    for t in range(MIN_TEAMS, player_count + 1):
        per_team = players_per_team(player_count, t)
        if per_team < MIN_TEAM_SIZE:
            continue
        options.append(TeamOption(
            team_count=t,
            players_per_team=per_team,
            reserves=player_count - per_team * t,
        ))
    return options


def find_option(player_count: int, team_count: int) -> Optional[TeamOption]:
    for option in enumerate_feasible_sizes(player_count):
        if option.team_count == team_count:
            return option
    return None


def format_options_table(player_count: int) -> str:
    """Format the feasible team counts as a small text table."""
    options = enumerate_feasible_sizes(player_count)
    lines = [f"{player_count} players"]
    if not options:
        lines.append(
            f"  Not enough players: need at least "
            f"{MIN_TEAM_SIZE * MIN_TEAMS} for {MIN_TEAMS} teams"
        )
        return "\n".join(lines)

    lines.append(f"  {'Teams':>5} {'Per team':>8} {'Reserves':>8}")
    lines.append("  " + "-" * 23)
    for opt in options:
        lines.append(
            f"  {opt.team_count:>5} {opt.players_per_team:>8} {opt.reserves:>8}"
        )
    return "\n".join(lines)
