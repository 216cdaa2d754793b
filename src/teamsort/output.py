"""Output formatters for the teamsort app."""

import csv
from io import StringIO
from pathlib import Path
from typing import Optional

from teamsort.models import Player, SortResult
from teamsort.scoring import team_average_rating


CSV_HEADER = ["Team", "Player_ID", "Name", "Gender", "Rating", "Tier", "Locked"]
RESERVES_LABEL = "Reserves"


def _fmt_rating(rating) -> str:
    if rating is None:
        return ""
    return f"{rating:g}"


def format_teams(result: SortResult, title: str = "",
                 locked_ids: Optional[set[int]] = None) -> str:
    """Format teams and reserves as human-readable text."""
    locked_ids = locked_ids or set()
    lines = []
    lines.append("=" * 60)
    lines.append(title.upper() if title else "TEAMS")
    lines.append("=" * 60)

    def _player_line(p: Player) -> str:
        lock = " [locked]" if p.id in locked_ids else ""
        return (f"    {p.gender.symbol}  {p.name:<24} "
                f"{_fmt_rating(p.rating):>4}/10{lock}")

    for team in result.teams:
        count = len(team.players)
        lines.append(
            f"\n{team.label}  (avg {team_average_rating(team):.1f}, "
            f"{count} player{'s' if count != 1 else ''})"
        )
        for p in sorted(team.players, key=lambda x: (-x.rating, x.name)):
            lines.append(_player_line(p))

    if result.reserves:
        lines.append(f"\n{RESERVES_LABEL}  ({len(result.reserves)})")
        for p in sorted(result.reserves, key=lambda x: x.name):
            lines.append(_player_line(p))

    if not result.gender_enforced:
        lines.append("\nNote: gender quota not enforced for this team count.")

    return "\n".join(lines)


def format_assignment_csv(result: SortResult,
                          locked_ids: Optional[set[int]] = None) -> str:
    """Format the assignment as an editable CSV.

    Columns: Team, Player_ID, Name, Gender, Rating, Tier, Locked.
    Mark rows 'yes' in Locked and re-sort with --resort to keep them.
    """
    locked_ids = locked_ids or set()
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)

    def _row(label: str, p: Player) -> list:
        return [label, p.id, p.name, p.gender.value, _fmt_rating(p.rating),
                p.tier, "yes" if p.id in locked_ids else ""]

    for team in result.teams:
        for p in sorted(team.players, key=lambda x: x.name):
            writer.writerow(_row(team.label, p))
    for p in sorted(result.reserves, key=lambda x: x.name):
        writer.writerow(_row(RESERVES_LABEL, p))

    return output.getvalue()


def write_result(result: SortResult, output_prefix: str = "output",
                 title: str = "", locked_ids: Optional[set[int]] = None,
                 stats_text: str = ""):
    """Write all output files into {output_prefix}/ directory."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    teams_path = out_dir / "teams.txt"
    teams_path.write_text(format_teams(result, title=title,
                                       locked_ids=locked_ids))
    print(f"Written: {teams_path}")

    csv_path = out_dir / "assignment.csv"
    csv_path.write_text(format_assignment_csv(result, locked_ids=locked_ids))
    print(f"Written: {csv_path}")

    if stats_text:
        stats_path = out_dir / "stats.txt"
        stats_path.write_text(stats_text)
        print(f"Written: {stats_path}")
