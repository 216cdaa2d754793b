"""Statistics and balance reporting for the teamsort app."""

from collections import Counter

from teamsort.models import Partition, ScoreBreakdown
from teamsort.scoring import team_average_rating


def compute_team_stats(partition: Partition) -> dict:
    """Compute per-team and roster-wide balance figures.

    Returns dict with:
    - teams: list of {label, size, male, female, avg, min, max, tiers}
    - reserves: count of reserve players
    - overall_avg: mean rating over every rostered player
    - avg_spread: max - min of the team averages
    """
    team_rows = []
    for team in partition.teams:
        ratings = [p.rating for p in team.players]
        team_rows.append({
            "label": team.label,
            "size": len(team.players),
            "male": team.male_count,
            "female": team.female_count,
            "avg": team_average_rating(team),
            "min": min(ratings) if ratings else 0,
            "max": max(ratings) if ratings else 0,
            "tiers": dict(Counter(p.tier for p in team.players if p.tier)),
        })

    players = partition.all_players()
    overall_avg = (
        sum(p.rating for p in players) / len(players) if players else 0.0
    )
    averages = [row["avg"] for row in team_rows if row["size"]]
    avg_spread = max(averages) - min(averages) if averages else 0.0

    return {
        "teams": team_rows,
        "reserves": len(partition.reserves),
        "overall_avg": overall_avg,
        "avg_spread": avg_spread,
    }


def format_stats_report(stats: dict) -> str:
    """Format team statistics into a human-readable report."""
    lines = []
    lines.append("=" * 60)
    lines.append("TEAM STATISTICS")
    lines.append("=" * 60)

    lines.append(f"\n{'Team':<10} {'Size':>4} {'M':>3} {'F':>3} "
                 f"{'Avg':>5} {'Min':>5} {'Max':>5}  Tiers")
    lines.append("-" * 60)
    for row in stats["teams"]:
        tiers = ", ".join(f"{k}:{v}" for k, v in sorted(row["tiers"].items()))
        lines.append(
            f"{row['label']:<10} {row['size']:>4} {row['male']:>3} "
            f"{row['female']:>3} {row['avg']:>5.2f} {row['min']:>5g} "
            f"{row['max']:>5g}  {tiers}"
        )

    lines.append("")
    lines.append(f"Reserves:           {stats['reserves']}")
    lines.append(f"Overall average:    {stats['overall_avg']:.2f}")
    lines.append(f"Team average spread: {stats['avg_spread']:.2f}")
    return "\n".join(lines)


def format_score_report(breakdown: ScoreBreakdown) -> str:
    """Format a score breakdown with its violation lists."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCORE BREAKDOWN")
    lines.append("=" * 60)

    lines.append(f"\n{'Component':<18} {'Raw':>10} {'Weighted':>10}")
    lines.append("-" * 40)
    rows = [
        ("Rating balance", breakdown.rating),
        ("Gender balance", breakdown.gender),
        ("Must-pairs", breakdown.strong_prefs),
        ("Soft-pairs", breakdown.soft_prefs),
    ]
    for name, comp in rows:
        lines.append(f"{name:<18} {comp.raw:>10.3f} {comp.weighted:>10.3f}")
    lines.append("-" * 40)
    lines.append(f"{'Total':<18} {'':>10} {breakdown.total:>10.3f}")

    if breakdown.strong_prefs.violations:
        lines.append(
            f"\n--- MUST-PAIR VIOLATIONS "
            f"({len(breakdown.strong_prefs.violations)}) ---"
        )
        for v in breakdown.strong_prefs.violations:
            lines.append(f"  {v.player_a} / {v.player_b}: split")

    if breakdown.soft_prefs.violations:
        lines.append(
            f"\n--- SOFT-PAIR VIOLATIONS "
            f"({len(breakdown.soft_prefs.violations)}) ---"
        )
        for v in breakdown.soft_prefs.violations:
            lines.append(f"  {v.player_a} / {v.player_b}: {v.kind}")

    return "\n".join(lines)
