"""Constraint validation for the teamsort app.

`is_valid_partition` is the cheap predicate used inside the search loop.
`validate_partition` checks a finished (or re-imported) assignment and
explains every problem it finds.
"""

from collections import Counter
from typing import Optional

from teamsort.constants import MAX_TEAM_SIZE, MIN_GENDER_PER_TEAM
from teamsort.models import RESERVES, Gender, Partition, Player


def gender_quota_feasible(players: list[Player], team_count: int) -> bool:
    """True if every team can get MIN_GENDER_PER_TEAM of each gender."""
    need = team_count * MIN_GENDER_PER_TEAM
    males = sum(1 for p in players if p.gender is Gender.male)
    females = len(players) - males
    return males >= need and females >= need


def is_valid_partition(partition: Partition, enforce_gender: bool) -> bool:
    """Check the hard constraints: size balance, size cap, gender quota."""
    if not partition.teams:
        return True

    sizes = [len(t.players) for t in partition.teams]
    if max(sizes) - min(sizes) > 1:
        return False
    if max(sizes) > MAX_TEAM_SIZE:
        return False

    if enforce_gender:
        for team in partition.teams:
            if not team.players:
                continue
            males = team.male_count
            females = len(team.players) - males
            if males < MIN_GENDER_PER_TEAM or females < MIN_GENDER_PER_TEAM:
                return False
    return True


def validate_partition(partition: Partition, roster: list[Player],
                       locks: Optional[dict] = None,
                       enforce_gender: bool = True) -> dict:
    """Validate an assignment against the roster, locks and hard constraints.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft issues
    """
    errors = []
    warnings = []
    locks = locks or {}

    # Completeness: every rostered player placed exactly once
    placed = Counter(p.id for p in partition.all_players())
    roster_ids = {p.id for p in roster}
    names = {p.id: p.name for p in roster}

    for pid, count in sorted(placed.items()):
        if pid not in roster_ids:
            errors.append(f"Player #{pid} is assigned but not on the roster")
        elif count > 1:
            errors.append(f"{names[pid]} is assigned {count} times")
    for pid in sorted(roster_ids - set(placed)):
        errors.append(f"{names[pid]} is missing from teams and reserves")

    # Locks
    where: dict[int, object] = {p.id: RESERVES for p in partition.reserves}
    for i, team in enumerate(partition.teams):
        for p in team.players:
            where[p.id] = i
    for pid, target in sorted(locks.items(), key=lambda kv: kv[0]):
        if pid not in where:
            continue
        if where[pid] != target:
            errors.append(
                f"{names.get(pid, f'#{pid}')} is locked to "
                f"{_describe_slot(partition, target)} but placed in "
                f"{_describe_slot(partition, where[pid])}"
            )

    # Size balance / ceiling
    if partition.teams:
        sizes = [len(t.players) for t in partition.teams]
        if max(sizes) - min(sizes) > 1:
            detail = ", ".join(
                f"{t.label}={len(t.players)}" for t in partition.teams
            )
            errors.append(
                f"Team size spread {max(sizes) - min(sizes)} exceeds 1 "
                f"({detail})"
            )
        for team in partition.teams:
            if len(team.players) > MAX_TEAM_SIZE:
                errors.append(
                    f"{team.label} has {len(team.players)} players "
                    f"(max {MAX_TEAM_SIZE})"
                )
            if not team.players:
                warnings.append(f"{team.label} has no players")

    # Gender quota
    if enforce_gender:
        for team in partition.teams:
            if not team.players:
                continue
            if team.male_count < MIN_GENDER_PER_TEAM:
                errors.append(
                    f"{team.label} has {team.male_count} male players "
                    f"(min {MIN_GENDER_PER_TEAM})"
                )
            if team.female_count < MIN_GENDER_PER_TEAM:
                errors.append(
                    f"{team.label} has {team.female_count} female players "
                    f"(min {MIN_GENDER_PER_TEAM})"
                )
    else:
        warnings.append(
            "Gender quota not enforced: not enough players of each gender "
            "for this team count"
        )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def _describe_slot(partition: Partition, target) -> str:
    if target == RESERVES:
        return "reserves"
    if isinstance(target, int) and 0 <= target < len(partition.teams):
        return partition.teams[target].label
    return f"team #{target}"


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("TEAM VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no hard constraint violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
