"""Objective scoring for team assignments.

All components are penalties (<= 0) so a higher total is better. The fast
path (`score_total`) runs inside the hill climb and builds no violation
lists; `score_assignment` produces the full breakdown for display.
"""

from typing import Optional

from teamsort.constants import (
    WEIGHT_GENDER, WEIGHT_RATING, WEIGHT_SOFT_PREF, WEIGHT_STRONG_PREF,
)
from teamsort.models import (
    ComponentScore, Partition, PairViolation, Player, Preference,
    PreferenceKind, ScoreBreakdown, Team,
)


def team_average_rating(team: Team) -> float:
    if not team.players:
        return 0.0
    return sum(p.rating for p in team.players) / len(team.players)


def build_player_team_map(teams: list[Team]) -> dict[int, int]:
    """Map player id -> team index. Reserves are absent."""
    player_team = {}
    for i, team in enumerate(teams):
        for p in team.players:
            player_team[p.id] = i
    return player_team


def roster_baseline(partition: Partition) -> tuple[float, float]:
    """Return (overall average rating, male ratio) over every rostered player.

    Reserves count, so both values stay fixed while players are swapped.
    """
    players = partition.all_players()
    if not players:
        return 0.0, 0.0
    overall_avg = sum(p.rating for p in players) / len(players)
    male_ratio = sum(1 for p in players if p.is_male) / len(players)
    return overall_avg, male_ratio


def _rating_penalty(teams: list[Team], overall_avg: float) -> float:
    penalty = 0.0
    for team in teams:
        penalty -= (team_average_rating(team) - overall_avg) ** 2
    return penalty


def _gender_penalty(teams: list[Team], male_ratio: float) -> float:
    penalty = 0.0
    for team in teams:
        if not team.players:
            continue
        team_ratio = team.male_count / len(team.players)
        penalty -= abs(team_ratio - male_ratio)
    return penalty


def score_total(partition: Partition, preferences: list[Preference],
                player_team: dict[int, int],
                baseline: Optional[tuple[float, float]] = None) -> float:
    """Weighted total only. `player_team` must match the partition."""
    if baseline is None:
        baseline = roster_baseline(partition)
    overall_avg, male_ratio = baseline

    rating = _rating_penalty(partition.teams, overall_avg)
    gender = _gender_penalty(partition.teams, male_ratio)

    strong = 0
    soft = 0
    for pref in preferences:
        team_a = player_team.get(pref.player_a_id)
        team_b = player_team.get(pref.player_b_id)
        if team_a is None or team_b is None:
            continue
        if pref.kind is PreferenceKind.must_be_together:
            if team_a != team_b:
                strong -= 1
        elif pref.kind is PreferenceKind.prefer_together:
            if team_a != team_b:
                soft -= 1
        elif pref.kind is PreferenceKind.prefer_apart:
            if team_a == team_b:
                soft -= 1

    return (WEIGHT_RATING * rating
            + WEIGHT_GENDER * gender
            + WEIGHT_STRONG_PREF * strong
            + WEIGHT_SOFT_PREF * soft)


def score_assignment(partition: Partition,
                     preferences: list[Preference]) -> ScoreBreakdown:
    """Full score breakdown, including which preferences are violated."""
    player_team = build_player_team_map(partition.teams)
    names = _name_map(partition.all_players())
    overall_avg, male_ratio = roster_baseline(partition)

    rating_raw = _rating_penalty(partition.teams, overall_avg)
    gender_raw = _gender_penalty(partition.teams, male_ratio)

    strong_violations = []
    soft_violations = []
    for pref in preferences:
        team_a = player_team.get(pref.player_a_id)
        team_b = player_team.get(pref.player_b_id)
        # Only count pairs where both players are on teams (not reserves)
        if team_a is None or team_b is None:
            continue
        name_a = names.get(pref.player_a_id, f"#{pref.player_a_id}")
        name_b = names.get(pref.player_b_id, f"#{pref.player_b_id}")

        if pref.kind is PreferenceKind.must_be_together and team_a != team_b:
            strong_violations.append(PairViolation(name_a, name_b, "split"))
        elif pref.kind is PreferenceKind.prefer_together and team_a != team_b:
            soft_violations.append(PairViolation(name_a, name_b, "split"))
        elif pref.kind is PreferenceKind.prefer_apart and team_a == team_b:
            soft_violations.append(PairViolation(name_a, name_b, "together"))

    strong_raw = -len(strong_violations)
    soft_raw = -len(soft_violations)

    rating = ComponentScore(rating_raw, WEIGHT_RATING * rating_raw)
    gender = ComponentScore(gender_raw, WEIGHT_GENDER * gender_raw)
    strong = ComponentScore(strong_raw, WEIGHT_STRONG_PREF * strong_raw,
                            strong_violations)
    soft = ComponentScore(soft_raw, WEIGHT_SOFT_PREF * soft_raw,
                          soft_violations)

    return ScoreBreakdown(
        rating=rating,
        gender=gender,
        strong_prefs=strong,
        soft_prefs=soft,
        total=rating.weighted + gender.weighted + strong.weighted + soft.weighted,
    )


# Short name used by callers that think of this as "score the partition".
score = score_assignment


def _name_map(players: list[Player]) -> dict[int, str]:
    return {p.id: p.name for p in players}
