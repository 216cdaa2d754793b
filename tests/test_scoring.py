"""Tests for scoring.py: objective components and breakdown."""

import pytest

from teamsort.models import (
    Gender, Partition, Player, Preference, PreferenceKind, Team,
)
from teamsort.scoring import (
    build_player_team_map, roster_baseline, score, score_assignment,
    score_total, team_average_rating,
)


def _p(pid, gender, rating):
    return Player(id=pid, name=f"P{pid}", gender=Gender.from_str(gender),
                  rating=rating)


def _pref(a, b, kind):
    return Preference(a, b, PreferenceKind[kind])


def _balanced():
    """Two identical teams: (M5, F5) vs (M5, F5)."""
    return Partition([
        Team("Team A", [_p(1, "m", 5), _p(2, "f", 5)]),
        Team("Team B", [_p(3, "m", 5), _p(4, "f", 5)]),
    ])


class TestHelpers:
    def test_team_average(self):
        team = Team("Team A", [_p(1, "m", 4), _p(2, "f", 8)])
        assert team_average_rating(team) == 6

    def test_empty_team_average_is_zero(self):
        assert team_average_rating(Team("Team A")) == 0

    def test_player_team_map(self):
        partition = _balanced()
        partition.reserves.append(_p(9, "m", 3))
        player_team = build_player_team_map(partition.teams)
        assert player_team == {1: 0, 2: 0, 3: 1, 4: 1}

    def test_baseline_includes_reserves(self):
        partition = _balanced()
        partition.reserves.append(_p(9, "m", 10))
        overall, male_ratio = roster_baseline(partition)
        assert overall == pytest.approx(6.0)
        assert male_ratio == pytest.approx(0.6)


class TestScoreAssignment:
    def test_perfect_balance_scores_zero(self):
        breakdown = score_assignment(_balanced(), [])
        assert breakdown.total == 0
        assert breakdown.rating.raw == 0
        assert breakdown.gender.raw == 0

    def test_rating_penalty(self):
        partition = Partition([
            Team("Team A", [_p(1, "m", 8), _p(2, "f", 8)]),
            Team("Team B", [_p(3, "m", 4), _p(4, "f", 4)]),
        ])
        breakdown = score_assignment(partition, [])
        # overall 6, each team off by 2
        assert breakdown.rating.raw == pytest.approx(-8.0)
        assert breakdown.rating.weighted == pytest.approx(-80.0)
        assert breakdown.gender.raw == 0
        assert breakdown.total == pytest.approx(-80.0)

    def test_reserves_shift_overall_average(self):
        partition = Partition(
            [Team("Team A", [_p(1, "m", 6), _p(2, "f", 6)]),
             Team("Team B", [_p(3, "m", 6), _p(4, "f", 6)])],
            reserves=[_p(5, "m", 10)],
        )
        breakdown = score_assignment(partition, [])
        assert breakdown.rating.raw == pytest.approx(-2 * 0.8 ** 2)
        # global male ratio 0.6, each team at 0.5
        assert breakdown.gender.raw == pytest.approx(-0.2)
        assert breakdown.gender.weighted == pytest.approx(-1.2)

    def test_gender_penalty(self):
        partition = Partition([
            Team("Team A", [_p(1, "m", 5), _p(2, "m", 5)]),
            Team("Team B", [_p(3, "f", 5), _p(4, "f", 5)]),
        ])
        breakdown = score_assignment(partition, [])
        assert breakdown.gender.raw == pytest.approx(-1.0)
        assert breakdown.gender.weighted == pytest.approx(-6.0)

    def test_must_pair_split(self):
        breakdown = score_assignment(
            _balanced(), [_pref(1, 3, "must_be_together")]
        )
        assert breakdown.strong_prefs.raw == -1
        assert breakdown.strong_prefs.weighted == -3
        assert len(breakdown.strong_prefs.violations) == 1
        v = breakdown.strong_prefs.violations[0]
        assert (v.player_a, v.player_b, v.kind) == ("P1", "P3", "split")
        assert breakdown.total == -3

    def test_must_pair_together_not_penalized(self):
        breakdown = score_assignment(
            _balanced(), [_pref(1, 2, "must_be_together")]
        )
        assert breakdown.strong_prefs.raw == 0
        assert breakdown.strong_prefs.violations == []

    def test_prefer_together_split(self):
        breakdown = score_assignment(
            _balanced(), [_pref(2, 4, "prefer_together")]
        )
        assert breakdown.soft_prefs.raw == -1
        assert breakdown.soft_prefs.weighted == -1
        assert breakdown.soft_prefs.violations[0].kind == "split"

    def test_prefer_apart_together(self):
        breakdown = score_assignment(
            _balanced(), [_pref(1, 2, "prefer_apart"),
                          _pref(1, 3, "prefer_apart")]
        )
        assert breakdown.soft_prefs.raw == -1
        assert breakdown.soft_prefs.violations[0].kind == "together"

    def test_reserve_pairs_ignored(self):
        partition = _balanced()
        partition.reserves.append(_p(9, "m", 5))
        prefs = [
            _pref(1, 9, "must_be_together"),
            _pref(2, 9, "prefer_together"),
            _pref(9, 3, "prefer_apart"),
        ]
        breakdown = score_assignment(partition, prefs)
        assert breakdown.strong_prefs.raw == 0
        assert breakdown.soft_prefs.raw == 0

    def test_total_is_sum_of_weighted(self):
        partition = Partition([
            Team("Team A", [_p(1, "m", 9), _p(2, "m", 7), _p(3, "f", 2)]),
            Team("Team B", [_p(4, "f", 3), _p(5, "f", 6), _p(6, "m", 4)]),
        ])
        prefs = [_pref(1, 4, "must_be_together"), _pref(2, 3, "prefer_apart")]
        b = score_assignment(partition, prefs)
        assert b.total == pytest.approx(
            b.rating.weighted + b.gender.weighted
            + b.strong_prefs.weighted + b.soft_prefs.weighted
        )
        assert b.total <= 0

    def test_pure(self):
        partition = _balanced()
        prefs = [_pref(1, 3, "must_be_together")]
        assert score_assignment(partition, prefs) == \
            score_assignment(partition, prefs)

    def test_score_alias(self):
        assert score is score_assignment


class TestScoreTotal:
    def test_matches_breakdown(self):
        partition = Partition(
            [Team("Team A", [_p(1, "m", 9), _p(2, "m", 7), _p(3, "f", 2)]),
             Team("Team B", [_p(4, "f", 3), _p(5, "f", 6), _p(6, "m", 4)])],
            reserves=[_p(7, "f", 8)],
        )
        prefs = [
            _pref(1, 4, "must_be_together"),
            _pref(2, 3, "prefer_apart"),
            _pref(5, 6, "prefer_together"),
            _pref(7, 1, "prefer_together"),
        ]
        player_team = build_player_team_map(partition.teams)
        fast = score_total(partition, prefs, player_team)
        assert fast == pytest.approx(score_assignment(partition, prefs).total)

    def test_precomputed_baseline(self):
        partition = _balanced()
        player_team = build_player_team_map(partition.teams)
        baseline = roster_baseline(partition)
        assert score_total(partition, [], player_team, baseline) == \
            score_total(partition, [], player_team)
