"""Team sorting engine for the teamsort app.

Three phases per restart:
1. Initial assignment: locked players first, then free players shuffled and
   dealt into teams (gender-aware round-robin when the quota is feasible).
2. Hill climb: steepest ascent over single swaps (team-team and
   team-reserve) until no swap strictly improves the score.
3. Multi-start: repeat 1-2 HILL_CLIMB_STARTS times with independent random
   generators and keep the best-scoring partition.

Core principle: locked players never move, and every tentative swap is
undone by the same swap before the next candidate is tried.
"""

import random
from typing import Optional

from teamsort.constants import HILL_CLIMB_STARTS
from teamsort.constraints import gender_quota_feasible, is_valid_partition
from teamsort.models import (
    RESERVES, Gender, Partition, Player, Preference, SortResult, Team,
)
from teamsort.scoring import (
    build_player_team_map, roster_baseline, score_assignment, score_total,
)
from teamsort.teamcalc import players_per_team


def team_label(index: int) -> str:
    """'Team A' .. 'Team Z', then 'Team 27' onwards."""
    if index < 26:
        return f"Team {chr(ord('A') + index)}"
    return f"Team {index + 1}"


# ---------------------------------------------------------------------------
# Phase 1: Initial assignment
# ---------------------------------------------------------------------------

def _deal_round_robin(pool: list[Player], teams: list[Team], per_team: int,
                      cursor: int) -> tuple[list[Player], int]:
    """Deal players one per team in index order, skipping full teams.

    Each player goes to the next team (from `cursor`, wrapping) among the
    non-full teams with the fewest players, so teams that start short
    because of locks catch up before the deal moves on.

    Returns (players that found no room, cursor for the next deal).
    """
    leftover = []
    n = len(teams)
    for player in pool:
        open_sizes = [len(t.players) for t in teams
                      if len(t.players) < per_team]
        if not open_sizes:
            leftover.append(player)
            continue
        smallest = min(open_sizes)
        for step in range(n):
            idx = (cursor + step) % n
            if len(teams[idx].players) == smallest:
                teams[idx].players.append(player)
                cursor = (idx + 1) % n
                break
    return leftover, cursor


def generate_initial_assignment(players: list[Player], team_count: int,
                                enforce_gender: bool,
                                locks: Optional[dict] = None,
                                rng: Optional[random.Random] = None,
                                ) -> Partition:
    """Build one randomized starting partition.

    Locked players are placed first. The result is not guaranteed to satisfy
    every hard constraint; the hill climb only ever moves between valid
    neighbours.
    """
    locks = locks or {}
    rng = rng or random.Random()

    teams = [Team(team_label(i)) for i in range(team_count)]
    reserves: list[Player] = []
    free: list[Player] = []

    for p in players:
        if p.id not in locks:
            free.append(p)
            continue
        target = locks[p.id]
        if target != RESERVES and isinstance(target, int) \
                and 0 <= target < team_count:
            teams[target].players.append(p)
        else:
            reserves.append(p)

    per_team = players_per_team(len(players), team_count)

    if not teams:
        reserves.extend(free)
    elif enforce_gender:
        males = [p for p in free if p.gender is Gender.male]
        females = [p for p in free if p.gender is Gender.female]
        rng.shuffle(males)
        rng.shuffle(females)

        # Alternate one round of each pool so both genders reach every team
        # before either pool can fill the teams. One cursor is shared so a
        # short last round of one pool is continued by the other.
        cursor = 0
        pools = {Gender.male: males, Gender.female: females}
        while pools[Gender.male] or pools[Gender.female]:
            for gender in (Gender.male, Gender.female):
                chunk = pools[gender][:team_count]
                pools[gender] = pools[gender][team_count:]
                if not chunk:
                    continue
                leftover, cursor = _deal_round_robin(
                    chunk, teams, per_team, cursor
                )
                reserves.extend(leftover)
    else:
        rng.shuffle(free)
        leftover, _ = _deal_round_robin(free, teams, per_team, 0)
        reserves.extend(leftover)

    return Partition(teams=teams, reserves=reserves)


# ---------------------------------------------------------------------------
# Phase 2: Hill climb
# ---------------------------------------------------------------------------

def _swap_between_teams(partition: Partition, player_team: dict[int, int],
                        a: int, i: int, b: int, j: int) -> None:
    """Exchange player i of team a with player j of team b (self-inverse)."""
    team_a = partition.teams[a].players
    team_b = partition.teams[b].players
    team_a[i], team_b[j] = team_b[j], team_a[i]
    player_team[team_a[i].id] = a
    player_team[team_b[j].id] = b


def _swap_with_reserve(partition: Partition, player_team: dict[int, int],
                       a: int, i: int, r: int) -> None:
    """Exchange player i of team a with reserve r (self-inverse)."""
    team = partition.teams[a].players
    reserves = partition.reserves
    team[i], reserves[r] = reserves[r], team[i]
    player_team.pop(reserves[r].id, None)
    player_team[team[i].id] = a


def hill_climb(partition: Partition, preferences: list[Preference],
               enforce_gender: bool,
               locks: Optional[dict] = None) -> list[float]:
    """Steepest-ascent hill climb, mutating `partition` in place.

    Returns the score trace: the starting score followed by the score after
    each accepted move. The trace is strictly increasing.
    """
    locked = set(locks or {})
    teams = partition.teams
    reserves = partition.reserves
    player_team = build_player_team_map(teams)
    baseline = roster_baseline(partition)

    current = score_total(partition, preferences, player_team, baseline)
    trace = [current]

    while True:
        best_score = current
        best_move = None

        # Team <-> team swaps
        for a in range(len(teams)):
            for b in range(a + 1, len(teams)):
                for i in range(len(teams[a].players)):
                    if teams[a].players[i].id in locked:
                        continue
                    for j in range(len(teams[b].players)):
                        if teams[b].players[j].id in locked:
                            continue
                        _swap_between_teams(partition, player_team, a, i, b, j)
                        if is_valid_partition(partition, enforce_gender):
                            s = score_total(partition, preferences,
                                            player_team, baseline)
                            if s > best_score:
                                best_score = s
                                best_move = ("team", a, i, b, j)
                        _swap_between_teams(partition, player_team, a, i, b, j)

        # Team <-> reserve swaps
        for a in range(len(teams)):
            for i in range(len(teams[a].players)):
                if teams[a].players[i].id in locked:
                    continue
                for r in range(len(reserves)):
                    if reserves[r].id in locked:
                        continue
                    _swap_with_reserve(partition, player_team, a, i, r)
                    if is_valid_partition(partition, enforce_gender):
                        s = score_total(partition, preferences,
                                        player_team, baseline)
                        if s > best_score:
                            best_score = s
                            best_move = ("reserve", a, i, r)
                    _swap_with_reserve(partition, player_team, a, i, r)

        if best_move is None:
            break

        if best_move[0] == "team":
            _, a, i, b, j = best_move
            _swap_between_teams(partition, player_team, a, i, b, j)
        else:
            _, a, i, r = best_move
            _swap_with_reserve(partition, player_team, a, i, r)
        current = best_score
        trace.append(current)

    return trace


# ---------------------------------------------------------------------------
# Phase 3: Multi-start driver
# ---------------------------------------------------------------------------

def sort_teams(players: list[Player], team_count: int,
               preferences: Optional[list[Preference]] = None,
               locks: Optional[dict] = None,
               seed: Optional[int] = None,
               starts: int = HILL_CLIMB_STARTS) -> SortResult:
    """Split players into `team_count` balanced teams plus reserves.

    Runs `starts` independent generate + hill-climb restarts and returns the
    best one with its detailed score breakdown. Pass `seed` for a
    reproducible result.
    """
    preferences = list(preferences or [])
    locks = dict(locks or {})
    roster = [p.with_default_rating() for p in players]
    enforce_gender = gender_quota_feasible(roster, team_count)

    master = random.Random(seed)
    best: Optional[Partition] = None
    best_score = 0.0

    for _ in range(max(1, starts)):
        rng = random.Random(master.getrandbits(64))
        partition = generate_initial_assignment(
            roster, team_count, enforce_gender, locks, rng
        )
        trace = hill_climb(partition, preferences, enforce_gender, locks)
        if best is None or trace[-1] > best_score:
            best = partition
            best_score = trace[-1]

    return SortResult(
        teams=best.teams,
        reserves=best.reserves,
        score=score_assignment(best, preferences),
        gender_enforced=enforce_gender,
    )


def locks_from_result(teams: list[Team], reserves: list[Player],
                      locked_ids: set[int]) -> dict:
    """Pin each kept player to where a previous result placed them."""
    locks: dict = {}
    for i, team in enumerate(teams):
        for p in team.players:
            if p.id in locked_ids:
                locks[p.id] = i
    for p in reserves:
        if p.id in locked_ids:
            locks[p.id] = RESERVES
    return locks
