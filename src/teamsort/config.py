"""Event file loading and validation for the teamsort app."""

from collections import Counter
from pathlib import Path
from typing import Optional

import yaml

from teamsort.constants import MAX_RATING, MAX_TEAM_SIZE, MIN_RATING
from teamsort.models import (
    RESERVES, Gender, Player, Preference, PreferenceKind,
)


def parse_gender(s) -> Gender:
    """Parse 'male', 'female', 'M', 'f', ..."""
    return Gender.from_str(str(s))


def parse_preference_kind(s) -> PreferenceKind:
    """Parse preference kinds, including the older *_with names."""
    return PreferenceKind.from_str(str(s))


def parse_rating(value) -> Optional[float]:
    """Parse a rating, clamped to [MIN_RATING, MAX_RATING].

    Blank or missing values return None (filled with the default later).
    """
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    try:
        rating = float(s)
    except ValueError:
        raise ValueError(f"Invalid rating: {value!r}") from None
    return min(max(rating, MIN_RATING), MAX_RATING)


def parse_lock_target(value):
    """Parse a lock destination into a 0-based team index or RESERVES.

    Accepts 'reserves', a team letter ('A', 'b', 'Team C') or a 1-based
    team number (1, '2').
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid lock target: {value!r}")
    if isinstance(value, int):
        if value < 1:
            raise ValueError(f"Invalid lock target: {value!r}")
        return value - 1

    s = str(value).strip()
    s_lower = s.lower()
    if s_lower in ("reserve", "reserves", "bench"):
        return RESERVES
    if s_lower.startswith("team "):
        s = s[5:].strip()
    if s.isdigit() and int(s) >= 1:
        return int(s) - 1
    if len(s) == 1 and s.isalpha():
        return ord(s.upper()) - ord("A")
    raise ValueError(f"Invalid lock target: {value!r}")


def load_config(path: str | Path) -> dict:
    """Load and validate an event YAML, returning structured data.

    Returns dict with:
    - event: {name, team_count}
    - players: list[Player] in file order
    - preferences: list[Preference]
    - locks: dict[player_id -> team index | RESERVES]
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    # Event
    event_raw = raw.get("event") or {}
    team_count = event_raw.get("team_count")
    event = {
        "name": event_raw.get("name", ""),
        "team_count": int(team_count) if team_count is not None else None,
    }

    errors = []

    # Players
    players: list[Player] = []
    for pdata in raw.get("players") or []:
        players.append(Player(
            id=int(pdata["id"]),
            name=str(pdata.get("name", f"#{pdata['id']}")).strip(),
            gender=parse_gender(pdata["gender"]),
            rating=parse_rating(pdata.get("rating")),
            tier=str(pdata.get("tier", "") or ""),
        ))

    id_counts = Counter(p.id for p in players)
    for pid, count in sorted(id_counts.items()):
        if count > 1:
            errors.append(f"Player id {pid} used {count} times")
    known_ids = set(id_counts)

    # Preferences
    preferences: list[Preference] = []
    seen_pairs: set[frozenset[int]] = set()
    for pref in raw.get("preferences") or []:
        ids = [int(x) for x in pref["players"]]
        kind = parse_preference_kind(pref["kind"])
        if len(ids) != 2:
            errors.append(f"Preference {ids} must name exactly two players")
            continue
        a, b = ids
        unknown = [x for x in ids if x not in known_ids]
        if unknown:
            errors.append(
                f"Preference {a}-{b} names unknown player(s) {unknown}"
            )
            continue
        if a == b:
            errors.append(f"Preference {a}-{b} pairs a player with themself")
            continue
        pair = frozenset(ids)
        if pair in seen_pairs:
            errors.append(f"Duplicate preference for pair {a}-{b}, ignored")
            continue
        seen_pairs.add(pair)
        preferences.append(Preference(a, b, kind))

    # Locks
    locks: dict = {}
    for pid, target in (raw.get("locks") or {}).items():
        pid = int(pid)
        if pid not in known_ids:
            errors.append(f"Lock names unknown player {pid}")
            continue
        locks[pid] = parse_lock_target(target)

    per_team_locks = Counter(t for t in locks.values() if t != RESERVES)
    for idx, count in sorted(per_team_locks.items()):
        if count > MAX_TEAM_SIZE:
            errors.append(
                f"{count} players locked to team {idx + 1} "
                f"(max {MAX_TEAM_SIZE} per team)"
            )

    if errors:
        print("Config validation errors:")
        for e in errors:
            print(f"  {e}")

    return {
        "event": event,
        "players": players,
        "preferences": preferences,
        "locks": locks,
    }
