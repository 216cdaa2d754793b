"""Data models for the teamsort app."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from teamsort.constants import DEFAULT_RATING


RESERVES = "reserves"


class Gender(Enum):
    male = "male"
    female = "female"

    @classmethod
    def from_str(cls, s: str) -> "Gender":
        key = s.strip().lower()
        if key in ("m", "male"):
            return cls.male
        if key in ("f", "female"):
            return cls.female
        raise ValueError(f"Unknown gender: {s!r}")

    @property
    def symbol(self) -> str:
        return "M" if self is Gender.male else "F"


class PreferenceKind(Enum):
    must_be_together = "must_be_together"
    prefer_together = "prefer_together"
    prefer_apart = "prefer_apart"

    @classmethod
    def from_str(cls, s: str) -> "PreferenceKind":
        key = s.strip().lower().replace("-", "_").replace(" ", "_")
        key = _LEGACY_PREFERENCE_NAMES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown preference kind: {s!r}") from None


_LEGACY_PREFERENCE_NAMES = {
    "strongly_prefer_with": "must_be_together",
    "prefer_with": "prefer_together",
    "prefer_not_with": "prefer_apart",
}


@dataclass(frozen=True)
class Player:
    """A person available for the game."""
    id: int
    name: str
    gender: Gender
    rating: Optional[float] = None
    tier: str = ""

    @property
    def is_male(self) -> bool:
        return self.gender is Gender.male

    def with_default_rating(self) -> "Player":
        """Return this player with a missing rating filled in."""
        if self.rating is not None:
            return self
        return replace(self, rating=DEFAULT_RATING)


@dataclass(frozen=True)
class Preference:
    """A pairing wish between two players (order does not matter)."""
    player_a_id: int
    player_b_id: int
    kind: PreferenceKind

    def involves(self, player_id: int) -> bool:
        return player_id in (self.player_a_id, self.player_b_id)

    @property
    def pair(self) -> frozenset[int]:
        return frozenset((self.player_a_id, self.player_b_id))


@dataclass
class Team:
    label: str
    players: list[Player] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.players)

    @property
    def male_count(self) -> int:
        return sum(1 for p in self.players if p.is_male)

    @property
    def female_count(self) -> int:
        return len(self.players) - self.male_count


@dataclass
class Partition:
    """Teams plus reserves. Every rostered player sits in exactly one place."""
    teams: list[Team]
    reserves: list[Player] = field(default_factory=list)

    def all_players(self) -> list[Player]:
        players = [p for t in self.teams for p in t.players]
        players.extend(self.reserves)
        return players

    def copy(self) -> "Partition":
        return Partition(
            teams=[Team(t.label, list(t.players)) for t in self.teams],
            reserves=list(self.reserves),
        )


@dataclass(frozen=True)
class TeamOption:
    """A feasible way to split a roster into teams."""
    team_count: int
    players_per_team: int
    reserves: int


@dataclass(frozen=True)
class PairViolation:
    player_a: str
    player_b: str
    kind: str  # "split" or "together"


@dataclass
class ComponentScore:
    raw: float
    weighted: float
    violations: list[PairViolation] = field(default_factory=list)


@dataclass
class ScoreBreakdown:
    rating: ComponentScore
    gender: ComponentScore
    strong_prefs: ComponentScore
    soft_prefs: ComponentScore
    total: float


@dataclass
class SortResult:
    """Final teams, reserves and the score breakdown of one sort."""
    teams: list[Team]
    reserves: list[Player]
    score: ScoreBreakdown
    gender_enforced: bool = True

    @property
    def partition(self) -> Partition:
        return Partition(teams=self.teams, reserves=self.reserves)
