"""Teams and player rosters from the ``[3TEAMS]`` and ``[3PLAYERS-*]`` sections."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .sections import PLAYERS_HOME, TEAMS, SkippedLine, SourceLine, record_skip
from .text import fix_special_characters


HOME_MARKER = "*"
AWAY_MARKER = "a"

MIN_TEAM_FIELDS = 3
MIN_ROSTER_FIELDS = 15
PLAYED_SET_FIELDS = range(3, 8)
NUMBER_FIELD = 1
LAST_NAME_FIELD = 9
FIRST_NAME_FIELD = 10
ROLE_FIELD = 13


class Role(str, Enum):
    LIBERO = "Libero"
    OUTSIDE_HITTER = "Outside Hitter"
    OPPOSITE = "Opposite"
    MIDDLE_BLOCKER = "Middle Blocker"
    SETTER = "Setter"
    UNKNOWN = "Unknown"


ROLE_CODES: Dict[str, Role] = {
    "1": Role.LIBERO,
    "2": Role.OUTSIDE_HITTER,
    "3": Role.OPPOSITE,
    "4": Role.MIDDLE_BLOCKER,
    "5": Role.SETTER,
}


def decode_role(code: Optional[str]) -> Role:
    return ROLE_CODES.get((code or "").strip(), Role.UNKNOWN)


@dataclass(frozen=True)
class Team:
    code: str
    name: str

    def to_dict(self) -> Dict[str, object]:
        return {"code": self.code, "name": self.name}


PlayerKey = Tuple[str, str, str]


@dataclass
class Player:
    """A rostered player of one match.

    Point counters start at zero and are filled in by
    :func:`dvw_scouting.rally.attribute_points`.
    """

    number: str
    first_name: str
    last_name: str
    role: Role
    played_sets: int
    team: Team
    serve_points: int = 0
    attack_points: int = 0
    block_points: int = 0

    @property
    def key(self) -> PlayerKey:
        # Two players with the same name on one team share this key.
        return (self.team.code, self.last_name, self.first_name)

    @property
    def padded_number(self) -> str:
        return self.number.rjust(2, "0")

    @property
    def total_points(self) -> int:
        return self.serve_points + self.attack_points + self.block_points

    @property
    def display_name(self) -> str:
        return f"{self.last_name} {self.first_name}".strip()

    def to_dict(self) -> Dict[str, object]:
        return {
            "number": self.number,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "role": self.role.value,
            "played_sets": self.played_sets,
            "team": self.team.code,
            "serve_points": self.serve_points,
            "attack_points": self.attack_points,
            "block_points": self.block_points,
        }


def parse_teams(
    lines: Iterable[SourceLine],
    diagnostics: Optional[List[SkippedLine]] = None,
) -> List[Team]:
    teams: List[Team] = []
    for line in lines:
        parts = line.text.split(";")
        if len(parts) < MIN_TEAM_FIELDS:
            record_skip(diagnostics, TEAMS, line, f"expected {MIN_TEAM_FIELDS} fields, got {len(parts)}")
            continue
        teams.append(
            Team(code=parts[0].strip(), name=fix_special_characters(parts[1].strip()))
        )
    return teams


def parse_player_line(text: str, team: Team) -> Optional[Player]:
    if ";" not in text:
        return None
    parts = text.split(";")
    if len(parts) < MIN_ROSTER_FIELDS:
        return None
    played_sets = sum(1 for index in PLAYED_SET_FIELDS if parts[index].strip())
    return Player(
        number=parts[NUMBER_FIELD].strip(),
        first_name=fix_special_characters(parts[FIRST_NAME_FIELD].strip()),
        last_name=fix_special_characters(parts[LAST_NAME_FIELD].strip()),
        role=decode_role(parts[ROLE_FIELD]),
        played_sets=played_sets,
        team=team,
    )


def parse_players(
    lines: Iterable[SourceLine],
    team: Team,
    *,
    section: str = PLAYERS_HOME,
    diagnostics: Optional[List[SkippedLine]] = None,
) -> List[Player]:
    players: List[Player] = []
    for line in lines:
        player = parse_player_line(line.text, team)
        if player is None:
            record_skip(diagnostics, section, line, f"fewer than {MIN_ROSTER_FIELDS} fields")
            continue
        players.append(player)
    return players


class PlayerLookup:
    """Resolve ``(team marker, two-digit number)`` pairs of one match."""

    def __init__(self, home_players: Sequence[Player], away_players: Sequence[Player]) -> None:
        self._players: Dict[Tuple[str, str], Player] = {}
        for marker, players in ((HOME_MARKER, home_players), (AWAY_MARKER, away_players)):
            for player in players:
                self._players[(marker, player.number)] = player
                self._players[(marker, player.padded_number)] = player

    def get(self, marker: str, number: str) -> Optional[Player]:
        return self._players.get((marker, number))

    def __len__(self) -> int:
        return len({id(player) for player in self._players.values()})


__all__ = [
    "AWAY_MARKER",
    "HOME_MARKER",
    "MIN_ROSTER_FIELDS",
    "Player",
    "PlayerKey",
    "PlayerLookup",
    "ROLE_CODES",
    "Role",
    "Team",
    "decode_role",
    "parse_player_line",
    "parse_players",
    "parse_teams",
]
