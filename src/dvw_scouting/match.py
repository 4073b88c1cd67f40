"""Decode a complete DVW file into a :class:`MatchResult`."""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field, fields
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .rally import RallyAction, attribute_points, decode_rally_log
from .roster import (
    HOME_MARKER,
    Player,
    PlayerLookup,
    Team,
    parse_players,
    parse_teams,
)
from .sections import (
    PLAYERS_AWAY,
    PLAYERS_HOME,
    STATS,
    SkippedLine,
    SourceLine,
    record_skip,
    scan_sections,
)
from .sets import SETS_TO_WIN, SetResult, count_set_wins, is_valid_match, parse_sets
from .sideout import SideoutTally, reconstruct_sideouts
from .text import fix_special_characters, split_lines

LOGGER = logging.getLogger(__name__)

MIN_STATS_FIELDS = 4
SIDEOUT_CATEGORY = "Sideout"

# Category label -> (success counter, attempt counter)
STATS_CATEGORIES: Dict[str, Tuple[str, str]] = {
    "Points": ("points", "total_points"),
    "Break": ("breaks", "break_attempts"),
    "Serve": ("aces", "serves"),
    "Reception": ("receptions", "reception_attempts"),
    "Attack": ("kills", "attack_attempts"),
    "Block": ("blocks", "block_attempts"),
    "CAR": ("cars", "car_attempts"),
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class DVWStructureError(ValueError):
    """The file lacks the teams or the set results needed for a match."""


@dataclass(frozen=True)
class TeamStats:
    points: int = 0
    total_points: int = 0
    breaks: int = 0
    break_attempts: int = 0
    aces: int = 0
    serves: int = 0
    sideouts: int = 0
    sideout_attempts: int = 0
    receptions: int = 0
    reception_attempts: int = 0
    kills: int = 0
    attack_attempts: int = 0
    blocks: int = 0
    block_attempts: int = 0
    cars: int = 0
    car_attempts: int = 0

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def sum_team_stats(entries: Iterable[TeamStats]) -> TeamStats:
    totals = {item.name: 0 for item in fields(TeamStats)}
    for entry in entries:
        for name in totals:
            totals[name] += getattr(entry, name)
    return TeamStats(**totals)


@dataclass(frozen=True)
class MatchResult:
    home_team: Team
    away_team: Team
    sets: Tuple[SetResult, ...]
    is_win: bool
    stats: TeamStats
    total_home_points: int
    total_away_points: int
    home_players: Tuple[Player, ...]
    away_players: Tuple[Player, ...]
    raw_lines: Tuple[str, ...]
    sideout: SideoutTally = field(default_factory=SideoutTally)
    diagnostics: Tuple[SkippedLine, ...] = ()
    source: Optional[str] = None

    @property
    def home_set_wins(self) -> int:
        return count_set_wins(self.sets)[0]

    @property
    def away_set_wins(self) -> int:
        return count_set_wins(self.sets)[1]

    @property
    def winner(self) -> Team:
        return self.home_team if self.is_win else self.away_team

    @property
    def final_score(self) -> str:
        return f"{self.home_set_wins}-{self.away_set_wins}"

    @property
    def players(self) -> Tuple[Player, ...]:
        return self.home_players + self.away_players

    def involves(self, team_code: str) -> bool:
        return team_code in (self.home_team.code, self.away_team.code)

    def is_home(self, team_code: str) -> bool:
        return self.home_team.code == team_code

    def player_lookup(self) -> PlayerLookup:
        return PlayerLookup(self.home_players, self.away_players)

    def team_for_marker(self, marker: str) -> Team:
        return self.home_team if marker == HOME_MARKER else self.away_team

    def rally_actions(self) -> List[RallyAction]:
        """Decode the scout log again from ``raw_lines``."""

        return decode_rally_log(scan_sections(self.raw_lines).scout)

    def to_dict(self) -> Dict[str, object]:
        return {
            "source": self.source,
            "home_team": self.home_team.to_dict(),
            "away_team": self.away_team.to_dict(),
            "final_score": self.final_score,
            "is_win": self.is_win,
            "sets": [item.to_dict() for item in self.sets],
            "total_home_points": self.total_home_points,
            "total_away_points": self.total_away_points,
            "stats": self.stats.to_dict(),
            "sideout": self.sideout.to_dict(),
            "home_players": [player.to_dict() for player in self.home_players],
            "away_players": [player.to_dict() for player in self.away_players],
            "skipped_lines": len(self.diagnostics),
        }


def _parse_int_field(value: str) -> Optional[int]:
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))


def parse_team_stats(
    lines: Iterable[SourceLine],
    sideout: SideoutTally,
    diagnostics: Optional[List[SkippedLine]] = None,
) -> TeamStats:
    """Read the ``[3STATS]`` counters and apply the rebuilt sideout figures.

    A category listed twice keeps its last values. The section's own sideout
    row is ignored.
    """

    values: Dict[str, int] = {}
    for line in lines:
        if ";" not in line.text:
            record_skip(diagnostics, STATS, line, "not a stats record")
            continue
        parts = line.text.split(";")
        if len(parts) < MIN_STATS_FIELDS:
            record_skip(diagnostics, STATS, line, f"fewer than {MIN_STATS_FIELDS} fields")
            continue
        category = parts[1].strip()
        if category == SIDEOUT_CATEGORY:
            continue
        counters = STATS_CATEGORIES.get(category)
        if counters is None:
            record_skip(diagnostics, STATS, line, f"unknown category {category!r}")
            continue
        success = _parse_int_field(parts[2])
        attempts = _parse_int_field(parts[3])
        if success is None or attempts is None:
            record_skip(diagnostics, STATS, line, "counter is not a number")
            continue
        success_name, attempts_name = counters
        values[success_name] = success
        values[attempts_name] = attempts

    sideouts, sideout_attempts = sideout.stats_figures()
    values["sideouts"] = sideouts
    values["sideout_attempts"] = sideout_attempts
    return TeamStats(**values)


def parse_match(
    content: Union[str, Sequence[str]],
    *,
    source: Optional[str] = None,
) -> MatchResult:
    """Decode one scouting file.

    ``content`` is the decoded file text or its lines. Raises
    :class:`DVWStructureError` when the teams or a best-of-five result cannot
    be found; nothing of the file is returned in that case.
    """

    if isinstance(content, str):
        lines = split_lines(fix_special_characters(content))
    else:
        lines = [fix_special_characters(line.rstrip("\r\n")) for line in content]

    sections = scan_sections(lines)
    diagnostics: List[SkippedLine] = []

    teams = parse_teams(sections.teams, diagnostics)
    if len(teams) < 2:
        raise DVWStructureError("Could not find team information")
    home_team, away_team = teams[0], teams[1]

    sets = parse_sets(sections.sets, diagnostics)
    if not is_valid_match(sets):
        home_wins, away_wins = count_set_wins(sets)
        raise DVWStructureError(
            f"Match must be won by the first team to win 3 sets (found {home_wins}-{away_wins})"
        )

    actions = decode_rally_log(sections.scout, diagnostics)
    sideout = reconstruct_sideouts(actions)
    stats = parse_team_stats(sections.stats, sideout, diagnostics)

    home_players = parse_players(
        sections.players_home, home_team, section=PLAYERS_HOME, diagnostics=diagnostics
    )
    away_players = parse_players(
        sections.players_away, away_team, section=PLAYERS_AWAY, diagnostics=diagnostics
    )
    lookup = PlayerLookup(home_players, away_players)
    attribute_points(actions, lookup, diagnostics)

    home_wins, away_wins = count_set_wins(sets)
    result = MatchResult(
        home_team=home_team,
        away_team=away_team,
        sets=tuple(sets),
        is_win=home_wins == SETS_TO_WIN,
        stats=stats,
        total_home_points=sum(item.home_points for item in sets),
        total_away_points=sum(item.away_points for item in sets),
        home_players=tuple(home_players),
        away_players=tuple(away_players),
        raw_lines=tuple(lines),
        sideout=sideout,
        diagnostics=tuple(diagnostics),
        source=source,
    )
    LOGGER.info(
        "Decoded %s: %s vs %s %s (%d skipped lines)",
        source or "match",
        home_team.name,
        away_team.name,
        result.final_score,
        len(diagnostics),
    )
    return result


__all__ = [
    "DVWStructureError",
    "MatchResult",
    "STATS_CATEGORIES",
    "TeamStats",
    "parse_match",
    "parse_team_stats",
    "sum_team_stats",
]
