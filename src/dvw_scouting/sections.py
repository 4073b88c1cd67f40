"""Split a DVW file into its bracketed sections."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

LOGGER = logging.getLogger(__name__)

TEAMS = "TEAMS"
SET = "SET"
PLAYERS_HOME = "PLAYERS_HOME"
PLAYERS_AWAY = "PLAYERS_AWAY"
STATS = "STATS"
SCOUT = "SCOUT"

MARKER_PREFIX = "[3"
# Player sections after this tag are not read.
ROSTER_END_MARKER = "[3ATTACKCOMBINATION]"

SECTION_MARKERS: Dict[str, Optional[str]] = {
    "[3TEAMS]": TEAMS,
    "[3SET]": SET,
    "[3PLAYERS-H]": PLAYERS_HOME,
    "[3PLAYERS-V]": PLAYERS_AWAY,
    "[3ATTACKCOMBINATION]": None,
    "[3STATS]": STATS,
    "[3SCOUT]": SCOUT,
    "[3ENDSCOUT]": None,
}


@dataclass(frozen=True)
class SourceLine:
    number: int
    text: str


@dataclass(frozen=True)
class SkippedLine:
    """A line a decoder ignored, kept so callers can see why."""

    section: str
    line_number: int
    text: str
    reason: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "section": self.section,
            "line_number": self.line_number,
            "text": self.text,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class DVWSections:
    teams: Tuple[SourceLine, ...] = ()
    sets: Tuple[SourceLine, ...] = ()
    players_home: Tuple[SourceLine, ...] = ()
    players_away: Tuple[SourceLine, ...] = ()
    stats: Tuple[SourceLine, ...] = ()
    scout: Tuple[SourceLine, ...] = ()

    def lines_for(self, section: str) -> Tuple[SourceLine, ...]:
        return {
            TEAMS: self.teams,
            SET: self.sets,
            PLAYERS_HOME: self.players_home,
            PLAYERS_AWAY: self.players_away,
            STATS: self.stats,
            SCOUT: self.scout,
        }[section]


def record_skip(
    diagnostics: Optional[List[SkippedLine]],
    section: str,
    line: SourceLine,
    reason: str,
) -> None:
    LOGGER.debug("Skipping %s line %d: %s", section, line.number, reason)
    if diagnostics is not None:
        diagnostics.append(
            SkippedLine(section=section, line_number=line.number, text=line.text, reason=reason)
        )


def match_marker(line: str) -> Tuple[bool, Optional[str]]:
    """Return ``(is_marker, section)`` for a raw line.

    Every ``[3...]`` tag is a marker. Tags this package does not decode switch
    the scanner to "no section".
    """

    stripped = line.strip()
    if not stripped.startswith(MARKER_PREFIX):
        return False, None
    for marker, section in SECTION_MARKERS.items():
        if stripped.startswith(marker):
            return True, section
    return True, None


def scan_sections(lines: Iterable[str]) -> DVWSections:
    grouped: Dict[str, List[SourceLine]] = {
        TEAMS: [],
        SET: [],
        PLAYERS_HOME: [],
        PLAYERS_AWAY: [],
        STATS: [],
        SCOUT: [],
    }
    current: Optional[str] = None
    rosters_closed = False
    for index, line in enumerate(lines, start=1):
        is_marker, section = match_marker(line)
        if is_marker:
            if line.strip().startswith(ROSTER_END_MARKER):
                rosters_closed = True
            if rosters_closed and section in (PLAYERS_HOME, PLAYERS_AWAY):
                section = None
            current = section
            continue
        if current is None or not line.strip():
            continue
        grouped[current].append(SourceLine(number=index, text=line))

    sections = DVWSections(
        teams=tuple(grouped[TEAMS]),
        sets=tuple(grouped[SET]),
        players_home=tuple(grouped[PLAYERS_HOME]),
        players_away=tuple(grouped[PLAYERS_AWAY]),
        stats=tuple(grouped[STATS]),
        scout=tuple(grouped[SCOUT]),
    )
    LOGGER.debug(
        "Scanned sections: %s",
        ", ".join(f"{name}={len(entries)}" for name, entries in grouped.items()),
    )
    return sections


__all__ = [
    "DVWSections",
    "PLAYERS_AWAY",
    "PLAYERS_HOME",
    "SCOUT",
    "SECTION_MARKERS",
    "SET",
    "STATS",
    "SkippedLine",
    "SourceLine",
    "TEAMS",
    "match_marker",
    "record_skip",
    "scan_sections",
]
