"""Set scores from the ``[3SET]`` section."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .sections import SET, SkippedLine, SourceLine, record_skip

PLAYED_FLAG = "True"
MIN_SET_FIELDS = 5
SCORE_FIELD = 4
FULL_SET_POINTS = 25
SHORT_SET_POINTS = 15
MIN_SET_MARGIN = 2
SETS_TO_WIN = 3

SCORE_PATTERN = re.compile(r"^\s*(?P<home>\d+)\s*-\s*(?P<away>\d+)\s*$")


@dataclass(frozen=True)
class SetResult:
    score: str
    is_win: bool
    home_points: int
    away_points: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "score": self.score,
            "is_win": self.is_win,
            "home_points": self.home_points,
            "away_points": self.away_points,
        }


def parse_score(value: str) -> Optional[Tuple[int, int]]:
    match = SCORE_PATTERN.match(value)
    if not match:
        return None
    return int(match.group("home")), int(match.group("away"))


def is_valid_set_score(home_score: int, away_score: int) -> bool:
    """A set is over once one side reaches the target with a two point lead.

    Deciding sets are played to 15 instead of 25.
    """

    margin = abs(home_score - away_score)
    if margin < MIN_SET_MARGIN:
        return False
    top = max(home_score, away_score)
    return top >= FULL_SET_POINTS or top >= SHORT_SET_POINTS


def parse_set_line(text: str) -> Optional[SetResult]:
    parts = text.split(";")
    if len(parts) < MIN_SET_FIELDS or parts[0].strip() != PLAYED_FLAG:
        return None
    score = parts[SCORE_FIELD].strip()
    parsed = parse_score(score)
    if parsed is None:
        return None
    home_score, away_score = parsed
    if not is_valid_set_score(home_score, away_score):
        return None
    return SetResult(
        score=score,
        is_win=home_score > away_score,
        home_points=home_score,
        away_points=away_score,
    )


def parse_sets(
    lines: Iterable[SourceLine],
    diagnostics: Optional[List[SkippedLine]] = None,
) -> List[SetResult]:
    sets: List[SetResult] = []
    for line in lines:
        result = parse_set_line(line.text)
        if result is None:
            record_skip(diagnostics, SET, line, "not a completed set")
            continue
        sets.append(result)
    return sets


def count_set_wins(sets: Sequence[SetResult]) -> Tuple[int, int]:
    home_wins = sum(1 for item in sets if item.is_win)
    return home_wins, len(sets) - home_wins


def is_valid_match(sets: Sequence[SetResult]) -> bool:
    home_wins, away_wins = count_set_wins(sets)
    if home_wins == SETS_TO_WIN:
        return away_wins < SETS_TO_WIN
    if away_wins == SETS_TO_WIN:
        return home_wins < SETS_TO_WIN
    return False


__all__ = [
    "FULL_SET_POINTS",
    "MIN_SET_FIELDS",
    "MIN_SET_MARGIN",
    "SETS_TO_WIN",
    "SHORT_SET_POINTS",
    "SetResult",
    "count_set_wins",
    "is_valid_match",
    "is_valid_set_score",
    "parse_score",
    "parse_set_line",
    "parse_sets",
]
