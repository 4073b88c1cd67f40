from __future__ import annotations

import pytest

from dvw_scouting.sections import SourceLine
from dvw_scouting.sets import (
    count_set_wins,
    is_valid_match,
    is_valid_set_score,
    parse_score,
    parse_set_line,
    parse_sets,
)


@pytest.mark.parametrize(
    ("home", "away", "expected"),
    [
        (24, 23, False),
        (25, 24, False),
        (25, 23, True),
        (26, 24, True),
        (15, 13, True),
        (23, 25, True),
        (14, 12, False),
    ],
)
def test_is_valid_set_score(home: int, away: int, expected: bool) -> None:
    assert is_valid_set_score(home, away) is expected


def test_parse_score() -> None:
    assert parse_score("25-20") == (25, 20)
    assert parse_score(" 15 - 13 ") == (15, 13)
    assert parse_score("25:20") is None


def test_parse_set_line_requires_played_flag_and_valid_score() -> None:
    result = parse_set_line("True;8-5;16-12;21-18;20-25;25")
    assert result is not None
    assert result.is_win is False
    assert (result.home_points, result.away_points) == (20, 25)
    assert result.score == "20-25"

    assert parse_set_line("False;8-5;16-12;21-18;25-20;25") is None
    assert parse_set_line("True;;;;") is None
    assert parse_set_line("True;;;;24-23;") is None


def _sets(*scores: str) -> list:
    lines = [
        SourceLine(number=index, text=f"True;;;;{score};")
        for index, score in enumerate(scores, start=1)
    ]
    return parse_sets(lines)


def test_five_set_match_is_valid() -> None:
    sets = _sets("25-20", "20-25", "25-22", "18-25", "15-10")

    assert count_set_wins(sets) == (3, 2)
    assert is_valid_match(sets)


def test_two_set_match_is_invalid() -> None:
    sets = _sets("25-20", "25-18")

    assert not is_valid_match(sets)


def test_invalid_scores_are_dropped_not_zeroed() -> None:
    diagnostics: list = []
    lines = [
        SourceLine(number=1, text="True;;;;25-20;"),
        SourceLine(number=2, text="True;;;;24-23;"),
        SourceLine(number=3, text="True;;;;;"),
    ]
    sets = parse_sets(lines, diagnostics)

    assert [item.score for item in sets] == ["25-20"]
    assert [item.line_number for item in diagnostics] == [2, 3]


def test_both_sides_with_three_wins_is_invalid() -> None:
    sets = _sets("25-20", "25-20", "25-20", "20-25", "20-25", "20-25")

    assert not is_valid_match(sets)
