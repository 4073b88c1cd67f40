from __future__ import annotations

from dvw_scouting.sections import (
    PLAYERS_HOME,
    SCOUT,
    TEAMS,
    match_marker,
    scan_sections,
)
from dvw_scouting.text import split_lines


def test_match_marker_recognises_known_and_unknown_tags() -> None:
    assert match_marker("[3TEAMS]") == (True, TEAMS)
    assert match_marker("  [3SCOUT]  ") == (True, SCOUT)
    assert match_marker("[3ENDSCOUT]") == (True, None)
    assert match_marker("[3COMMENTS]") == (True, None)
    assert match_marker("*06SQ#") == (False, None)


def test_scan_sections_groups_lines_with_numbers(dvw_text: str) -> None:
    sections = scan_sections(split_lines(dvw_text))

    assert [line.text.split(";")[0] for line in sections.teams] == ["USC", "DRE"]
    assert sections.teams[0].number == 6
    assert len(sections.sets) == 3
    assert len(sections.players_home) == 5
    assert len(sections.players_away) == 3
    assert len(sections.stats) == 8
    assert sections.scout[0].text == "*06SQ-"
    assert sections.lines_for(PLAYERS_HOME) == sections.players_home


def test_scan_sections_ignores_unknown_sections_and_blank_lines() -> None:
    lines = [
        "[3TEAMS]",
        "USC;USC Münster;3;;",
        "",
        "[3COMMENTS]",
        "not a team",
        "[3SCOUT]",
        "*06SQ#",
        "   ",
        "[3ENDSCOUT]",
        "a10RQ#",
    ]
    sections = scan_sections(lines)

    assert [line.text for line in sections.teams] == ["USC;USC Münster;3;;"]
    assert [line.text for line in sections.scout] == ["*06SQ#"]


def test_player_sections_after_attack_combinations_are_not_read() -> None:
    lines = [
        "[3PLAYERS-H]",
        "home",
        "[3ATTACKCOMBINATION]",
        "X5;2;H",
        "[3PLAYERS-V]",
        "late away",
    ]
    sections = scan_sections(lines)

    assert [line.text for line in sections.players_home] == ["home"]
    assert sections.players_away == ()
