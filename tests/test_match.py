from __future__ import annotations

import logging
from typing import Callable

import pytest

from dvw_scouting.match import (
    DVWStructureError,
    TeamStats,
    parse_match,
    parse_team_stats,
    sum_team_stats,
)
from dvw_scouting.sections import SourceLine
from dvw_scouting.sideout import SideoutTally


def _players_by_number(players) -> dict:
    return {player.number: player for player in players}


def test_parse_match_decodes_sample(dvw_text: str) -> None:
    match = parse_match(dvw_text, source="sample.dvw")

    assert match.home_team.code == "USC"
    assert match.home_team.name == "USC Münster"
    assert match.away_team.name == "Dresdner SC"
    assert match.is_win
    assert match.final_score == "3-0"
    assert match.winner == match.home_team
    assert (match.total_home_points, match.total_away_points) == (75, 60)
    assert [item.score for item in match.sets] == ["25-20", "25-18", "25-22"]
    assert match.source == "sample.dvw"
    assert match.diagnostics == ()


def test_parse_match_attributes_points(dvw_text: str) -> None:
    match = parse_match(dvw_text)
    home = _players_by_number(match.home_players)
    away = _players_by_number(match.away_players)

    assert home["6"].serve_points == 1
    assert home["7"].block_points == 1
    assert home["10"].attack_points == 1
    assert home["9"].total_points == 0
    assert away["12"].attack_points == 1
    assert away["5"].serve_points == 1
    assert sum(player.total_points for player in match.players) == 5


def test_parse_match_replaces_sideout_counter(dvw_text: str) -> None:
    match = parse_match(dvw_text)

    assert match.sideout.for_marker("*") == (1, 1)
    assert match.sideout.for_marker("a") == (1, 2)
    assert match.sideout.last_serve_marker == "a"
    assert (match.stats.sideouts, match.stats.sideout_attempts) == (1, 1)
    assert match.stats.points == 62
    assert match.stats.total_points == 120
    assert (match.stats.aces, match.stats.serves) == (5, 60)
    assert (match.stats.kills, match.stats.attack_attempts) == (40, 90)
    assert (match.stats.cars, match.stats.car_attempts) == (10, 20)


def test_parse_match_accepts_lines(dvw_text: str) -> None:
    from_text = parse_match(dvw_text)
    from_lines = parse_match(dvw_text.splitlines(keepends=True))

    assert from_lines.to_dict() == from_text.to_dict()


def test_rally_actions_are_decoded_from_raw_lines(dvw_text: str) -> None:
    match = parse_match(dvw_text)
    actions = match.rally_actions()

    assert len(actions) == 15
    assert actions[0].text == "*06SQ-"
    assert match.team_for_marker(actions[1].marker) == match.away_team


def test_missing_team_raises(make_dvw: Callable[..., str]) -> None:
    content = make_dvw(teams=["USC;USC Münster;3;Trainer;;"])

    with pytest.raises(DVWStructureError, match="team information"):
        parse_match(content)


def test_two_sets_raise(make_dvw: Callable[..., str]) -> None:
    with pytest.raises(DVWStructureError):
        parse_match(make_dvw(sets=("25-20", "25-18")))


def test_five_set_away_win(make_dvw: Callable[..., str]) -> None:
    match = parse_match(make_dvw(sets=("25-20", "20-25", "25-22", "18-25", "10-15")))

    assert not match.is_win
    assert match.final_score == "2-3"
    assert match.winner == match.away_team


def test_parse_match_collects_diagnostics(make_dvw: Callable[..., str]) -> None:
    content = make_dvw(
        sets=("25-20", "25-18", "24-23", "25-22"),
        stats=["0;Points;62;120", "0;Mystery;1;2", "broken"],
        scout=["*06SQ#", "*06S", "*55AH#"],
    )
    match = parse_match(content)

    reasons = [item.reason for item in match.diagnostics]
    assert "not a completed set" in reasons
    assert "unknown category 'Mystery'" in reasons
    assert "not a stats record" in reasons
    assert "not a team action" in reasons
    assert "unresolved player" in reasons
    assert match.to_dict()["skipped_lines"] == len(match.diagnostics)


def test_parse_team_stats_keeps_last_category() -> None:
    lines = [
        SourceLine(number=1, text="0;Attack;10;20"),
        SourceLine(number=2, text="0;Attack;12;30"),
        SourceLine(number=3, text="0;Sideout;50;60"),
        SourceLine(number=4, text="0;Block;x;5"),
    ]
    diagnostics: list = []
    stats = parse_team_stats(
        lines,
        SideoutTally(home_points=3, home_attempts=8, last_serve_marker="a"),
        diagnostics,
    )

    assert (stats.kills, stats.attack_attempts) == (12, 30)
    assert (stats.sideouts, stats.sideout_attempts) == (3, 8)
    assert stats.blocks == 0
    assert [item.reason for item in diagnostics] == ["counter is not a number"]


def test_sum_team_stats() -> None:
    total = sum_team_stats([TeamStats(aces=2, serves=10), TeamStats(aces=3, serves=12)])

    assert (total.aces, total.serves) == (5, 22)
    assert sum_team_stats([]) == TeamStats()


def test_parse_match_logs_decoded_match_and_skipped_lines(
    make_dvw: Callable[..., str], caplog
) -> None:
    content = make_dvw(scout=["*06SQ#", "*06S"])

    with caplog.at_level(logging.DEBUG, logger="dvw_scouting"):
        match = parse_match(content, source="usc-dre.dvw")

    info = [
        record for record in caplog.records
        if record.name == "dvw_scouting.match" and record.levelno == logging.INFO
    ]
    assert len(info) == 1
    assert "usc-dre.dvw" in info[0].getMessage()
    assert "USC Münster vs Dresdner SC 3-0" in info[0].getMessage()

    skipped = [
        record for record in caplog.records
        if record.name == "dvw_scouting.sections" and record.levelno == logging.DEBUG
        and record.getMessage().startswith("Skipping")
    ]
    assert len(skipped) == len(match.diagnostics) == 1
