from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest


def pytest_configure() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


HOME_ROSTER = [
    ("6", "Weber", "Lena", "2"),
    ("7", "Schulz", "Anna", "4"),
    ("9", "Meyer", "Lisa", "1"),
    ("3", "Koch", "Mia", "5"),
    ("10", "Braun", "Eva", "3"),
]
AWAY_ROSTER = [
    ("10", "Novak", "Ela", "2"),
    ("12", "Kaya", "Zeynep", "3"),
    ("5", "Lang", "Sara", "5"),
]

SAMPLE_SCOUT = [
    "*06SQ-",
    "a10RQ#",
    "a05EH#",
    "a12AH#",
    "a12SM=",
    "*06SQ#",
    "*06SQ+",
    "a10RQ/",
    "a12AH-",
    "*07BH#",
    "a05SM-",
    "*09RM#",
    "*03EH#",
    "*10AH#",
    "a05SM#",
]

SAMPLE_STATS = [
    "0;Points;62;120",
    "0;Break;20;50",
    "0;Serve;5;60",
    "0;Sideout;99;99",
    "0;Reception;30;55",
    "0;Attack;40;90",
    "0;Block;8;30",
    "0;CAR;10;20",
]


def player_line(
    number: str,
    last_name: str,
    first_name: str,
    role: str,
    played: Sequence[str] = ("1", "1", "1", "", ""),
) -> str:
    fields = ["0", number, "1", *played, "", last_name, first_name, "", "", role, "", ""]
    return ";".join(fields)


def set_line(score: str) -> str:
    return ";".join(["True", "8-5", "16-12", "21-18", score, "25"])


def build_dvw(
    *,
    teams: Optional[Sequence[str]] = None,
    sets: Sequence[str] = ("25-20", "25-18", "25-22"),
    home_players: Sequence[tuple] = tuple(HOME_ROSTER),
    away_players: Sequence[tuple] = tuple(AWAY_ROSTER),
    stats: Sequence[str] = tuple(SAMPLE_STATS),
    scout: Sequence[str] = tuple(SAMPLE_SCOUT),
) -> str:
    if teams is None:
        teams = ["USC;USC Münster;3;Trainer;;", "DRE;Dresdner SC;0;Trainer;;"]
    lines = ["[3DATAVOLLEYSCOUT]", "FILEFORMAT: 2.0", "[3MATCH]", "01/02/2025;;2024/2025", "[3TEAMS]"]
    lines.extend(teams)
    lines.append("[3MORE]")
    lines.append("Referees;")
    lines.append("[3SET]")
    lines.extend(set_line(score) for score in sets)
    lines.append("[3PLAYERS-H]")
    lines.extend(player_line(*player) for player in home_players)
    lines.append("[3PLAYERS-V]")
    lines.extend(player_line(*player) for player in away_players)
    lines.append("[3ATTACKCOMBINATION]")
    lines.append("X5;2;H;Q;Fast ball;;")
    lines.append("[3STATS]")
    lines.extend(stats)
    lines.append("[3SCOUT]")
    lines.extend(scout)
    return "\r\n".join(lines) + "\r\n"


@pytest.fixture
def make_dvw() -> Callable[..., str]:
    return build_dvw


@pytest.fixture
def dvw_text() -> str:
    return build_dvw()
