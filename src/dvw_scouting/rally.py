"""Decode ``[3SCOUT]`` lines into rally actions.

A scout line is positional, not delimited::

    *06SQ#~~~...
    ^^^^^^
    |||||`- outcome grade
    ||||`-- skill type (serve type, attack combination family, ...)
    |||`--- skill letter
    |`----- two digit jersey number
    `------ team marker, ``*`` home and ``a`` away

The meaning of a grade symbol depends on the skill, see ``GRADE_TABLES``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from .roster import AWAY_MARKER, HOME_MARKER, PlayerLookup
from .sections import SCOUT, SkippedLine, SourceLine, record_skip

MARKER_OFFSET = 0
NUMBER_SLICE = slice(1, 3)
SKILL_OFFSET = 3
TYPE_OFFSET = 4
GRADE_OFFSET = 5

MIN_ACTION_LENGTH = SKILL_OFFSET + 1
GRADED_ACTION_LENGTH = GRADE_OFFSET + 1

TEAM_MARKERS = (HOME_MARKER, AWAY_MARKER)


class Skill(str, Enum):
    SERVE = "S"
    RECEPTION = "R"
    SET = "E"
    ATTACK = "A"
    BLOCK = "B"
    DIG = "D"
    FREEBALL = "F"
    OTHER = "?"


SKILL_CODES: Dict[str, Skill] = {
    skill.value: skill for skill in Skill if skill is not Skill.OTHER
}


class Grade(str, Enum):
    POINT = "point"
    ERROR = "error"
    BLOCKED = "blocked"
    NEGATIVE = "negative"
    POSITIVE = "positive"


_NO_GRADES: FrozenSet[Grade] = frozenset()

GRADE_TABLES: Dict[Skill, Mapping[str, FrozenSet[Grade]]] = {
    Skill.SERVE: {
        "#": frozenset({Grade.POINT}),
        "=": frozenset({Grade.ERROR}),
        "-": frozenset({Grade.NEGATIVE}),
        "+": frozenset({Grade.POSITIVE}),
        "/": frozenset({Grade.POSITIVE}),
    },
    Skill.RECEPTION: {
        "#": frozenset({Grade.POSITIVE}),
        "+": frozenset({Grade.POSITIVE}),
        "/": frozenset({Grade.NEGATIVE}),
        "=": frozenset({Grade.ERROR}),
    },
    Skill.ATTACK: {
        "#": frozenset({Grade.POINT}),
        "=": frozenset({Grade.ERROR}),
        "/": frozenset({Grade.BLOCKED}),
        "-": frozenset({Grade.NEGATIVE}),
        "!": frozenset({Grade.NEGATIVE}),
        "+": frozenset({Grade.POSITIVE}),
    },
    # ``!`` on a block is read both ways until its scoring is settled.
    Skill.BLOCK: {
        "#": frozenset({Grade.POINT}),
        "=": frozenset({Grade.ERROR}),
        "/": frozenset({Grade.ERROR}),
        "!": frozenset({Grade.POSITIVE, Grade.NEGATIVE}),
        "-": frozenset({Grade.NEGATIVE}),
    },
}

# Lines shorter than this for their skill are skipped. Block lines are
# counted even without a grade character.
SKILL_MIN_LENGTH: Dict[Skill, int] = {
    Skill.SERVE: GRADED_ACTION_LENGTH,
    Skill.RECEPTION: GRADED_ACTION_LENGTH,
    Skill.ATTACK: GRADED_ACTION_LENGTH,
    Skill.BLOCK: MIN_ACTION_LENGTH,
}

SCORING_SKILLS = (Skill.SERVE, Skill.ATTACK, Skill.BLOCK)

JUMP_SERVE_TYPES = frozenset({"Q"})
# Serving and reception breakdowns read the float serve type differently.
SERVE_FLOAT_TYPES = frozenset({"M", "H"})
RECEPTION_FLOAT_TYPES = frozenset({"M"})


@dataclass(frozen=True)
class RallyAction:
    position: int
    line_number: int
    marker: str
    player_number: str
    skill: Skill
    skill_code: str
    sub_type: Optional[str]
    grade_symbol: Optional[str]
    text: str

    @property
    def is_home(self) -> bool:
        return self.marker == HOME_MARKER

    @property
    def grades(self) -> FrozenSet[Grade]:
        if self.grade_symbol is None:
            return _NO_GRADES
        table = GRADE_TABLES.get(self.skill)
        if table is None:
            return _NO_GRADES
        return table.get(self.grade_symbol, _NO_GRADES)

    def has_grade(self, grade: Grade) -> bool:
        return grade in self.grades

    @property
    def is_point(self) -> bool:
        return Grade.POINT in self.grades

    @property
    def is_jump_serve(self) -> bool:
        return self.sub_type in JUMP_SERVE_TYPES


def required_length(skill: Skill) -> int:
    return SKILL_MIN_LENGTH.get(skill, MIN_ACTION_LENGTH)


def decode_rally_line(text: str, *, position: int = 0, line_number: int = 0) -> Optional[RallyAction]:
    """Decode one scout line, or return ``None`` when it is no team action.

    A line too short for its skill (``*06S`` is a serve without a type or
    grade) is not an action either.
    """

    if len(text) < MIN_ACTION_LENGTH:
        return None
    marker = text[MARKER_OFFSET]
    if marker not in TEAM_MARKERS:
        return None
    skill_code = text[SKILL_OFFSET]
    skill = SKILL_CODES.get(skill_code, Skill.OTHER)
    if len(text) < required_length(skill):
        return None
    return RallyAction(
        position=position,
        line_number=line_number,
        marker=marker,
        player_number=text[NUMBER_SLICE],
        skill=skill,
        skill_code=skill_code,
        sub_type=text[TYPE_OFFSET] if len(text) > TYPE_OFFSET else None,
        grade_symbol=text[GRADE_OFFSET] if len(text) > GRADE_OFFSET else None,
        text=text,
    )


def decode_rally_log(
    lines: Sequence[SourceLine],
    diagnostics: Optional[List[SkippedLine]] = None,
) -> List[RallyAction]:
    """Decode scout lines in order.

    ``position`` is the index among the non-blank scout lines, so undecodable
    lines still leave a gap between their neighbours.
    """

    actions: List[RallyAction] = []
    for position, line in enumerate(lines):
        action = decode_rally_line(line.text, position=position, line_number=line.number)
        if action is None:
            record_skip(diagnostics, SCOUT, line, "not a team action")
            continue
        actions.append(action)
    return actions


def attribute_points(
    actions: Iterable[RallyAction],
    lookup: PlayerLookup,
    diagnostics: Optional[List[SkippedLine]] = None,
) -> int:
    """Credit serve, attack and block points to the rostered players."""

    credited = 0
    for action in actions:
        if action.skill not in SCORING_SKILLS or not action.is_point:
            continue
        player = lookup.get(action.marker, action.player_number)
        if player is None:
            record_skip(
                diagnostics,
                SCOUT,
                SourceLine(number=action.line_number, text=action.text),
                "unresolved player",
            )
            continue
        if action.skill is Skill.SERVE:
            player.serve_points += 1
        elif action.skill is Skill.ATTACK:
            player.attack_points += 1
        else:
            player.block_points += 1
        credited += 1
    return credited


__all__ = [
    "GRADE_TABLES",
    "Grade",
    "JUMP_SERVE_TYPES",
    "RECEPTION_FLOAT_TYPES",
    "RallyAction",
    "SERVE_FLOAT_TYPES",
    "SKILL_MIN_LENGTH",
    "Skill",
    "attribute_points",
    "decode_rally_line",
    "decode_rally_log",
    "required_length",
]
