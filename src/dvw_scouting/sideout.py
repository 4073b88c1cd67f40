"""Rebuild sideout figures from the order of rally actions.

The ``[3STATS]`` sideout counter cannot tell which team received a given
serve, so the figures are replayed from the scout log instead. A sideout
attempt is a reception that directly follows the opponent's serve. It becomes
a sideout point when the receiving team kills the ball in the first attack
after its set (or first ball), with no line in between.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from .rally import RallyAction, Skill
from .roster import AWAY_MARKER, HOME_MARKER

TRANSITION_SKILLS = (Skill.SET, Skill.ATTACK)


@dataclass(frozen=True)
class SideoutTally:
    home_points: int = 0
    home_attempts: int = 0
    away_points: int = 0
    away_attempts: int = 0
    last_serve_marker: Optional[str] = None

    def for_marker(self, marker: str) -> Tuple[int, int]:
        if marker == HOME_MARKER:
            return self.home_points, self.home_attempts
        return self.away_points, self.away_attempts

    def stats_figures(self) -> Tuple[int, int]:
        """Figures for the single ``[3STATS]`` record.

        The record follows the team that did not serve last.
        """

        if self.last_serve_marker == HOME_MARKER:
            return self.for_marker(AWAY_MARKER)
        return self.for_marker(HOME_MARKER)

    def to_dict(self) -> Dict[str, object]:
        return {
            "home_points": self.home_points,
            "home_attempts": self.home_attempts,
            "away_points": self.away_points,
            "away_attempts": self.away_attempts,
            "last_serve_marker": self.last_serve_marker,
        }


class _RallyChain:
    def __init__(self) -> None:
        self.serve: Optional[RallyAction] = None
        self.reception: Optional[RallyAction] = None
        self.transition: Optional[RallyAction] = None

    def reset(self) -> None:
        self.serve = None
        self.reception = None
        self.transition = None

    @staticmethod
    def _follows(previous: Optional[RallyAction], action: RallyAction) -> bool:
        return previous is not None and action.position == previous.position + 1

    def awaits_attack(self, action: RallyAction) -> bool:
        return action.skill is Skill.ATTACK and self._follows(self.transition, action)

    def awaits_transition(self, action: RallyAction) -> bool:
        return (
            self.transition is None
            and action.skill in TRANSITION_SKILLS
            and self._follows(self.reception, action)
        )

    def awaits_reception(self, action: RallyAction) -> bool:
        return (
            self.serve is not None
            and self.reception is None
            and action.skill is Skill.RECEPTION
            and self._follows(self.serve, action)
            and action.marker != self.serve.marker
        )


def reconstruct_sideouts(actions: Iterable[RallyAction]) -> SideoutTally:
    points = {HOME_MARKER: 0, AWAY_MARKER: 0}
    attempts = {HOME_MARKER: 0, AWAY_MARKER: 0}
    last_serve_marker: Optional[str] = None
    chain = _RallyChain()

    for action in actions:
        if action.skill is Skill.SERVE:
            chain.reset()
            chain.serve = action
            last_serve_marker = action.marker
        elif chain.awaits_attack(action):
            receiving = chain.reception.marker if chain.reception else None
            if action.is_point and action.marker == receiving:
                points[action.marker] += 1
            chain.reset()
        elif chain.awaits_transition(action):
            chain.transition = action
        elif chain.awaits_reception(action):
            chain.reception = action
            attempts[action.marker] += 1
        else:
            chain.reset()

    return SideoutTally(
        home_points=points[HOME_MARKER],
        home_attempts=attempts[HOME_MARKER],
        away_points=points[AWAY_MARKER],
        away_attempts=attempts[AWAY_MARKER],
        last_serve_marker=last_serve_marker,
    )


__all__ = [
    "SideoutTally",
    "reconstruct_sideouts",
]
