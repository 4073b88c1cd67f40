"""Per-player skill breakdowns re-derived from the scout log of each match."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import (
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
    cast,
)

from .match import MatchResult
from .rally import (
    RECEPTION_FLOAT_TYPES,
    SERVE_FLOAT_TYPES,
    Grade,
    RallyAction,
    Skill,
)
from .roster import Player, PlayerKey, Role
from .stats import percentage, rate

RECEPTION_ROLES: FrozenSet[Role] = frozenset({Role.LIBERO, Role.OUTSIDE_HITTER, Role.OPPOSITE})


@dataclass
class ServeTypeStats:
    total: int = 0
    points: int = 0
    mistakes: int = 0
    positive: int = 0

    @property
    def efficiency(self) -> Optional[float]:
        return percentage(self.points + self.positive - self.mistakes, self.total)


@dataclass
class ServingStats:
    total: int = 0
    points: int = 0
    mistakes: int = 0
    positive: int = 0
    negative: int = 0
    max_consecutive: int = 0
    jump_serves: ServeTypeStats = field(default_factory=ServeTypeStats)
    float_serves: ServeTypeStats = field(default_factory=ServeTypeStats)

    def record(self, action: RallyAction) -> None:
        is_point = action.has_grade(Grade.POINT)
        is_mistake = action.has_grade(Grade.ERROR)
        is_positive = action.has_grade(Grade.POSITIVE)
        self.total += 1
        self.points += is_point
        self.mistakes += is_mistake
        self.positive += is_positive
        self.negative += action.has_grade(Grade.NEGATIVE)
        if action.is_jump_serve:
            split: Optional[ServeTypeStats] = self.jump_serves
        elif action.sub_type in SERVE_FLOAT_TYPES:
            split = self.float_serves
        else:
            split = None
        if split is not None:
            split.total += 1
            split.points += is_point
            split.mistakes += is_mistake
            split.positive += is_positive

    @property
    def efficiency(self) -> Optional[float]:
        return percentage(self.points + self.positive - self.mistakes, self.total)


@dataclass
class ReceptionTypeStats:
    total: int = 0
    positive: int = 0
    negative: int = 0
    mistakes: int = 0

    @property
    def efficiency(self) -> Optional[float]:
        return percentage(self.positive - (self.mistakes + self.negative), self.total)


@dataclass
class ReceptionStats:
    total: int = 0
    positive: int = 0
    negative: int = 0
    mistakes: int = 0
    against_jump: ReceptionTypeStats = field(default_factory=ReceptionTypeStats)
    against_float: ReceptionTypeStats = field(default_factory=ReceptionTypeStats)

    def record(self, action: RallyAction) -> None:
        is_positive = action.has_grade(Grade.POSITIVE)
        is_negative = action.has_grade(Grade.NEGATIVE)
        is_mistake = action.has_grade(Grade.ERROR)
        self.total += 1
        self.positive += is_positive
        self.negative += is_negative
        self.mistakes += is_mistake
        if action.is_jump_serve:
            split: Optional[ReceptionTypeStats] = self.against_jump
        elif action.sub_type in RECEPTION_FLOAT_TYPES:
            split = self.against_float
        else:
            split = None
        if split is not None:
            split.total += 1
            split.positive += is_positive
            split.negative += is_negative
            split.mistakes += is_mistake

    @property
    def efficiency(self) -> Optional[float]:
        return percentage(self.positive - (self.mistakes + self.negative), self.total)


@dataclass
class AttackingStats:
    total: int = 0
    points: int = 0
    mistakes: int = 0
    blocked: int = 0
    negative: int = 0
    positive: int = 0

    def record(self, action: RallyAction) -> None:
        self.total += 1
        self.points += action.has_grade(Grade.POINT)
        self.mistakes += action.has_grade(Grade.ERROR)
        self.blocked += action.has_grade(Grade.BLOCKED)
        self.negative += action.has_grade(Grade.NEGATIVE)
        self.positive += action.has_grade(Grade.POSITIVE)

    @property
    def efficiency(self) -> Optional[float]:
        return percentage(self.points - (self.blocked + self.mistakes), self.total)


@dataclass
class BlockingStats:
    total: int = 0
    points: int = 0
    mistakes: int = 0
    positive: int = 0
    negative: int = 0

    def record(self, action: RallyAction) -> None:
        self.total += 1
        self.points += action.has_grade(Grade.POINT)
        self.mistakes += action.has_grade(Grade.ERROR)
        self.positive += action.has_grade(Grade.POSITIVE)
        self.negative += action.has_grade(Grade.NEGATIVE)

    @property
    def efficiency(self) -> Optional[float]:
        return percentage(
            self.points + self.positive - (self.mistakes + self.negative), self.total
        )


SkillStats = Union[ServingStats, ReceptionStats, AttackingStats, BlockingStats]


@dataclass
class SkillEntry:
    player: Player
    played_sets: int
    stats: SkillStats

    def per_set(self, value: int) -> Optional[float]:
        return rate(value, self.played_sets)

    def to_dict(self) -> Dict[str, object]:
        return {
            "team": self.player.team.code,
            "team_name": self.player.team.name,
            "number": self.player.number,
            "name": self.player.display_name,
            "role": self.player.role.value,
            "played_sets": self.played_sets,
            "efficiency": self.stats.efficiency,
            "stats": asdict(self.stats),
        }


@dataclass
class ScorerEntry:
    player: Player
    played_sets: int = 0
    serve_points: int = 0
    attack_points: int = 0
    block_points: int = 0

    @property
    def total_points(self) -> int:
        return self.serve_points + self.attack_points + self.block_points

    @property
    def points_per_set(self) -> Optional[float]:
        return rate(self.total_points, self.played_sets)

    def to_dict(self) -> Dict[str, object]:
        return {
            "team": self.player.team.code,
            "number": self.player.number,
            "name": self.player.display_name,
            "role": self.player.role.value,
            "played_sets": self.played_sets,
            "total_points": self.total_points,
            "serve_points": self.serve_points,
            "attack_points": self.attack_points,
            "block_points": self.block_points,
            "points_per_set": self.points_per_set,
        }


def iter_player_actions(
    match: MatchResult,
    skill: Skill,
) -> Iterator[Tuple[RallyAction, Player]]:
    """Yield the match's actions of one skill with their rostered player.

    Numbers missing from the roster are passed over.
    """

    lookup = match.player_lookup()
    for action in match.rally_actions():
        if action.skill is not skill:
            continue
        player = lookup.get(action.marker, action.player_number)
        if player is None:
            continue
        yield action, player


def _played_sets(matches: Iterable[MatchResult]) -> Dict[PlayerKey, int]:
    totals: Dict[PlayerKey, int] = {}
    for match in matches:
        for player in match.players:
            totals[player.key] = totals.get(player.key, 0) + player.played_sets
    return totals


EntryFactory = Callable[[Player], SkillEntry]
Recorder = Callable[[MatchResult, Skill, EntryFactory], None]


def _record_actions(match: MatchResult, skill: Skill, entry_for: EntryFactory) -> None:
    for action, player in iter_player_actions(match, skill):
        entry_for(player).stats.record(action)


def _collect(
    matches: Sequence[MatchResult],
    skill: Skill,
    factory: Callable[[], SkillStats],
    roles: Optional[FrozenSet[Role]],
    recorder: Recorder = _record_actions,
) -> List[SkillEntry]:
    played_sets = _played_sets(matches)
    entries: Dict[PlayerKey, SkillEntry] = {}

    def entry_for(player: Player) -> SkillEntry:
        entry = entries.get(player.key)
        if entry is None:
            entry = SkillEntry(
                player=player,
                played_sets=played_sets.get(player.key, 0),
                stats=factory(),
            )
            entries[player.key] = entry
        return entry

    for match in matches:
        recorder(match, skill, entry_for)

    return [
        entry
        for entry in entries.values()
        if entry.stats.total > 0 and (roles is None or entry.player.role in roles)
    ]


def _non_libero_roles(include_liberos: bool) -> Optional[FrozenSet[Role]]:
    if include_liberos:
        return None
    return frozenset(role for role in Role if role is not Role.LIBERO)


def _record_serves(match: MatchResult, skill: Skill, entry_for: EntryFactory) -> None:
    current_server: Optional[Tuple[str, str]] = None
    run = 0
    for action, player in iter_player_actions(match, skill):
        server = (action.marker, action.player_number)
        if server == current_server:
            run += 1
        else:
            current_server = server
            run = 1
        stats = cast(ServingStats, entry_for(player).stats)
        stats.record(action)
        stats.max_consecutive = max(stats.max_consecutive, run)


def collect_serving(
    matches: Sequence[MatchResult], *, include_liberos: bool = False
) -> List[SkillEntry]:
    return _collect(
        matches,
        Skill.SERVE,
        ServingStats,
        _non_libero_roles(include_liberos),
        recorder=_record_serves,
    )


def collect_reception(
    matches: Sequence[MatchResult], *, roles: Optional[FrozenSet[Role]] = RECEPTION_ROLES
) -> List[SkillEntry]:
    return _collect(matches, Skill.RECEPTION, ReceptionStats, roles)


def collect_attacking(
    matches: Sequence[MatchResult], *, include_liberos: bool = False
) -> List[SkillEntry]:
    return _collect(matches, Skill.ATTACK, AttackingStats, _non_libero_roles(include_liberos))


def collect_blocking(
    matches: Sequence[MatchResult], *, include_liberos: bool = False
) -> List[SkillEntry]:
    return _collect(matches, Skill.BLOCK, BlockingStats, _non_libero_roles(include_liberos))


def collect_scorers(
    matches: Sequence[MatchResult], *, include_liberos: bool = False
) -> List[ScorerEntry]:
    """Sum played sets and points per player across matches."""

    entries: Dict[PlayerKey, ScorerEntry] = {}
    for match in matches:
        for player in match.players:
            if player.role is Role.LIBERO and not include_liberos:
                continue
            entry = entries.setdefault(player.key, ScorerEntry(player=player))
            entry.played_sets += player.played_sets
            entry.serve_points += player.serve_points
            entry.attack_points += player.attack_points
            entry.block_points += player.block_points

    scorers = [entry for entry in entries.values() if entry.played_sets > 0]
    scorers.sort(key=lambda entry: (-entry.total_points, entry.player.display_name.lower()))
    return scorers


__all__ = [
    "AttackingStats",
    "BlockingStats",
    "RECEPTION_ROLES",
    "ReceptionStats",
    "ScorerEntry",
    "ServingStats",
    "SkillEntry",
    "collect_attacking",
    "collect_blocking",
    "collect_reception",
    "collect_scorers",
    "collect_serving",
    "iter_player_actions",
]
