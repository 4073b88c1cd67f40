"""Aggregate decoded matches into per-team summaries."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .match import MatchResult, TeamStats, sum_team_stats
from .roster import Team

DEFAULT_OUTPUT_PATH = Path("docs/data/dvw_overview.json")


@dataclass(frozen=True)
class TeamSummary:
    """Season figures of one team.

    Rates are computed from summed counters, not averaged per match. A rate
    whose denominator is zero is ``None``.
    """

    team: Team
    matches: int
    wins: int
    sets: int
    won_sets: int
    won_points: int
    lost_points: int
    win_percentage: Optional[float]
    set_percentage: Optional[float]
    points_ratio: Optional[float]
    won_points_percentage: Optional[float]
    sideout_percentage: Optional[float]
    break_percentage: Optional[float]
    ace_percentage: Optional[float]
    reception_percentage: Optional[float]
    kill_percentage: Optional[float]
    opp_kill_percentage: Optional[float]
    block_percentage: Optional[float]
    car_percentage: Optional[float]
    aces: int
    kills: int
    blocks: int
    aces_per_set: Optional[float]
    kills_per_set: Optional[float]
    blocks_per_set: Optional[float]
    totals: TeamStats

    def to_dict(self) -> Dict[str, object]:
        payload = asdict(self)
        payload["team"] = self.team.to_dict()
        payload["totals"] = self.totals.to_dict()
        return payload


@dataclass(frozen=True)
class ScoutingOverview:
    matches: Tuple[MatchResult, ...]
    team_summaries: Tuple[TeamSummary, ...]

    def summary_for(self, team_code: str) -> Optional[TeamSummary]:
        for summary in self.team_summaries:
            if summary.team.code == team_code:
                return summary
        return None

    def to_dict(self) -> Dict[str, object]:
        return {
            "match_count": len(self.matches),
            "matches": [match.to_dict() for match in self.matches],
            "team_count": len(self.team_summaries),
            "teams": [summary.to_dict() for summary in self.team_summaries],
        }


def percentage(numerator: int, denominator: int) -> Optional[float]:
    if denominator <= 0:
        return None
    return numerator / denominator * 100


def rate(numerator: int, denominator: int) -> Optional[float]:
    if denominator <= 0:
        return None
    return numerator / denominator


def collect_teams(matches: Iterable[MatchResult]) -> List[Team]:
    teams: Dict[str, Team] = {}
    for match in matches:
        for team in (match.home_team, match.away_team):
            teams.setdefault(team.code, team)
    return list(teams.values())


def calculate_team_summary(team: Team, matches: Sequence[MatchResult]) -> TeamSummary:
    team_matches = [match for match in matches if match.involves(team.code)]

    total_sets = 0
    won_sets = 0
    won_points = 0
    lost_points = 0
    wins = 0
    for match in team_matches:
        total_sets += len(match.sets)
        if match.is_home(team.code):
            won_sets += match.home_set_wins
            won_points += match.total_home_points
            lost_points += match.total_away_points
            wins += 1 if match.is_win else 0
        else:
            won_sets += match.away_set_wins
            won_points += match.total_away_points
            lost_points += match.total_home_points
            wins += 0 if match.is_win else 1

    # The stats section carries one record per file; both teams of the match
    # are credited with it.
    totals = sum_team_stats(match.stats for match in team_matches)

    return TeamSummary(
        team=team,
        matches=len(team_matches),
        wins=wins,
        sets=total_sets,
        won_sets=won_sets,
        won_points=won_points,
        lost_points=lost_points,
        win_percentage=percentage(wins, len(team_matches)),
        set_percentage=percentage(won_sets, total_sets),
        points_ratio=percentage(totals.points, totals.total_points),
        won_points_percentage=percentage(won_points, won_points + lost_points),
        sideout_percentage=percentage(totals.sideouts, totals.sideout_attempts),
        break_percentage=percentage(totals.breaks, totals.break_attempts),
        ace_percentage=percentage(totals.aces, totals.serves),
        reception_percentage=percentage(totals.receptions, totals.reception_attempts),
        kill_percentage=percentage(totals.kills, totals.attack_attempts),
        opp_kill_percentage=percentage(
            totals.attack_attempts - totals.kills, totals.attack_attempts
        ),
        block_percentage=percentage(totals.blocks, totals.block_attempts),
        car_percentage=percentage(totals.cars, totals.car_attempts),
        aces=totals.aces,
        kills=totals.kills,
        blocks=totals.blocks,
        aces_per_set=rate(totals.aces, total_sets),
        kills_per_set=rate(totals.kills, total_sets),
        blocks_per_set=rate(totals.blocks, total_sets),
        totals=totals,
    )


def summarize_teams(matches: Sequence[MatchResult]) -> List[TeamSummary]:
    return [calculate_team_summary(team, matches) for team in collect_teams(matches)]


def build_overview(matches: Iterable[MatchResult]) -> ScoutingOverview:
    match_list = tuple(matches)
    return ScoutingOverview(
        matches=match_list,
        team_summaries=tuple(summarize_teams(match_list)),
    )


def write_overview_json(
    overview: ScoutingOverview,
    output_path: Optional[Path] = None,
) -> Dict[str, object]:
    if output_path is not None and not isinstance(output_path, Path):
        output_path = Path(output_path)
    if output_path is None:
        output_path = DEFAULT_OUTPUT_PATH

    payload: Dict[str, object] = {
        "generated": datetime.now(tz=timezone.utc).isoformat(),
        **overview.to_dict(),
    }
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return payload


__all__ = [
    "DEFAULT_OUTPUT_PATH",
    "ScoutingOverview",
    "TeamSummary",
    "build_overview",
    "calculate_team_summary",
    "collect_teams",
    "percentage",
    "rate",
    "summarize_teams",
    "write_overview_json",
]
