"""Weekly music show scoring.

Each show picks a winner among the top domestic-chart releases that are still
in their promotion window. Four components are normalized against the best
nominee (denominator floored at 1), scaled to a 10,000 point basis and
weighted per show; a flat broadcast score in [0, 2000) is added unweighted.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import SimulationSettings, settings
from ..models import (
    ChartMarket,
    FandomStats,
    Notification,
    NotificationLevel,
    Ranked,
    Release,
    ScoreBreakdown,
    ShowCandidate,
    ShowResult,
    WorldState,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShowWeights:
    digital: float
    physical: float
    sns: float
    vote: float


@dataclass(frozen=True)
class MusicShow:
    name: str
    weights: ShowWeights


MUSIC_SHOWS: Tuple[MusicShow, ...] = (
    MusicShow("The Show", ShowWeights(digital=0.4, physical=0.1, sns=0.2, vote=0.15)),
    MusicShow("Show Champion", ShowWeights(digital=0.35, physical=0.15, sns=0.2, vote=0.15)),
    MusicShow("M Countdown", ShowWeights(digital=0.45, physical=0.15, sns=0.15, vote=0.1)),
    MusicShow("Music Bank", ShowWeights(digital=0.6, physical=0.05, sns=0.0, vote=0.1)),
    MusicShow("Inkigayo", ShowWeights(digital=0.55, physical=0.1, sns=0.3, vote=0.05)),
)


@dataclass(frozen=True)
class Normalizers:
    """Per-component maxima across this week's nominees."""
    digital: int
    physical: int
    sns: int
    vote: int

    @classmethod
    def from_candidates(cls, candidates: Sequence[Release]) -> "Normalizers":
        def top(values: List[int]) -> int:
            return max(max(values, default=0), 1)

        return cls(
            digital=top([r.stats.weekly_streams_domestic for r in candidates]),
            physical=top([r.stats.weekly_sales_points for r in candidates]),
            sns=top([r.stats.mv_views for r in candidates]),
            vote=top([r.votes for r in candidates]),
        )


def eligible_candidates(
    releases: Sequence[Release],
    week: int,
    sim_settings: Optional[SimulationSettings] = None,
) -> List[Release]:
    """Best domestic-ranked releases still inside the promotion window."""
    sim_settings = sim_settings or settings.simulation
    eligible = [
        r for r in releases
        if r.is_active(week)
        and r.age(week) < sim_settings.show_eligibility_weeks
        and isinstance(r.charts[ChartMarket.DOMESTIC].current, Ranked)
    ]
    eligible.sort(key=lambda r: r.charts[ChartMarket.DOMESTIC].current.position)
    return eligible[:sim_settings.show_candidates]


def score_candidate(
    release: Release,
    weights: ShowWeights,
    norms: Normalizers,
    rng: random.Random,
    sim_settings: Optional[SimulationSettings] = None,
) -> ShowCandidate:
    sim_settings = sim_settings or settings.simulation
    basis = sim_settings.show_score_basis
    breakdown = ScoreBreakdown(
        digital=release.stats.weekly_streams_domestic / norms.digital * basis * weights.digital,
        physical=release.stats.weekly_sales_points / norms.physical * basis * weights.physical,
        sns=release.stats.mv_views / norms.sns * basis * weights.sns,
        votes=release.votes / norms.vote * basis * weights.vote,
        broadcast=rng.random() * sim_settings.broadcast_max,
    )
    return ShowCandidate(
        release_id=release.id,
        artist_name=release.artist_name,
        title=release.title,
        is_user=release.is_user,
        score=math.floor(breakdown.total),
        breakdown=breakdown,
    )


def pick_winner(candidates: Sequence[ShowCandidate]) -> ShowCandidate:
    # max() keeps the first of equal scores.
    return max(candidates, key=lambda c: c.score)


def placements(candidates: Sequence[ShowCandidate]) -> Dict[str, int]:
    """Map release id to 1-based placement, winner first, then by score."""
    winner = pick_winner(candidates)
    others = sorted((c for c in candidates if c is not winner), key=lambda c: c.score, reverse=True)
    return {c.release_id: idx + 1 for idx, c in enumerate([winner, *others])}


def run_show(
    show: MusicShow,
    candidates: Sequence[Release],
    week: int,
    rng: random.Random,
    sim_settings: Optional[SimulationSettings] = None,
) -> Optional[Tuple[ShowCandidate, Tuple[ShowCandidate, ...]]]:
    """Score one show. Returns (winner, all scored nominees) or None if nobody is eligible."""
    if not candidates:
        return None

    norms = Normalizers.from_candidates(candidates)
    scored = tuple(score_candidate(r, show.weights, norms, rng, sim_settings) for r in candidates)
    winner = pick_winner(scored)
    places = placements(scored)

    by_id = {r.id: r for r in candidates}
    for entry in scored:
        release = by_id[entry.release_id]
        won = entry is winner
        release.show_history.append(
            ShowResult(
                show_name=show.name,
                week=week,
                placement=places[entry.release_id],
                score=entry.score,
                won=won,
                candidates=scored,
            )
        )
        if won:
            release.show_wins += 1

    logger.info("Week %s %s: %s - %s (%s pts)", week, show.name, winner.artist_name, winner.title, winner.score)
    return winner, scored


def resolve_music_shows(
    state: WorldState,
    week: int,
    rng: random.Random,
    shows: Sequence[MusicShow] = MUSIC_SHOWS,
    sim_settings: Optional[SimulationSettings] = None,
) -> List[ShowCandidate]:
    """Run every show for the week, rewarding the player's fandom on wins.

    Mutates ``state`` in place and returns the list of winners in show order.
    """
    sim_settings = sim_settings or settings.simulation
    candidates = eligible_candidates(state.releases, week, sim_settings)
    winners: List[ShowCandidate] = []

    for show in shows:
        outcome = run_show(show, candidates, week, rng, sim_settings)
        if outcome is None:
            continue
        winner, _ = outcome
        winners.append(winner)
        if winner.is_user:
            reward_player_win(state.fandom, sim_settings)
            state.notifications.append(_win_notification(show, winner, week))

    return winners


def reward_player_win(fandom: FandomStats, sim_settings: Optional[SimulationSettings] = None) -> None:
    sim_settings = sim_settings or settings.simulation
    fandom.size += sim_settings.fandom_win_bonus


def _win_notification(show: MusicShow, winner: ShowCandidate, week: int) -> Notification:
    return Notification(
        title="Music Show Win",
        message=f"Won {show.name} with {winner.title}!",
        level=NotificationLevel.SUCCESS,
        week=week,
    )
