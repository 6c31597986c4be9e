"""Three-market chart ranking."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from ..config import SimulationSettings, settings
from ..models import UNRANKED, ChartEntry, ChartMarket, ChartPosition, Ranked, Release, better_position

logger = logging.getLogger(__name__)

CHART_METRICS: Dict[ChartMarket, Callable[[Release], int]] = {
    ChartMarket.DOMESTIC: lambda r: r.stats.unique_listeners_domestic,
    ChartMarket.SECONDARY: lambda r: r.stats.weekly_streams_secondary,
    ChartMarket.GLOBAL: lambda r: r.stats.weekly_streams_global,
}


def chart_metric(release: Release, market: ChartMarket) -> int:
    return CHART_METRICS[market](release)


def rank_market(releases: Sequence[Release], market: ChartMarket) -> List[Release]:
    """Order releases best-first for one market.

    Python's sort is stable, so equal metrics keep their catalog order.
    """
    metric = CHART_METRICS[market]
    return sorted(releases, key=metric, reverse=True)


def update_chart_run(release: Release, market: ChartMarket, position: ChartPosition, week: int) -> None:
    run = release.charts[market]
    run.current = position
    if isinstance(position, Ranked):
        run.peak = better_position(run.peak, position)
        run.history.append(ChartEntry(week=week, rank=position.position))


def rank_releases(
    releases: Sequence[Release],
    week: int,
    sim_settings: Optional[SimulationSettings] = None,
) -> None:
    """Re-rank every active release on all three charts in place.

    Releases not out yet are marked off-chart and get no chart-run entry.
    """
    sim_settings = sim_settings or settings.simulation
    active = [r for r in releases if r.is_active(week)]

    for release in releases:
        if not release.is_active(week):
            for market in ChartMarket:
                release.charts[market].current = UNRANKED

    for market in ChartMarket:
        ordered = rank_market(active, market)
        for idx, release in enumerate(ordered):
            position: ChartPosition = Ranked(idx + 1) if idx < sim_settings.chart_size else UNRANKED
            update_chart_run(release, market, position, week)

        if ordered:
            leader = ordered[0]
            logger.debug("Week %s %s #1: %s (%s)", week, market.value, leader.title, chart_metric(leader, market))


def chart_leader(releases: Sequence[Release], market: ChartMarket) -> Optional[Release]:
    """Release currently at #1 on a market, if any."""
    for release in releases:
        if release.charts[market].current == Ranked(1):
            return release
    return None
