"""
Weekly turn orchestration.

Sequence for one week:
1. Competitor releases are decided and prepended to the catalog.
2. Every active release gets its weekly streams, sales and virality.
3. All active releases are ranked on the three charts.
4. Music shows are resolved from the post-ranking data.
5. The catalog is re-sorted newest-first.
6. Revenue and maintenance are settled, the week advances and idols rest.

The input state is never mutated: the turn works on a deep copy and returns it
only when every step has completed.
"""

from __future__ import annotations

import copy
import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional

from ..config import Settings, settings as default_settings
from ..models import GroupHistoryEntry, Idol, Release, ShowCandidate, WorldState
from .bots import generate_bot_releases
from .charts import rank_releases
from .retention import simulate_release_week
from .shows import resolve_music_shows

logger = logging.getLogger(__name__)


@dataclass
class Settlement:
    """Money movements for one week."""
    physical_revenue: int = 0
    streaming_revenue: float = 0.0
    maintenance: int = 0

    @property
    def gross_revenue(self) -> float:
        return self.physical_revenue + self.streaming_revenue


@dataclass
class TurnOutcome:
    """The committed next state plus what happened along the way."""
    state: WorldState
    week: int
    settlement: Settlement
    bot_releases: List[Release] = field(default_factory=list)
    show_winners: List[ShowCandidate] = field(default_factory=list)


def maintenance_cost(state: WorldState, config: Optional[Settings] = None) -> int:
    economy = (config or default_settings).economy
    return economy.maintenance_base + len(state.active_idols) * economy.maintenance_per_member


def settle_revenue(releases: List[Release], week: int, config: Optional[Settings] = None) -> Settlement:
    """Physical revenue for player releases launching this week plus streaming royalties."""
    economy = (config or default_settings).economy
    settlement = Settlement()

    for release in releases:
        if release.is_user and release.age(week) == 0:
            settlement.physical_revenue += release.stats.weekly_physical * economy.physical_unit_price

    player_streams = sum(
        r.stats.weekly_streams_domestic + r.stats.weekly_streams_global
        for r in releases
        if r.is_user and r.is_active(week)
    )
    settlement.streaming_revenue = player_streams * economy.stream_royalty
    return settlement


def rest_idol(idol: Idol, config: Optional[Settings] = None) -> None:
    economy = (config or default_settings).economy
    idol.energy = min(100, idol.energy + economy.energy_recovery)
    idol.stress = max(0, idol.stress - economy.stress_relief)


def advance_week(
    state: WorldState,
    rng: Optional[random.Random] = None,
    config: Optional[Settings] = None,
) -> TurnOutcome:
    """Simulate the next week and return the new state.

    Args:
        state: Current committed state (left untouched)
        rng: Random source; pass a seeded one for reproducible turns
        config: Settings override, defaults to the global settings

    Returns:
        TurnOutcome carrying the new state and the week's settlement
    """
    config = config or default_settings
    rng = rng or random.Random()
    sim_settings = config.simulation

    working = copy.deepcopy(state)
    week = working.week + 1

    # 1. Competitor releases
    bot_releases = generate_bot_releases(
        working.competitors, working.releases, week, working.trend, rng, sim_settings
    )
    working.releases = bot_releases + working.releases

    # 2. Weekly consumption
    active = 0
    for release in working.releases:
        fandom = working.fandom_for(release)
        if simulate_release_week(release, fandom, week, working.trend, rng, sim_settings) is not None:
            active += 1

    # 3. Charts
    rank_releases(working.releases, week, sim_settings)

    # 4. Music shows
    winners = resolve_music_shows(working, week, rng, sim_settings=sim_settings)

    # 5. Newest first
    working.releases.sort(key=lambda r: r.release_week, reverse=True)

    # 6. Economy and upkeep
    settlement = settle_revenue(working.releases, week, config)
    settlement.maintenance = maintenance_cost(working, config)
    working.money = math.floor(working.money + settlement.gross_revenue) - settlement.maintenance

    working.week = week
    working.fan_votes += config.economy.weekly_fan_votes
    for idol in working.active_idols + working.trainees:
        rest_idol(idol, config)

    total_streams = sum(
        r.stats.total_streams_domestic + r.stats.total_streams_global
        for r in working.releases
        if r.is_user
    )
    working.group_history.append(
        GroupHistoryEntry(week=week, total_streams=total_streams, fans=working.fandom.size, money=working.money)
    )

    logger.info(
        "Week %s: %s active releases, %s new from competitors, revenue %.0f, maintenance %s, balance %s",
        week, active, len(bot_releases), settlement.gross_revenue, settlement.maintenance, working.money,
    )

    return TurnOutcome(
        state=working,
        week=week,
        settlement=settlement,
        bot_releases=bot_releases,
        show_winners=winners,
    )
