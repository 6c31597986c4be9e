"""Competitor release decisions."""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from ..config import SimulationSettings, settings
from ..models import (
    ChartMarket,
    Competitor,
    CompetitorArtist,
    Concept,
    MarketFocus,
    Release,
    ReleaseKind,
    ReleaseStyle,
    Reviews,
    TikTokStats,
)
from ..titles import random_song_title
from .charts import chart_leader

logger = logging.getLogger(__name__)

NEVER_RELEASED_GAP = 99


def weeks_since_last_release(releases: Sequence[Release], artist_id: str, week: int) -> int:
    weeks = [r.release_week for r in releases if r.artist_id == artist_id]
    if not weeks:
        return NEVER_RELEASED_GAP
    return week - max(weeks)


def is_weak_leader(releases: Sequence[Release], sim_settings: Optional[SimulationSettings] = None) -> bool:
    """True when the domestic #1 is pulling fewer streams than the threshold."""
    sim_settings = sim_settings or settings.simulation
    leader = chart_leader(releases, ChartMarket.DOMESTIC)
    return leader is not None and leader.stats.weekly_streams_domestic < sim_settings.weak_leader_streams


def release_probability(
    weeks_since: int,
    leader_weak: bool,
    sim_settings: Optional[SimulationSettings] = None,
) -> float:
    sim_settings = sim_settings or settings.simulation
    chance = sim_settings.bot_base_chance
    if weeks_since > sim_settings.bot_dormant_weeks:
        chance += sim_settings.bot_dormant_bonus
    # Rivals pounce on a weak chart leader.
    if leader_weak and weeks_since > sim_settings.bot_opportunist_weeks:
        chance += sim_settings.bot_opportunist_bonus
    return chance


def pick_concept(trend: Concept, rng: random.Random, sim_settings: Optional[SimulationSettings] = None) -> Concept:
    sim_settings = sim_settings or settings.simulation
    if rng.random() < sim_settings.bot_trend_chance:
        return trend
    return rng.choice(list(Concept))


def build_bot_release(
    artist: CompetitorArtist,
    week: int,
    trend: Concept,
    rng: random.Random,
    sim_settings: Optional[SimulationSettings] = None,
) -> Release:
    concept = pick_concept(trend, rng, sim_settings)
    title = random_song_title(concept, rng)
    return Release(
        id=f"ai-{week}-{artist.id}",
        artist_id=artist.id,
        artist_name=artist.name,
        artist_type=artist.group_type,
        title=title,
        concept=concept,
        style=ReleaseStyle.COMMERCIAL,
        market_focus=MarketFocus.BALANCED,
        kind=ReleaseKind.SINGLE,
        quality=artist.skill_level + rng.randrange(20),
        release_week=week,
        tiktok=TikTokStats(challenge_name=f"#{title.replace(' ', '')}Challenge"),
        reviews=Reviews(critic_score=50, public_score=50, summary="Generated"),
    )


def generate_bot_releases(
    competitors: Sequence[Competitor],
    releases: Sequence[Release],
    week: int,
    trend: Concept,
    rng: random.Random,
    sim_settings: Optional[SimulationSettings] = None,
) -> List[Release]:
    """Decide, per competitor artist, whether they drop something this week.

    Returns the new releases newest-first, ready to be prepended to the catalog.
    """
    leader_weak = is_weak_leader(releases, sim_settings)
    new_releases: List[Release] = []

    for competitor in competitors:
        for artist in competitor.artists:
            gap = weeks_since_last_release(releases, artist.id, week)
            chance = release_probability(gap, leader_weak, sim_settings)
            if rng.random() < chance:
                release = build_bot_release(artist, week, trend, rng, sim_settings)
                logger.info("Week %s: %s (%s) released %s", week, artist.name, competitor.name, release.title)
                new_releases.insert(0, release)

    return new_releases
