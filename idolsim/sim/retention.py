"""
Weekly retention and consumption model for releases.

HOW IT WORKS:
-------------
1. TIME RETENTION: fraction of launch-week popularity a release keeps at a
   given age, in three bands:
   - Weeks 0-4:  linear decay, 1 - age x 0.03 x decay_mod
   - Weeks 5-12: exponential, 0.88 x (0.85 x decay_mod)^(age - 4)
   - Week 13+:   long tail, 0.25 x (0.98 x critic_factor)^(age - 12)
   Commercial releases burn faster (decay_mod 1.2) than Conceptual ones (0.8).
   The tail base is scaled by 0.7 for acclaimed releases (critic > 80)
   and by 1.3 for panned ones (critic < 50).

2. PUBLIC MULTIPLIER: retention plus a quality floor, scaled by trend match,
   virality, marketing interest and style. Never below 0.01.

3. STREAMS: the fandom's domestic base (size x streaming power) drives all
   three markets. Global streams also pick up playlist reach and TikTok
   videos. Market focus shifts weight between domestic and global.

4. SALES: physical units only for albums in their first 8 weeks, halving
   weekly. Streaming-equivalent units (1500 streams = 1 unit) are added to
   chart sales points but never to physical units.

IMPORTANT:
----------
Releases whose release week is in the future are left untouched.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import SimulationSettings, settings
from ..models import Concept, FandomStats, MarketFocus, Release, ReleaseKind, ReleaseStyle

logger = logging.getLogger(__name__)

STREAMS_PER_SALES_UNIT = 1500
VIEWS_PER_VIDEO = 500
PHYSICAL_SALES_WEEKS = 8
PUBLIC_INTEREST_DECAY = 5

MARKET_MULTIPLIERS = {
    MarketFocus.DOMESTIC: (1.3, 0.7),
    MarketFocus.GLOBAL: (0.7, 1.3),
    MarketFocus.BALANCED: (1.0, 1.0),
}


@dataclass
class WeeklyMetrics:
    """One week of consumption for one release."""
    time_retention: float
    public_multiplier: float
    weekly_videos: int
    is_viral: bool
    streams_domestic: int
    streams_secondary: int
    streams_global: int
    unique_listeners: int
    streaming_units: int
    physical_units: int

    @property
    def sales_points(self) -> int:
        return self.physical_units + self.streaming_units


def decay_modifier(style: ReleaseStyle) -> float:
    return 1.2 if style == ReleaseStyle.COMMERCIAL else 0.8


def stream_modifier(style: ReleaseStyle) -> float:
    return 1.2 if style == ReleaseStyle.COMMERCIAL else 0.9


def critic_factor(critic_score: int) -> float:
    if critic_score > 80:
        return 0.7
    if critic_score < 50:
        return 1.3
    return 1.0


def time_retention(age: int, style: ReleaseStyle, critic_score: int) -> float:
    """Fraction of launch popularity kept at ``age`` weeks."""
    if age < 0:
        raise ValueError(f"age must be non-negative, got {age}")

    decay_mod = decay_modifier(style)
    if age <= 4:
        return 1.0 - age * 0.03 * decay_mod
    if age <= 12:
        return 0.88 * (0.85 * decay_mod) ** (age - 4)
    return 0.25 * (0.98 * critic_factor(critic_score)) ** (age - 12)


def market_multipliers(focus: MarketFocus) -> Tuple[float, float]:
    """(domestic, global) multipliers for a market focus."""
    return MARKET_MULTIPLIERS[focus]


def public_multiplier(
    retention: float,
    quality: int,
    trending: bool,
    viral: bool,
    public_interest: float,
    style: ReleaseStyle,
) -> float:
    quality_resilience = (quality / 100) * 0.4
    trend_factor = 1.2 if trending else 1.0
    viral_factor = 4.0 if viral else 1.0
    interest_factor = 1 + public_interest / 25
    value = (retention + quality_resilience) * trend_factor * viral_factor * interest_factor * stream_modifier(style)
    return max(0.01, value)


def physical_units(release: Release, fandom: FandomStats, age: int) -> int:
    """Weekly physical sales; only albums in their first weeks sell."""
    if release.kind != ReleaseKind.ALBUM or age >= PHYSICAL_SALES_WEEKS:
        return 0
    return math.floor(fandom.size * (fandom.buying_power / 100) * (release.quality / 50) * 0.5 ** age)


def compute_weekly_metrics(
    release: Release,
    fandom: FandomStats,
    week: int,
    trend: Concept,
    rng: random.Random,
    sim_settings: Optional[SimulationSettings] = None,
) -> WeeklyMetrics:
    """Compute one week of figures for an active release without mutating it."""
    sim_settings = sim_settings or settings.simulation
    age = release.age(week)
    retention = time_retention(age, release.style, release.reviews.critic_score)

    tiktok_base = 500 if release.style == ReleaseStyle.COMMERCIAL else 100
    weekly_videos = math.floor(tiktok_base * rng.random() * (5.0 if release.is_viral else 1.0) * retention)
    is_viral = release.is_viral or weekly_videos > sim_settings.viral_video_threshold

    multiplier = public_multiplier(
        retention,
        release.quality,
        trending=release.concept == trend,
        viral=is_viral,
        public_interest=release.marketing.public_interest,
        style=release.style,
    )
    domestic_mult, global_mult = market_multipliers(release.market_focus)

    domestic_base = fandom.size * (fandom.streaming_power / 50) * 10
    streams_domestic = math.floor(domestic_base * multiplier * domestic_mult)

    tiktok_bonus = weekly_videos * 100
    playlist_bonus = release.marketing.playlist_reach * 0.05
    streams_global = math.floor((domestic_base * multiplier * 2.0 + playlist_bonus + tiktok_bonus) * global_mult)
    streams_secondary = math.floor(domestic_base * multiplier * 0.5 * domestic_mult)

    return WeeklyMetrics(
        time_retention=retention,
        public_multiplier=multiplier,
        weekly_videos=weekly_videos,
        is_viral=is_viral,
        streams_domestic=streams_domestic,
        streams_secondary=streams_secondary,
        streams_global=streams_global,
        unique_listeners=math.floor(streams_domestic * 0.3),
        streaming_units=math.floor((streams_domestic + streams_global) / STREAMS_PER_SALES_UNIT),
        physical_units=physical_units(release, fandom, age),
    )


def apply_weekly_metrics(release: Release, metrics: WeeklyMetrics) -> None:
    """Write a week's figures into a release, accumulating running totals."""
    stats = release.stats
    stats.weekly_streams_domestic = metrics.streams_domestic
    stats.total_streams_domestic += metrics.streams_domestic
    stats.unique_listeners_domestic = metrics.unique_listeners
    stats.weekly_streams_secondary = metrics.streams_secondary
    stats.total_streams_secondary += metrics.streams_secondary
    stats.weekly_streams_global = metrics.streams_global
    stats.total_streams_global += metrics.streams_global
    stats.weekly_physical = metrics.physical_units
    stats.total_physical += metrics.physical_units
    stats.weekly_sales_points = metrics.sales_points
    stats.total_sales_points += metrics.sales_points
    stats.mv_views += metrics.streams_global

    tiktok = release.tiktok
    tiktok.weekly_videos = metrics.weekly_videos
    tiktok.total_videos += metrics.weekly_videos
    tiktok.total_views += metrics.weekly_videos * VIEWS_PER_VIDEO

    if metrics.is_viral and not release.is_viral:
        logger.info("Release %s (%s) went viral", release.id, release.title)
    release.is_viral = release.is_viral or metrics.is_viral
    release.marketing.public_interest = max(0, release.marketing.public_interest - PUBLIC_INTEREST_DECAY)


def simulate_release_week(
    release: Release,
    fandom: Optional[FandomStats],
    week: int,
    trend: Concept,
    rng: random.Random,
    sim_settings: Optional[SimulationSettings] = None,
) -> Optional[WeeklyMetrics]:
    """Advance one release by one week in place.

    Returns the week's metrics, or None when the release is not out yet.
    """
    if not release.is_active(week):
        return None
    if fandom is None:
        logger.debug("No fandom for artist %s, using neutral profile", release.artist_id)
        fandom = FandomStats.neutral()

    metrics = compute_weekly_metrics(release, fandom, week, trend, rng, sim_settings)
    apply_weekly_metrics(release, metrics)
    return metrics
