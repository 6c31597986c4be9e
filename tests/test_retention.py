from __future__ import annotations

import math

import pytest

from conftest import StubRandom
from idolsim.config import SimulationSettings
from idolsim.models import Concept, FandomStats, MarketFocus, ReleaseKind, ReleaseStyle
from idolsim.sim.retention import (
    compute_weekly_metrics,
    critic_factor,
    market_multipliers,
    public_multiplier,
    simulate_release_week,
    time_retention,
)


def test_time_retention_launch_week_is_full() -> None:
    assert time_retention(0, ReleaseStyle.COMMERCIAL, 60) == 1.0
    assert time_retention(0, ReleaseStyle.CONCEPTUAL, 60) == 1.0


def test_time_retention_early_band_is_linear() -> None:
    assert math.isclose(time_retention(3, ReleaseStyle.COMMERCIAL, 60), 1.0 - 3 * 0.03 * 1.2)
    assert math.isclose(time_retention(4, ReleaseStyle.CONCEPTUAL, 60), 1.0 - 4 * 0.03 * 0.8)


def test_time_retention_mid_band_is_exponential() -> None:
    assert math.isclose(time_retention(7, ReleaseStyle.CONCEPTUAL, 60), 0.88 * (0.85 * 0.8) ** 3)
    assert math.isclose(time_retention(12, ReleaseStyle.COMMERCIAL, 60), 0.88 * (0.85 * 1.2) ** 8)


def test_time_retention_steps_down_across_band_boundaries() -> None:
    assert time_retention(4, ReleaseStyle.CONCEPTUAL, 60) >= time_retention(5, ReleaseStyle.CONCEPTUAL, 60)
    assert time_retention(12, ReleaseStyle.COMMERCIAL, 60) >= time_retention(13, ReleaseStyle.COMMERCIAL, 60)


def test_time_retention_decreasing_through_first_twelve_weeks_for_conceptual() -> None:
    values = [time_retention(age, ReleaseStyle.CONCEPTUAL, 60) for age in range(0, 13)]
    assert all(a >= b for a, b in zip(values, values[1:]))


def test_time_retention_long_tail_decreasing_for_neutral_reviews() -> None:
    values = [time_retention(age, ReleaseStyle.CONCEPTUAL, 60) for age in range(13, 40)]
    assert all(a > b for a, b in zip(values, values[1:]))


def test_time_retention_rejects_negative_age() -> None:
    with pytest.raises(ValueError):
        time_retention(-1, ReleaseStyle.COMMERCIAL, 60)


def test_long_tail_uses_critic_factor() -> None:
    assert critic_factor(85) == 0.7
    assert critic_factor(40) == 1.3
    assert critic_factor(80) == 1.0
    assert critic_factor(50) == 1.0

    acclaimed = time_retention(13, ReleaseStyle.COMMERCIAL, 85)
    panned = time_retention(13, ReleaseStyle.COMMERCIAL, 40)
    assert math.isclose(acclaimed, 0.25 * 0.98 * 0.7)
    assert math.isclose(panned, 0.25 * 0.98 * 1.3)
    assert acclaimed != panned


def test_market_multipliers() -> None:
    assert market_multipliers(MarketFocus.DOMESTIC) == (1.3, 0.7)
    assert market_multipliers(MarketFocus.GLOBAL) == (0.7, 1.3)
    assert market_multipliers(MarketFocus.BALANCED) == (1.0, 1.0)


def test_public_multiplier_has_floor() -> None:
    assert public_multiplier(-5.0, 0, False, False, 0, ReleaseStyle.CONCEPTUAL) == 0.01


def test_public_multiplier_stacks_trend_virality_and_interest() -> None:
    base = public_multiplier(1.0, 50, False, False, 0, ReleaseStyle.CONCEPTUAL)
    boosted = public_multiplier(1.0, 50, True, True, 25, ReleaseStyle.CONCEPTUAL)
    assert math.isclose(boosted, base * 1.2 * 4.0 * 2.0)


def test_commercial_launch_week_domestic_streams(make_release) -> None:
    release = make_release(quality=80, release_week=1, concept=Concept.DARK)
    fandom = FandomStats(size=5000, streaming_power=80, buying_power=60)

    metrics = compute_weekly_metrics(release, fandom, week=1, trend=Concept.CUTE, rng=StubRandom(0.5))

    # 5000 x (80 / 50) x 10 = 80,000 base; public multiplier (1.0 + 0.32) x 1.2 = 1.584
    assert abs(metrics.streams_domestic - 126_720) <= 1
    assert math.isclose(metrics.public_multiplier, 1.584)
    assert metrics.unique_listeners == math.floor(metrics.streams_domestic * 0.3)
    assert not metrics.is_viral


def test_global_streams_include_playlist_and_tiktok(make_release) -> None:
    release = make_release(quality=80, release_week=1)
    release.marketing.playlist_reach = 200_000
    fandom = FandomStats(size=5000, streaming_power=80)

    metrics = compute_weekly_metrics(release, fandom, week=1, trend=Concept.CUTE, rng=StubRandom(0.5))

    assert metrics.weekly_videos == 250
    expected = math.floor(80000 * metrics.public_multiplier * 2.0 + 200_000 * 0.05 + 250 * 100)
    assert abs(metrics.streams_global - expected) <= 1
    assert abs(metrics.streams_secondary - math.floor(80000 * metrics.public_multiplier * 0.5)) <= 1


def test_album_physical_sales_halve_weekly_and_stop_after_eight_weeks(make_release) -> None:
    fandom = FandomStats(size=10000, buying_power=60, streaming_power=50)
    album = make_release(kind=ReleaseKind.ALBUM, quality=50, release_week=1)

    week0 = compute_weekly_metrics(album, fandom, week=1, trend=Concept.CUTE, rng=StubRandom(0.0))
    week2 = compute_weekly_metrics(album, fandom, week=3, trend=Concept.CUTE, rng=StubRandom(0.0))
    week8 = compute_weekly_metrics(album, fandom, week=9, trend=Concept.CUTE, rng=StubRandom(0.0))

    assert week0.physical_units == 6000
    assert week2.physical_units == 1500
    assert week8.physical_units == 0


def test_singles_have_no_physical_sales(make_release) -> None:
    fandom = FandomStats(size=10000, buying_power=100)
    single = make_release(kind=ReleaseKind.SINGLE)
    metrics = compute_weekly_metrics(single, fandom, week=1, trend=Concept.CUTE, rng=StubRandom(0.0))
    assert metrics.physical_units == 0


def test_sales_points_kept_apart_from_physical_units(make_release) -> None:
    fandom = FandomStats(size=10000, buying_power=60, streaming_power=80)
    album = make_release(kind=ReleaseKind.ALBUM, quality=50, release_week=1)

    metrics = simulate_release_week(album, fandom, 1, Concept.CUTE, StubRandom(0.0))

    assert album.stats.weekly_physical == metrics.physical_units == 6000
    assert album.stats.weekly_sales_points == 6000 + metrics.streaming_units
    assert metrics.streaming_units == math.floor((metrics.streams_domestic + metrics.streams_global) / 1500)
    assert album.stats.total_physical == 6000


def test_unreleased_release_is_untouched(make_release) -> None:
    release = make_release(release_week=5)
    release.stats.weekly_streams_domestic = 1234

    result = simulate_release_week(release, FandomStats(size=5000), 3, Concept.CUTE, StubRandom(0.5))

    assert result is None
    assert release.stats.weekly_streams_domestic == 1234
    assert release.stats.total_streams_domestic == 0
    assert release.tiktok.total_videos == 0


def test_totals_accumulate_over_weeks(make_release) -> None:
    release = make_release(release_week=1)
    fandom = FandomStats(size=5000, streaming_power=80)
    rng = StubRandom(0.3)

    first = simulate_release_week(release, fandom, 1, Concept.CUTE, rng)
    second = simulate_release_week(release, fandom, 2, Concept.CUTE, rng)

    assert release.stats.total_streams_domestic == first.streams_domestic + second.streams_domestic
    assert release.stats.mv_views == first.streams_global + second.streams_global
    assert release.tiktok.total_views == (first.weekly_videos + second.weekly_videos) * 500


def test_public_interest_decays_and_floors_at_zero(make_release) -> None:
    release = make_release(release_week=1)
    release.marketing.public_interest = 7
    fandom = FandomStats(size=5000)

    simulate_release_week(release, fandom, 1, Concept.CUTE, StubRandom(0.1))
    assert release.marketing.public_interest == 2
    simulate_release_week(release, fandom, 2, Concept.CUTE, StubRandom(0.1))
    assert release.marketing.public_interest == 0


def test_virality_is_sticky(make_release) -> None:
    release = make_release(release_week=1)
    release.is_viral = True
    fandom = FandomStats(size=5000)

    for week in range(1, 30):
        metrics = simulate_release_week(release, fandom, week, Concept.CUTE, StubRandom(0.0))
        assert metrics.weekly_videos == 0
        assert release.is_viral


def test_viral_release_gets_video_and_stream_boost(make_release) -> None:
    fandom = FandomStats(size=5000, streaming_power=80)
    plain = make_release(release_id="plain", release_week=1)
    viral = make_release(release_id="viral", release_week=1)
    viral.is_viral = True

    plain_metrics = compute_weekly_metrics(plain, fandom, 1, Concept.CUTE, StubRandom(0.9))
    viral_metrics = compute_weekly_metrics(viral, fandom, 1, Concept.CUTE, StubRandom(0.9))

    assert viral_metrics.weekly_videos == 2250
    assert plain_metrics.weekly_videos == 450
    assert math.isclose(viral_metrics.public_multiplier, plain_metrics.public_multiplier * 4.0)


def test_weekly_videos_over_threshold_turn_release_viral(make_release) -> None:
    release = make_release(release_week=1)
    fandom = FandomStats(size=5000)

    metrics = simulate_release_week(
        release, fandom, 1, Concept.CUTE, StubRandom(0.9), SimulationSettings(viral_video_threshold=400)
    )
    assert metrics.is_viral
    assert release.is_viral


def test_missing_fandom_uses_neutral_profile(make_release) -> None:
    orphan = make_release(release_id="orphan", release_week=1)
    reference = make_release(release_id="reference", release_week=1)

    orphan_metrics = simulate_release_week(orphan, None, 1, Concept.CUTE, StubRandom(0.2))
    reference_metrics = compute_weekly_metrics(reference, FandomStats.neutral(), 1, Concept.CUTE, StubRandom(0.2))

    assert orphan_metrics.streams_domestic == reference_metrics.streams_domestic
    assert orphan_metrics.streams_domestic > 0


def test_trend_match_boosts_streams(make_release) -> None:
    fandom = FandomStats(size=5000)
    on_trend = make_release(release_id="a", concept=Concept.CUTE)
    off_trend = make_release(release_id="b", concept=Concept.DARK)

    a = compute_weekly_metrics(on_trend, fandom, 1, Concept.CUTE, StubRandom(0.0))
    b = compute_weekly_metrics(off_trend, fandom, 1, Concept.CUTE, StubRandom(0.0))
    assert math.isclose(a.public_multiplier, b.public_multiplier * 1.2)
