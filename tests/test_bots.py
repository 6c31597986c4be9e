from __future__ import annotations

import pytest

from conftest import StubRandom
from idolsim.models import ChartMarket, Concept, MarketFocus, Ranked, ReleaseKind, ReleaseStyle
from idolsim.sim.bots import (
    NEVER_RELEASED_GAP,
    generate_bot_releases,
    is_weak_leader,
    release_probability,
    weeks_since_last_release,
)


def test_release_probability_dormant_artist_without_weak_leader() -> None:
    assert release_probability(25, leader_weak=False) == pytest.approx(0.25)


def test_release_probability_adds_opportunist_bonus() -> None:
    assert release_probability(25, leader_weak=True) == pytest.approx(0.55)
    assert release_probability(15, leader_weak=True) == pytest.approx(0.35)
    assert release_probability(15, leader_weak=False) == pytest.approx(0.05)
    assert release_probability(5, leader_weak=True) == pytest.approx(0.05)


def test_release_probability_thresholds_are_strict() -> None:
    assert release_probability(20, leader_weak=False) == pytest.approx(0.05)
    assert release_probability(10, leader_weak=True) == pytest.approx(0.05)


def test_weeks_since_last_release(make_release) -> None:
    releases = [make_release("a", artist_id="art-1", release_week=3), make_release("b", artist_id="art-1", release_week=7)]
    assert weeks_since_last_release(releases, "art-1", 10) == 3
    assert weeks_since_last_release(releases, "art-2", 10) == NEVER_RELEASED_GAP


def test_weak_leader_detection(make_release) -> None:
    leader = make_release("lead")
    leader.charts[ChartMarket.DOMESTIC].current = Ranked(1)
    leader.stats.weekly_streams_domestic = 500_000
    assert is_weak_leader([leader])

    leader.stats.weekly_streams_domestic = 2_000_000
    assert not is_weak_leader([leader])

    assert not is_weak_leader([make_release("nobody")])


def test_every_artist_releases_on_a_zero_draw(make_state) -> None:
    state = make_state(week=4, with_competitors=True)

    new = generate_bot_releases(state.competitors, state.releases, 5, Concept.RETRO, StubRandom(0.0))

    assert len(new) == 3
    # Newest decision first, matching a prepend per release.
    assert [r.artist_id for r in new] == ["art-2", "art-1", "art-0"]
    for release in new:
        assert release.release_week == 5
        assert release.concept == Concept.RETRO
        assert release.style == ReleaseStyle.COMMERCIAL
        assert release.market_focus == MarketFocus.BALANCED
        assert release.kind == ReleaseKind.SINGLE
        assert 75 <= release.quality < 95
        assert release.stats.total_streams_domestic == 0
        assert not release.is_user


def test_no_release_on_a_high_draw(make_state) -> None:
    state = make_state(with_competitors=True)
    assert generate_bot_releases(state.competitors, state.releases, 2, Concept.CUTE, StubRandom(0.99)) == []


def test_recent_release_keeps_artist_quiet_on_moderate_draw(make_state, make_release) -> None:
    state = make_state(with_competitors=True)
    state.releases = [make_release(f"r{i}", artist_id=f"art-{i}", release_week=9) for i in range(3)]

    # Draw of 0.1 beats the base chance only for artists dormant > 20 weeks.
    assert generate_bot_releases(state.competitors, state.releases, 10, Concept.CUTE, StubRandom(0.1)) == []
    state.releases = state.releases[:1]
    new = generate_bot_releases(state.competitors, state.releases, 10, Concept.CUTE, StubRandom(0.1))
    assert sorted(r.artist_id for r in new) == ["art-1", "art-2"]


def test_bot_concept_follows_trend_share(make_state, rng) -> None:
    state = make_state(with_competitors=True)
    on_trend = 0
    total = 0
    for week in range(1, 400):
        for release in generate_bot_releases(state.competitors, [], week, Concept.BALLAD, rng):
            total += 1
            on_trend += release.concept == Concept.BALLAD
    # 0.4 + 0.6 / 7 of releases land on the trend.
    assert total > 100
    assert 0.35 < on_trend / total < 0.62
