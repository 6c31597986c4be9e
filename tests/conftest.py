from __future__ import annotations

import random
import sys
from pathlib import Path
from typing import Callable

import pytest


# Ensure repo root is importable when running without an install.
_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from idolsim.content_client import ContentClient  # noqa: E402
from idolsim.models import (  # noqa: E402
    Competitor,
    CompetitorArtist,
    Concept,
    FandomStats,
    GroupType,
    Idol,
    IdolStats,
    MarketFocus,
    Release,
    ReleaseKind,
    ReleaseStyle,
    Reviews,
    WorldState,
)


class StubRandom(random.Random):
    """Random source whose uniform draws always return the same value."""

    def __init__(self, value: float = 0.0, seed: int = 0) -> None:
        super().__init__(seed)
        self.value = value

    def random(self) -> float:
        return self.value


def build_release(
    release_id: str = "r1",
    artist_id: str = "art-0",
    release_week: int = 1,
    style: ReleaseStyle = ReleaseStyle.COMMERCIAL,
    quality: int = 80,
    kind: ReleaseKind = ReleaseKind.SINGLE,
    concept: Concept = Concept.DARK,
    market_focus: MarketFocus = MarketFocus.BALANCED,
    critic_score: int = 60,
    is_user: bool = False,
) -> Release:
    return Release(
        id=release_id,
        artist_id=artist_id,
        artist_name=f"Artist {artist_id}",
        title=f"Song {release_id}",
        concept=concept,
        style=style,
        market_focus=market_focus,
        kind=kind,
        quality=quality,
        release_week=release_week,
        is_user=is_user,
        reviews=Reviews(critic_score=critic_score, public_score=60, summary=""),
    )


def build_state(week: int = 1, money: int = 50_000_000, with_competitors: bool = False) -> WorldState:
    competitors = []
    if with_competitors:
        competitors = [
            Competitor(
                id=f"comp-{i}",
                name=f"Agency {i}",
                reputation=70,
                strategy="Quality",
                artists=[
                    CompetitorArtist(
                        id=f"art-{i}",
                        name=f"Artist {i}",
                        group_type=GroupType.GIRL_GROUP,
                        concept=Concept.FRESH,
                        skill_level=75,
                        fandom=FandomStats(size=100_000 * (i + 1), buying_power=40, streaming_power=90),
                    )
                ],
            )
            for i in range(3)
        ]
    return WorldState(
        company_name="Test Co",
        group_name="Testers",
        group_type=GroupType.GIRL_GROUP,
        week=week,
        money=money,
        fandom=FandomStats(size=5000, name="Stars", buying_power=60, streaming_power=80, loyalty=90,
                           leaning=MarketFocus.DOMESTIC),
        trend=Concept.CUTE,
        fan_votes=500,
        competitors=competitors,
    )


def build_idol(idol_id: str = "idol-1", energy: int = 100) -> Idol:
    return Idol(
        id=idol_id,
        name="Hana",
        age=18,
        stats=IdolStats(vocal=50, dance=50, rap=50, visual=50, charisma=50),
        energy=energy,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def make_release() -> Callable[..., Release]:
    return build_release


@pytest.fixture
def make_state() -> Callable[..., WorldState]:
    return build_state


@pytest.fixture
def make_idol() -> Callable[..., Idol]:
    return build_idol


@pytest.fixture
def offline_client() -> ContentClient:
    """A client with no API key; every call returns its fallback payload."""
    return ContentClient(api_key="")
