"""New game setup: rival agencies, a back catalog and the starting state."""

from __future__ import annotations

import logging
import math
import random
from typing import List, Optional

from .config import Settings, settings as default_settings
from .content_client import ContentClient, TraineeProfile, content_client
from .models import (
    UNRANKED,
    ChartEntry,
    ChartMarket,
    ChartRun,
    Competitor,
    CompetitorArtist,
    Concept,
    FandomStats,
    GroupType,
    Idol,
    MarketFocus,
    NotificationLevel,
    Ranked,
    Release,
    ReleaseKind,
    ReleaseStats,
    ReleaseStyle,
    Reviews,
    TikTokStats,
    WorldState,
)
from .titles import random_song_title

logger = logging.getLogger(__name__)

AGENCY_NAMES = ["Starship", "SM", "HYBE", "JYP", "YG", "Cube"]
ARTIST_NAMES = ["IVE", "Aespa", "NewJeans", "Stray Kids", "BLACKPINK", "G-IDLE"]
ARTIST_TYPES = [
    GroupType.GIRL_GROUP,
    GroupType.GIRL_GROUP,
    GroupType.GIRL_GROUP,
    GroupType.BOY_GROUP,
    GroupType.GIRL_GROUP,
    GroupType.GIRL_GROUP,
]
STRATEGIES = ["Aggressive", "Quality", "Viral"]

HISTORICAL_RELEASES = 40
PLAYER_ARTIST_ID = "user-group"


def generate_competitors(count: int, rng: random.Random) -> List[Competitor]:
    """Build the rival roster; boy groups buy, girl groups stream."""
    competitors = []
    for i in range(count):
        group_type = ARTIST_TYPES[i] if i < len(ARTIST_TYPES) else GroupType.GIRL_GROUP
        is_boy_group = group_type == GroupType.BOY_GROUP
        fandom = FandomStats(
            size=50000 + rng.randrange(500000),
            name="Fans",
            buying_power=90 if is_boy_group else 40,
            streaming_power=50 if is_boy_group else 90,
            loyalty=70,
            leaning=MarketFocus.GLOBAL if is_boy_group else MarketFocus.DOMESTIC,
        )
        artist = CompetitorArtist(
            id=f"art-{i}",
            name=ARTIST_NAMES[i] if i < len(ARTIST_NAMES) else f"Artist {i}",
            group_type=group_type,
            concept=rng.choice(list(Concept)),
            skill_level=70 + rng.randrange(30),
            fandom=fandom,
        )
        competitors.append(
            Competitor(
                id=f"comp-{i}",
                name=AGENCY_NAMES[i] if i < len(AGENCY_NAMES) else f"Agency {i}",
                reputation=60 + rng.randrange(35),
                strategy=rng.choice(STRATEGIES),
                artists=[artist],
            )
        )
    return competitors


def generate_historical_releases(
    competitors: List[Competitor],
    rng: random.Random,
    count: int = HISTORICAL_RELEASES,
    start_week: int = 1,
) -> List[Release]:
    """Seed the catalog with competitor releases from before the game starts."""
    if not competitors:
        return []

    releases = []
    for i in range(count):
        competitor = rng.choice(competitors)
        artist = competitor.artists[0]
        is_album = rng.random() > 0.6
        weeks_ago = rng.randrange(20) + 1
        concept = rng.choice(list(Concept))
        quality = 60 + rng.randrange(40)
        start_rank = max(1, 100 - quality - rng.randrange(20))

        history = []
        for w in range(weeks_ago, -1, -1):
            rank = min(200, start_rank + math.floor(abs(w - weeks_ago / 2) * 8))
            history.append(ChartEntry(week=start_week - w, rank=rank))

        total_streams = artist.fandom.size * (weeks_ago * 5)
        total_sales = math.floor(artist.fandom.size * (artist.fandom.buying_power / 100) * (1.5 if is_album else 0.5))

        charts = {
            ChartMarket.DOMESTIC: ChartRun(
                current=Ranked(history[-1].rank),
                peak=Ranked(start_rank),
                history=history,
            ),
            ChartMarket.SECONDARY: ChartRun(
                current=Ranked(min(200, start_rank + 5)) if rng.random() > 0.4 else UNRANKED,
                peak=Ranked(start_rank),
            ),
            ChartMarket.GLOBAL: ChartRun(
                current=Ranked(min(200, start_rank + 10)) if rng.random() > 0.5 else UNRANKED,
                peak=Ranked(min(200, start_rank + 10)),
            ),
        }

        releases.append(
            Release(
                id=f"hist-{i}",
                artist_id=artist.id,
                artist_name=artist.name,
                artist_type=artist.group_type,
                title=random_song_title(concept, rng),
                concept=concept,
                style=ReleaseStyle.COMMERCIAL if rng.random() > 0.5 else ReleaseStyle.CONCEPTUAL,
                market_focus=rng.choice(list(MarketFocus)),
                kind=ReleaseKind.ALBUM if is_album else ReleaseKind.SINGLE,
                quality=quality,
                release_week=start_week - weeks_ago,
                stats=ReleaseStats(
                    total_physical=total_sales,
                    total_sales_points=total_sales,
                    total_streams_domestic=total_streams,
                    unique_listeners_domestic=(201 - start_rank) * 2000,
                    total_streams_secondary=math.floor(total_streams * 0.8),
                    total_streams_global=total_streams * 2,
                    mv_views=math.floor(total_streams * 0.5),
                ),
                tiktok=TikTokStats(
                    total_videos=math.floor(total_streams * 0.01),
                    total_views=math.floor(total_streams * 0.5),
                    challenge_name=f"#{concept.value.replace(' ', '')}Challenge",
                ),
                reviews=Reviews(
                    critic_score=60 + rng.randrange(30),
                    public_score=70 + rng.randrange(20),
                    summary="A solid release from the archives.",
                ),
                charts=charts,
                show_wins=rng.randrange(3) if quality > 90 else 0,
            )
        )

    releases.sort(key=lambda r: r.release_week, reverse=True)
    return releases


def trainee_to_idol(profile: TraineeProfile, idol_id: str) -> Idol:
    return Idol(
        id=idol_id,
        name=profile.name,
        age=profile.age,
        stats=profile.stats,
        energy=100,
        stress=0,
        positions=[profile.position],
    )


def new_game(
    client: Optional[ContentClient] = None,
    rng: Optional[random.Random] = None,
    competitor_count: int = 5,
    config: Optional[Settings] = None,
    company_name: str = "Gemini",
    group_name: str = "Your Group",
) -> WorldState:
    """Create the week-1 world: starter trainees, rivals and their back catalog."""
    client = client or content_client
    rng = rng or random.Random()
    config = config or default_settings

    trainees = [trainee_to_idol(t, f"init-{i}") for i, t in enumerate(client.generate_trainees(3))]
    competitors = generate_competitors(competitor_count, rng)
    releases = generate_historical_releases(competitors, rng)

    state = WorldState(
        company_name=company_name,
        group_name=group_name,
        group_type=GroupType.GIRL_GROUP,
        week=1,
        money=config.economy.starting_money,
        fandom=FandomStats(
            size=5000,
            name="Stars",
            buying_power=60,
            streaming_power=80,
            loyalty=90,
            leaning=MarketFocus.DOMESTIC,
        ),
        trend=Concept.CUTE,
        fan_votes=500,
        reputation=10,
        trainees=trainees,
        competitors=competitors,
        releases=releases,
    )
    state.notify("Welcome CEO", "The industry awaits. Scout trainees and debut your group!", NotificationLevel.INFO)
    logger.info("New game: %s competitors, %s catalog releases", len(competitors), len(releases))
    return state
