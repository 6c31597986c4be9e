"""Data models for the idol agency simulation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class Concept(Enum):
    """Musical concept tags; one of them is the current trend."""
    CUTE = "Cute"
    GIRL_CRUSH = "Girl Crush"
    DARK = "Dark"
    FRESH = "Fresh"
    RETRO = "Retro"
    HIPHOP = "Hip Hop"
    BALLAD = "Ballad"


class ReleaseStyle(Enum):
    COMMERCIAL = "Commercial"
    CONCEPTUAL = "Conceptual"


class MarketFocus(Enum):
    DOMESTIC = "Domestic"
    GLOBAL = "Global"
    BALANCED = "Balanced"


class ReleaseKind(Enum):
    SINGLE = "Single"
    ALBUM = "Album"


class PromoPlan(Enum):
    NONE = "None"
    TEASING = "Teasing"


class GroupType(Enum):
    BOY_GROUP = "Boy Group"
    GIRL_GROUP = "Girl Group"
    COED = "Co-ed / Solo"


class IdolPosition(Enum):
    LEADER = "Leader"
    VOCAL = "Vocal"
    DANCE = "Dance"
    RAP = "Rap"
    VISUAL = "Visual"
    CENTER = "Center"
    MAKNAE = "Maknae"


class NotificationLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


class ChartMarket(Enum):
    """The three independent charts every release is ranked on."""
    DOMESTIC = "domestic"
    SECONDARY = "secondary"
    GLOBAL = "global"


# ---------------------------------------------------------------------------
# Chart positions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Ranked:
    """On-chart position (1-based)."""
    position: int


@dataclass(frozen=True)
class Unranked:
    """Off the visible chart window."""


UNRANKED = Unranked()

ChartPosition = Union[Ranked, Unranked]


def better_position(a: ChartPosition, b: ChartPosition) -> ChartPosition:
    """Return whichever position is higher on the chart."""
    if isinstance(a, Unranked):
        return b
    if isinstance(b, Unranked):
        return a
    return a if a.position <= b.position else b


@dataclass(frozen=True)
class ChartEntry:
    """One on-chart week in a release's chart run."""
    week: int
    rank: int


@dataclass
class ChartRun:
    """Current, peak and historical position on one chart."""
    current: ChartPosition = UNRANKED
    peak: ChartPosition = UNRANKED
    history: List[ChartEntry] = field(default_factory=list)


def _empty_charts() -> Dict[ChartMarket, ChartRun]:
    return {market: ChartRun() for market in ChartMarket}


# ---------------------------------------------------------------------------
# Release
# ---------------------------------------------------------------------------

@dataclass
class ReleaseStats:
    """Weekly and cumulative consumption figures for a release."""
    weekly_streams_domestic: int = 0
    total_streams_domestic: int = 0
    unique_listeners_domestic: int = 0
    weekly_streams_secondary: int = 0
    total_streams_secondary: int = 0
    weekly_streams_global: int = 0
    total_streams_global: int = 0
    # Physical units only; these drive physical revenue.
    weekly_physical: int = 0
    total_physical: int = 0
    # Physical plus streaming-equivalent units; these drive show scoring.
    weekly_sales_points: int = 0
    total_sales_points: int = 0
    mv_views: int = 0


@dataclass
class MarketingStats:
    public_interest: float = 0.0
    playlist_reach: int = 0
    ad_spend: int = 0


@dataclass
class TikTokStats:
    weekly_videos: int = 0
    total_videos: int = 0
    total_views: int = 0
    challenge_name: str = ""


@dataclass
class Reviews:
    critic_score: int = 50
    public_score: int = 50
    summary: str = ""


@dataclass(frozen=True)
class ScoreBreakdown:
    digital: float
    physical: float
    sns: float
    votes: float
    broadcast: float

    @property
    def total(self) -> float:
        return self.digital + self.physical + self.sns + self.votes + self.broadcast


@dataclass(frozen=True)
class ShowCandidate:
    """A nominee's scored entry for one show in one week."""
    release_id: str
    artist_name: str
    title: str
    is_user: bool
    score: int
    breakdown: ScoreBreakdown


@dataclass(frozen=True)
class ShowResult:
    """Immutable record of one release's participation in one show."""
    show_name: str
    week: int
    placement: int
    score: int
    won: bool
    candidates: Tuple[ShowCandidate, ...]


@dataclass
class Release:
    """A single song or album in circulation."""
    id: str
    artist_id: str
    artist_name: str
    title: str
    concept: Concept
    style: ReleaseStyle
    market_focus: MarketFocus
    kind: ReleaseKind
    quality: int
    release_week: int
    is_user: bool = False
    artist_type: GroupType = GroupType.GIRL_GROUP
    stats: ReleaseStats = field(default_factory=ReleaseStats)
    marketing: MarketingStats = field(default_factory=MarketingStats)
    tiktok: TikTokStats = field(default_factory=TikTokStats)
    reviews: Reviews = field(default_factory=Reviews)
    tracklist: List[str] = field(default_factory=list)
    netizen_comments: List[str] = field(default_factory=list)
    promo: PromoPlan = PromoPlan.NONE
    is_viral: bool = False
    charts: Dict[ChartMarket, ChartRun] = field(default_factory=_empty_charts)
    show_wins: int = 0
    show_history: List[ShowResult] = field(default_factory=list)
    votes: int = 0

    def age(self, week: int) -> int:
        """Weeks since release as of ``week`` (negative before release)."""
        return week - self.release_week

    def is_active(self, week: int) -> bool:
        return week >= self.release_week

    def chart(self, market: ChartMarket) -> ChartRun:
        return self.charts[market]


# ---------------------------------------------------------------------------
# Artists, fandoms and idols
# ---------------------------------------------------------------------------

@dataclass
class FandomStats:
    """Demand parameters of an artist's fanbase."""
    size: int
    name: str = "Fans"
    buying_power: int = 50
    streaming_power: int = 50
    loyalty: int = 50
    leaning: MarketFocus = MarketFocus.BALANCED

    @classmethod
    def neutral(cls) -> "FandomStats":
        """Stand-in profile for releases whose artist cannot be found."""
        return cls(size=1000, name="Unknown")


@dataclass
class CompetitorArtist:
    id: str
    name: str
    group_type: GroupType
    concept: Concept
    skill_level: int
    fandom: FandomStats


@dataclass
class Competitor:
    """An AI-controlled rival agency."""
    id: str
    name: str
    reputation: int
    strategy: str
    artists: List[CompetitorArtist] = field(default_factory=list)


@dataclass
class IdolStats:
    vocal: int = 0
    dance: int = 0
    rap: int = 0
    visual: int = 0
    charisma: int = 0

    @property
    def average(self) -> float:
        return (self.vocal + self.dance + self.rap + self.visual + self.charisma) / 5


@dataclass
class Idol:
    id: str
    name: str
    age: int
    stats: IdolStats = field(default_factory=IdolStats)
    energy: int = 100
    stress: int = 0
    positions: List[IdolPosition] = field(default_factory=list)


# ---------------------------------------------------------------------------
# World state
# ---------------------------------------------------------------------------

@dataclass
class Notification:
    title: str
    message: str
    level: NotificationLevel = NotificationLevel.INFO
    week: int = 0


@dataclass
class GroupHistoryEntry:
    week: int
    total_streams: int
    fans: int
    money: int


@dataclass
class WorldState:
    """Everything the weekly engine reads and writes."""
    company_name: str
    group_name: str
    group_type: GroupType
    week: int
    money: int
    fandom: FandomStats
    trend: Concept
    fan_votes: int = 0
    reputation: int = 0
    trainees: List[Idol] = field(default_factory=list)
    active_idols: List[Idol] = field(default_factory=list)
    releases: List[Release] = field(default_factory=list)
    competitors: List[Competitor] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    group_history: List[GroupHistoryEntry] = field(default_factory=list)

    def find_release(self, release_id: str) -> Optional[Release]:
        for release in self.releases:
            if release.id == release_id:
                return release
        return None

    def find_artist(self, artist_id: str) -> Optional[CompetitorArtist]:
        for competitor in self.competitors:
            for artist in competitor.artists:
                if artist.id == artist_id:
                    return artist
        return None

    def fandom_for(self, release: Release) -> Optional[FandomStats]:
        """Fandom driving a release's demand, or None if the artist is gone."""
        if release.is_user:
            return self.fandom
        artist = self.find_artist(release.artist_id)
        return artist.fandom if artist else None

    def notify(self, title: str, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        self.notifications.append(Notification(title=title, message=message, level=level, week=self.week))
