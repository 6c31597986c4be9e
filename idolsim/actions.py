"""Player-initiated actions.

Every action takes the committed state and returns an ActionResult holding a
new state. Failed preconditions (not enough money, energy or votes, unknown
ids) are not exceptions: the returned state only gains a danger notification.
"""

from __future__ import annotations

import copy
import logging
import math
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from .config import Settings, settings as default_settings
from .content_client import ContentClient, content_client
from .models import (
    Concept,
    MarketFocus,
    MarketingStats,
    NotificationLevel,
    PromoPlan,
    Release,
    ReleaseKind,
    ReleaseStyle,
    Reviews,
    TikTokStats,
    WorldState,
)
from .world import PLAYER_ARTIST_ID, trainee_to_idol

logger = logging.getLogger(__name__)

PRODUCTION_BUDGETS: Dict[int, int] = {1: 5_000_000, 2: 20_000_000, 3: 100_000_000}
ALBUM_COST_MULTIPLIER = 2.5
TEASING_COST_MULTIPLIER = 1.2
TEASING_PUBLIC_INTEREST = 20
FATIGUE_WINDOW_WEEKS = 4
FATIGUE_QUALITY_FACTOR = 0.8
MARKETING_WINDOW_WEEKS = 12
TRAINABLE_STATS = ("vocal", "dance", "rap", "visual", "charisma")


@dataclass(frozen=True)
class MarketingAction:
    name: str
    category: str  # "public", "playlist" or "global"
    cost: int
    energy: int
    effect: int


MARKETING_ACTIONS: Dict[str, MarketingAction] = {
    a.name: a
    for a in (
        MarketingAction("Street Promotions", "public", 500_000, 10, 5),
        MarketingAction("Variety Show Guest", "public", 2_000_000, 25, 20),
        MarketingAction("National Radio Push", "public", 5_000_000, 15, 35),
        MarketingAction("Pitch to Curators", "playlist", 1_000_000, 5, 200_000),
        MarketingAction("Premier Playlisting", "playlist", 15_000_000, 0, 1_500_000),
        MarketingAction("TikTok Challenge", "global", 8_000_000, 20, 0),
        MarketingAction("Times Square Ad", "global", 50_000_000, 0, 5_000_000),
    )
}


@dataclass(frozen=True)
class BusinessAction:
    name: str
    cost: int
    reward_per_fan: int
    base_reward: int
    reward_fans: int
    energy: int

    def reward_money(self, fandom_size: int) -> int:
        return self.base_reward + math.floor(fandom_size * self.reward_per_fan)


BUSINESS_ACTIONS: Dict[str, BusinessAction] = {
    "livestream": BusinessAction("Fan Livestream", 0, 0, 100_000, 200, 10),
    "merch": BusinessAction("Limited Merch Drop", 5_000_000, 5000, 0, 50, 5),
    "fanmeeting": BusinessAction("Fan Meeting", 20_000_000, 15000, 0, 1000, 30),
    "concert": BusinessAction("World Tour Concert", 100_000_000, 50000, 0, 5000, 60),
}


@dataclass
class ActionResult:
    state: WorldState
    ok: bool
    reason: Optional[str] = None
    release: Optional[Release] = None


def _reject(state: WorldState, title: str, reason: str) -> ActionResult:
    rejected = copy.deepcopy(state)
    rejected.notify(title, reason, NotificationLevel.DANGER)
    logger.info("%s rejected: %s", title, reason)
    return ActionResult(state=rejected, ok=False, reason=reason)


def average_energy(state: WorldState) -> float:
    if not state.active_idols:
        return 0.0
    return sum(i.energy for i in state.active_idols) / len(state.active_idols)


def average_skill(state: WorldState) -> float:
    if not state.active_idols:
        return 0.0
    return sum(i.stats.average for i in state.active_idols) / len(state.active_idols)


def _drain_energy(state: WorldState, amount: int) -> None:
    for idol in state.active_idols:
        idol.energy = max(0, idol.energy - amount)


def production_cost(kind: ReleaseKind, promo: PromoPlan, budget_level: int) -> int:
    if budget_level not in PRODUCTION_BUDGETS:
        raise ValueError(f"Unknown budget level: {budget_level}")
    cost = PRODUCTION_BUDGETS[budget_level]
    if kind == ReleaseKind.ALBUM:
        cost *= ALBUM_COST_MULTIPLIER
    if promo == PromoPlan.TEASING:
        cost *= TEASING_COST_MULTIPLIER
    return int(round(cost))


def produce_release(
    state: WorldState,
    title: str,
    concept: Concept,
    style: ReleaseStyle,
    market_focus: MarketFocus,
    kind: ReleaseKind = ReleaseKind.SINGLE,
    promo: PromoPlan = PromoPlan.NONE,
    budget_level: int = 1,
    client: Optional[ContentClient] = None,
) -> ActionResult:
    """Produce and schedule a comeback for the player's group.

    The content service is queried before anything is copied, so an
    unexpected failure there leaves no trace on the committed state.
    """
    client = client or content_client
    cost = production_cost(kind, promo, budget_level)

    if not state.active_idols:
        return _reject(state, "Production Failed", "Debut idols before producing a song.")
    if state.money < cost:
        return _reject(state, "Production Failed", "Not enough money.")

    outcome = client.generate_comeback_outcome(
        state.group_name, concept, style, title, average_skill(state), state.fandom.size, cost
    )

    recent = any(r.is_user and state.week - r.release_week < FATIGUE_WINDOW_WEEKS for r in state.releases)
    fatigue = FATIGUE_QUALITY_FACTOR if recent else 1.0
    teasing = promo == PromoPlan.TEASING

    release = Release(
        id=f"rel-{state.week}-{uuid.uuid4().hex[:8]}",
        artist_id=PLAYER_ARTIST_ID,
        artist_name=state.group_name,
        artist_type=state.group_type,
        title=title,
        concept=concept,
        style=style,
        market_focus=market_focus,
        kind=kind,
        quality=math.floor(outcome.quality_score * fatigue),
        release_week=state.week + 1 + (1 if teasing else 0),
        is_user=True,
        marketing=MarketingStats(public_interest=TEASING_PUBLIC_INTEREST if teasing else 0),
        tiktok=TikTokStats(challenge_name=f"#{title.replace(' ', '')}Challenge"),
        reviews=Reviews(
            critic_score=outcome.critic_score,
            public_score=outcome.public_score,
            summary=outcome.review_summary,
        ),
        tracklist=list(outcome.tracklist),
        netizen_comments=list(outcome.netizen_comments),
        promo=promo,
    )

    new_state = copy.deepcopy(state)
    new_state.money -= cost
    new_state.releases.insert(0, release)
    if recent:
        new_state.notify(
            "Oversaturation",
            "Fans are tired from recent releases. Initial impact reduced by 20%.",
            NotificationLevel.WARNING,
        )
    new_state.notify("Comeback Set", f"{title} scheduled. Strategy: {market_focus.value}.", NotificationLevel.SUCCESS)
    logger.info("Scheduled %s for week %s (quality %s, cost %s)", title, release.release_week, release.quality, cost)
    return ActionResult(state=new_state, ok=True, release=release)


def recruit_trainee(state: WorldState, client: Optional[ContentClient] = None, config: Optional[Settings] = None) -> ActionResult:
    client = client or content_client
    cost = (config or default_settings).economy.scout_cost
    if state.money < cost:
        return _reject(state, "Recruitment Failed", "Not enough money.")

    profile = client.generate_trainees(1)[0]
    idol = trainee_to_idol(profile, f"recruit-{uuid.uuid4().hex[:8]}")

    new_state = copy.deepcopy(state)
    new_state.money -= cost
    new_state.trainees.append(idol)
    new_state.notify("Scout Successful", f"Recruited {idol.name}!", NotificationLevel.SUCCESS)
    return ActionResult(state=new_state, ok=True)


def debut_trainee(state: WorldState, idol_id: str) -> ActionResult:
    if not any(t.id == idol_id for t in state.trainees):
        return _reject(state, "Debut Failed", f"No trainee with id {idol_id}.")

    new_state = copy.deepcopy(state)
    idol = next(t for t in new_state.trainees if t.id == idol_id)
    new_state.trainees.remove(idol)
    new_state.active_idols.append(idol)
    new_state.notify("Debut", "A new star is born!", NotificationLevel.SUCCESS)
    return ActionResult(state=new_state, ok=True)


def train_idol(state: WorldState, idol_id: str, stat: str, config: Optional[Settings] = None) -> ActionResult:
    if stat not in TRAINABLE_STATS:
        raise ValueError(f"Unknown stat: {stat}")
    cost = (config or default_settings).economy.training_cost
    if not any(t.id == idol_id for t in state.trainees):
        return _reject(state, "Training Failed", f"No trainee with id {idol_id}.")
    if state.money < cost:
        return _reject(state, "Training Failed", "Not enough money.")

    new_state = copy.deepcopy(state)
    idol = next(t for t in new_state.trainees if t.id == idol_id)
    setattr(idol.stats, stat, min(100, getattr(idol.stats, stat) + 1))
    new_state.money -= cost
    return ActionResult(state=new_state, ok=True)


def run_marketing(state: WorldState, release_id: str, action_name: str) -> ActionResult:
    """Spend money and idol energy to push a recent player release."""
    action = MARKETING_ACTIONS.get(action_name)
    if action is None:
        raise ValueError(f"Unknown marketing action: {action_name}")

    release = state.find_release(release_id)
    if release is None or not release.is_user:
        return _reject(state, "Marketing Failed", "No such release to promote.")
    if state.week - release.release_week >= MARKETING_WINDOW_WEEKS:
        return _reject(state, "Marketing Failed", f"{release.title} is too old to promote.")
    if state.money < action.cost:
        return _reject(state, "Marketing Failed", "Not enough money.")
    if action.energy and average_energy(state) < action.energy:
        return _reject(state, "Marketing Failed", "Members are too tired.")

    new_state = copy.deepcopy(state)
    target = new_state.find_release(release_id)
    if action.category == "public":
        target.marketing.public_interest += action.effect
    else:
        target.marketing.playlist_reach += action.effect
    target.marketing.ad_spend += action.cost
    new_state.money -= action.cost
    _drain_energy(new_state, action.energy)
    new_state.notify("Marketing", f"{action.name} executed.", NotificationLevel.SUCCESS)
    return ActionResult(state=new_state, ok=True, release=target)


def allocate_votes(state: WorldState, release_id: str, amount: int) -> ActionResult:
    """Move fan votes from the pool onto a release for music show scoring."""
    if amount <= 0:
        raise ValueError(f"amount must be positive, got {amount}")
    if state.find_release(release_id) is None:
        return _reject(state, "Voting Failed", "No such release.")
    if state.fan_votes < amount:
        return _reject(state, "Voting Failed", "Not enough fan votes.")

    new_state = copy.deepcopy(state)
    target = new_state.find_release(release_id)
    target.votes += amount
    new_state.fan_votes -= amount
    return ActionResult(state=new_state, ok=True, release=target)


def run_business_action(state: WorldState, action_id: str) -> ActionResult:
    action = BUSINESS_ACTIONS.get(action_id)
    if action is None:
        raise ValueError(f"Unknown business action: {action_id}")
    if state.money < action.cost:
        return _reject(state, "Business", "Not enough money.")
    if average_energy(state) < action.energy:
        return _reject(state, "Business", "Members are too tired.")

    new_state = copy.deepcopy(state)
    new_state.money += action.reward_money(state.fandom.size) - action.cost
    new_state.fandom.size += action.reward_fans
    _drain_energy(new_state, action.energy)
    new_state.notify("Business", f"{action.name} completed.", NotificationLevel.SUCCESS)
    return ActionResult(state=new_state, ok=True)
