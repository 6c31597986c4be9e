"""
Sim module for the weekly agency simulation.

Provides the retention model, chart ranking, competitor releases,
music show scoring and the turn orchestrator.
"""

from .retention import (
    WeeklyMetrics,
    time_retention,
    critic_factor,
    market_multipliers,
    public_multiplier,
    compute_weekly_metrics,
    apply_weekly_metrics,
    simulate_release_week,
)
from .charts import (
    CHART_METRICS,
    chart_metric,
    rank_market,
    rank_releases,
    chart_leader,
)
from .bots import (
    weeks_since_last_release,
    is_weak_leader,
    release_probability,
    generate_bot_releases,
)
from .shows import (
    ShowWeights,
    MusicShow,
    MUSIC_SHOWS,
    eligible_candidates,
    score_candidate,
    pick_winner,
    run_show,
    resolve_music_shows,
)
from .turn import (
    Settlement,
    TurnOutcome,
    settle_revenue,
    maintenance_cost,
    advance_week,
)

__version__ = "1.0.0"

__all__ = [
    # retention.py
    "WeeklyMetrics",
    "time_retention",
    "critic_factor",
    "market_multipliers",
    "public_multiplier",
    "compute_weekly_metrics",
    "apply_weekly_metrics",
    "simulate_release_week",
    # charts.py
    "CHART_METRICS",
    "chart_metric",
    "rank_market",
    "rank_releases",
    "chart_leader",
    # bots.py
    "weeks_since_last_release",
    "is_weak_leader",
    "release_probability",
    "generate_bot_releases",
    # shows.py
    "ShowWeights",
    "MusicShow",
    "MUSIC_SHOWS",
    "eligible_candidates",
    "score_candidate",
    "pick_winner",
    "run_show",
    "resolve_music_shows",
    # turn.py
    "Settlement",
    "TurnOutcome",
    "settle_revenue",
    "maintenance_cost",
    "advance_week",
]
