"""
Tabular views of the world state.

This module turns charts, music show history and group progress into pandas
DataFrames for hosts that display or export them.
"""

from typing import Optional

import pandas as pd

from .config import Settings, settings as default_settings
from .models import ChartMarket, Ranked, Release, WorldState
from .sim.charts import chart_metric

CHART_COLUMNS = ["rank", "title", "artist", "metric", "peak", "weeks_on_chart", "is_user"]


def chart_frame(state: WorldState, market: ChartMarket, top: int = 50) -> pd.DataFrame:
    """
    Build the visible chart for one market.

    Args:
        state: World state after at least one ranking pass
        market: Which chart to show
        top: Number of rows to keep

    Returns:
        DataFrame sorted by rank with CHART_COLUMNS
    """
    rows = []
    for release in state.releases:
        run = release.charts[market]
        if not isinstance(run.current, Ranked):
            continue
        rows.append({
            "rank": run.current.position,
            "title": release.title,
            "artist": release.artist_name,
            "metric": chart_metric(release, market),
            "peak": run.peak.position if isinstance(run.peak, Ranked) else None,
            "weeks_on_chart": len(run.history),
            "is_user": release.is_user,
        })

    if not rows:
        return pd.DataFrame(columns=CHART_COLUMNS)

    df = pd.DataFrame(rows, columns=CHART_COLUMNS)
    return df.sort_values("rank").head(top).reset_index(drop=True)


def show_results_frame(release: Release) -> pd.DataFrame:
    """One row per music show appearance of a release."""
    rows = [
        {
            "week": result.week,
            "show": result.show_name,
            "placement": result.placement,
            "score": result.score,
            "won": result.won,
            "nominees": len(result.candidates),
        }
        for result in release.show_history
    ]
    return pd.DataFrame(rows, columns=["week", "show", "placement", "score", "won", "nominees"])


def group_history_frame(state: WorldState) -> pd.DataFrame:
    """Weekly progress of the player's group, with week-over-week changes."""
    df = pd.DataFrame(
        [
            {"week": h.week, "total_streams": h.total_streams, "fans": h.fans, "money": h.money}
            for h in state.group_history
        ],
        columns=["week", "total_streams", "fans", "money"],
    )
    df["weekly_streams"] = df["total_streams"].diff().fillna(df["total_streams"])
    df["fans_change"] = df["fans"].diff().fillna(0)
    return df


def streaming_frame(state: WorldState, user_only: bool = False, config: Optional[Settings] = None) -> pd.DataFrame:
    """Per-release stream totals with the royalty they earn at the configured rate."""
    economy = (config or default_settings).economy
    rows = [
        {
            "release_id": r.id,
            "title": r.title,
            "artist": r.artist_name,
            "weekly_domestic": r.stats.weekly_streams_domestic,
            "weekly_secondary": r.stats.weekly_streams_secondary,
            "weekly_global": r.stats.weekly_streams_global,
            "total_domestic": r.stats.total_streams_domestic,
            "total_global": r.stats.total_streams_global,
            "is_viral": r.is_viral,
            "is_user": r.is_user,
        }
        for r in state.releases
        if r.is_user or not user_only
    ]
    df = pd.DataFrame(rows, columns=[
        "release_id", "title", "artist", "weekly_domestic", "weekly_secondary", "weekly_global",
        "total_domestic", "total_global", "is_viral", "is_user",
    ])
    df["weekly_royalty"] = (df["weekly_domestic"] + df["weekly_global"]) * economy.stream_royalty
    return df
