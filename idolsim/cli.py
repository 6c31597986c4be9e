"""Headless runner: start a game, advance some weeks and print the charts."""

from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .actions import debut_trainee, produce_release
from .models import ChartMarket, MarketFocus, ReleaseKind, ReleaseStyle
from .reports import chart_frame, group_history_frame
from .sim import advance_week
from .titles import random_song_title
from .world import new_game

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the idol agency simulation without a UI.")
    parser.add_argument("--weeks", type=int, default=8, help="Number of weeks to simulate.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs.")
    parser.add_argument(
        "--market",
        choices=[m.value for m in ChartMarket],
        default=ChartMarket.DOMESTIC.value,
        help="Chart to print at the end.",
    )
    parser.add_argument("--top", type=int, default=20, help="Chart rows to print.")
    parser.add_argument(
        "--debut",
        action="store_true",
        help="Debut the starter trainees and release a single in week 1.",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING...).")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(Path.cwd() / ".env")
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    rng = random.Random(args.seed)
    state = new_game(rng=rng)

    if args.debut:
        for trainee in list(state.trainees):
            state = debut_trainee(state, trainee.id).state
        result = produce_release(
            state,
            title=random_song_title(state.trend, rng),
            concept=state.trend,
            style=ReleaseStyle.COMMERCIAL,
            market_focus=MarketFocus.DOMESTIC,
            kind=ReleaseKind.ALBUM,
        )
        state = result.state

    for _ in range(args.weeks):
        state = advance_week(state, rng=rng).state

    market = ChartMarket(args.market)
    print(f"Week {state.week} - {market.value} chart")
    print(chart_frame(state, market, top=args.top).to_string(index=False))
    if state.group_history:
        print()
        print(group_history_frame(state).to_string(index=False))
    print(f"\nBalance: {state.money:,}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
