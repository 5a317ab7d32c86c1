"""CLI entrypoint: estimate BTC market buy cost and sell proceeds across exchanges."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import Optional, Sequence

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import DEFAULT_QTY, QUOTE_CONFIG, get_env  # noqa: E402
from core.base_types import ExecutionResult  # noqa: E402
from exchange.aggregator import aggregate, fetch_all  # noqa: E402
from exchange.client import QuoteSource  # noqa: E402
from exchange.orderbook import BUY, SELL, walk_the_book  # noqa: E402
from exchange.sources import build_default_sources  # noqa: E402

logger = logging.getLogger(__name__)


def _parse_qty(value: str) -> float:
    try:
        qty = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid quantity: {value!r}") from exc
    if not math.isfinite(qty) or qty <= 0:
        raise argparse.ArgumentTypeError(f"invalid quantity: {value!r}")
    return qty


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate the cost of a BTC market order across exchanges"
    )
    parser.add_argument(
        "--qty",
        type=_parse_qty,
        default=DEFAULT_QTY,
        help=f"BTC quantity to buy and sell (default {DEFAULT_QTY})",
    )
    return parser


def _configure_logging() -> None:
    level_name = (get_env("LOG_LEVEL", "WARNING") or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s |%(levelname)s |%(message)s",
        stream=sys.stderr,
    )


def _warn_if_partial(result: ExecutionResult) -> None:
    if result.fully_filled:
        return
    logger.warning(
        "partial %s fill: %.8g of %.8g BTC available",
        result.side,
        result.filled,
        result.requested,
    )


def estimate(
    sources: Sequence[QuoteSource], qty: float, parallel: bool = False
) -> tuple[ExecutionResult, ExecutionResult]:
    """Fetch every source, merge the books and walk both sides for `qty`."""
    snapshots = fetch_all(sources, parallel=parallel)
    bids, asks = aggregate(snapshots)
    buy = walk_the_book(BUY, asks, qty)
    sell = walk_the_book(SELL, bids, qty)
    return buy, sell


def main(
    argv: Optional[Sequence[str]] = None,
    sources: Optional[Sequence[QuoteSource]] = None,
) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging()

    if sources is None:
        sources = build_default_sources(QUOTE_CONFIG)
    buy, sell = estimate(sources, args.qty, parallel=QUOTE_CONFIG["parallel_fetch"])
    _warn_if_partial(buy)
    _warn_if_partial(sell)

    print(f"To buy {args.qty:g} BTC: ${buy.cost:.2f}")
    print(f"To sell {args.qty:g} BTC: ${sell.cost:.2f}")


if __name__ == "__main__":
    main()
