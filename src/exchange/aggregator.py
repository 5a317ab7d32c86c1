"""Merge per-exchange snapshots into unified bid and ask pools."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional, Sequence

from core.base_types import Order, OrderBook

from .client import QuoteSource

logger = logging.getLogger(__name__)


def aggregate(snapshots: Iterable[OrderBook]) -> tuple[list[Order], list[Order]]:
    """
    Concatenate every snapshot's bids and asks.

    Multiplicity is preserved: equal prices from different sources stay
    separate entries. The snapshots themselves are left untouched; the
    returned lists are new and owned by the caller.
    """
    bids: list[Order] = []
    asks: list[Order] = []
    for snapshot in snapshots:
        bids.extend(snapshot.bids)
        asks.extend(snapshot.asks)
    return bids, asks


def fetch_all(
    sources: Sequence[QuoteSource],
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> list[OrderBook]:
    """
    Fetch one snapshot per source, in source order.

    Sources never raise for transport or rate-limit problems, so a failing
    exchange simply contributes an empty book.
    """
    if parallel and len(sources) > 1:
        workers = max_workers or len(sources)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            snapshots = list(pool.map(lambda source: source.fetch(), sources))
    else:
        snapshots = [source.fetch() for source in sources]

    for snapshot in snapshots:
        logger.info(
            "snapshot %s: bids=%d asks=%d",
            snapshot.source,
            len(snapshot.bids),
            len(snapshot.asks),
        )
    return snapshots
