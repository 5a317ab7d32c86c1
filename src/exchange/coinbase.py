from __future__ import annotations

from typing import Any

from .client import QuoteSource


class CoinbaseSource(QuoteSource):
    """
    Coinbase Exchange level-2 book for BTC-USD.

    Levels arrive as positional string arrays: ``["price", "size", num_orders]``.
    """

    name = "coinbase"
    url = "https://api.exchange.coinbase.com/products/BTC-USD/book?level=2"

    def _parse_level(self, entry: Any) -> tuple[float, float]:
        if not isinstance(entry, (list, tuple)):
            raise TypeError("coinbase level must be an array")
        return float(entry[0]), float(entry[1])
