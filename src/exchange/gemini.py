from __future__ import annotations

from typing import Any

from .client import QuoteSource


class GeminiSource(QuoteSource):
    """Gemini v1 book for BTCUSD; levels carry named ``price``/``amount`` strings."""

    name = "gemini"
    url = "https://api.gemini.com/v1/book/BTCUSD"

    def _parse_level(self, entry: Any) -> tuple[float, float]:
        return float(entry["price"]), float(entry["amount"])
