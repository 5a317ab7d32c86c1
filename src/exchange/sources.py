from __future__ import annotations

from typing import Any, Mapping

from .client import (
    DEFAULT_COOLDOWN_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    CooldownRateLimiter,
    QuoteSource,
)
from .coinbase import CoinbaseSource
from .gemini import GeminiSource

SOURCE_TYPES: dict[str, type[QuoteSource]] = {
    CoinbaseSource.name: CoinbaseSource,
    GeminiSource.name: GeminiSource,
}


def build_default_sources(config: Mapping[str, Any] | None = None) -> list[QuoteSource]:
    """
    Construct one source per supported exchange, each with its own limiter.

    ``config`` follows ``config.QUOTE_CONFIG``; ``<name>_url`` keys override
    the built-in endpoints.
    """
    config = config or {}
    timeout = float(config.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
    cooldown = float(config.get("cooldown_seconds", DEFAULT_COOLDOWN_SECONDS))
    sources: list[QuoteSource] = []
    for name, source_type in SOURCE_TYPES.items():
        sources.append(
            source_type(
                timeout_seconds=timeout,
                limiter=CooldownRateLimiter(cooldown),
                url=config.get(f"{name}_url"),
            )
        )
    return sources
