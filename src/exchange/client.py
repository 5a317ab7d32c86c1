# exchange/client.py

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import requests

from core.base_types import Order, OrderBook

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 2.0
DEFAULT_TIMEOUT_SECONDS = 5.0


class QuoteSourceError(RuntimeError):
    """Raised when an exchange snapshot cannot be retrieved or parsed."""


class CooldownRateLimiter:
    """
    Allows at most one call per cooldown window.

    ``allow()`` never sleeps or queues. The last-call timestamp is claimed with
    a compare-and-swap so that concurrent callers racing for the same window
    see exactly one ``True``.
    """

    def __init__(
        self,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        time_fn: Callable[[], float] | None = None,
    ) -> None:
        if cooldown_seconds < 0:
            raise ValueError("cooldown_seconds must be non-negative")
        self._cooldown_seconds = cooldown_seconds
        self._time_fn = time_fn or time.monotonic
        self._last_call: Optional[float] = None
        self._lock = threading.Lock()

    @property
    def cooldown_seconds(self) -> float:
        return self._cooldown_seconds

    def allow(self) -> bool:
        last = self._last_call
        now = self._time_fn()
        if last is not None and now - last < self._cooldown_seconds:
            return False
        return self._compare_and_swap(last, now)

    def _compare_and_swap(self, expected: Optional[float], new: float) -> bool:
        with self._lock:
            if self._last_call != expected:
                return False
            self._last_call = new
            return True


class QuoteSource(ABC):
    """
    One exchange's public order-book endpoint.

    Subclasses only describe how a single raw level is laid out; transport,
    rate limiting and failure handling live here so callers always get an
    ``OrderBook`` back.
    """

    name: str = ""
    url: str = ""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        limiter: CooldownRateLimiter | None = None,
        url: str | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout_seconds
        self._limiter = limiter or CooldownRateLimiter()
        self._url = url or self.url

    @property
    def endpoint(self) -> str:
        return self._url

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    @property
    def limiter(self) -> CooldownRateLimiter:
        return self._limiter

    def fetch(self) -> OrderBook:
        """
        Fetch a snapshot, degrading to an empty book on denial or failure.
        """
        if not self._limiter.allow():
            logger.info("%s: rate limited, skipping fetch", self.name)
            return OrderBook.empty(self.name)
        try:
            payload = self._get_json()
            bids = self._parse_side(payload, "bids")
            asks = self._parse_side(payload, "asks")
        except QuoteSourceError as exc:
            logger.warning("%s: order book unavailable: %s", self.name, exc)
            return OrderBook.empty(self.name)
        return OrderBook(source=self.name, bids=bids, asks=asks)

    def _get_json(self) -> dict[str, Any]:
        try:
            resp = self._session.get(self._url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise QuoteSourceError(
                f"network error: {exc.__class__.__name__}"
            ) from exc
        logger.debug(
            "%s: GET %s status=%s", self.name, self._url, resp.status_code
        )
        if not 200 <= resp.status_code < 300:
            raise QuoteSourceError(f"HTTP {resp.status_code}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise QuoteSourceError("invalid JSON response") from exc
        if not isinstance(payload, dict):
            raise QuoteSourceError("unexpected response payload")
        return payload

    def _parse_side(self, payload: dict[str, Any], key: str) -> list[Order]:
        raw_levels = payload.get(key)
        if not isinstance(raw_levels, list):
            raise QuoteSourceError(f"missing '{key}' in response")
        orders: list[Order] = []
        for entry in raw_levels:
            try:
                price, quantity = self._parse_level(entry)
            except (
                KeyError, IndexError, TypeError, ValueError, OverflowError
            ) as exc:
                raise QuoteSourceError(f"malformed {key} level: {entry!r}") from exc
            if quantity <= 0:
                logger.debug(
                    "%s: dropping empty %s level at %s", self.name, key, price
                )
                continue
            try:
                orders.append(Order(price=price, quantity=quantity, source=self.name))
            except ValueError as exc:
                raise QuoteSourceError(f"invalid {key} level: {entry!r}") from exc
        logger.debug("%s: parsed %d %s", self.name, len(orders), key)
        return orders

    @abstractmethod
    def _parse_level(self, entry: Any) -> tuple[float, float]:
        """Return ``(price, quantity)`` for one raw level."""
