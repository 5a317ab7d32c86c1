"""Core type definitions for order-book aggregation and execution estimates."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional


def _require_positive(name: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number")
    number = float(value)
    if not math.isfinite(number) or number <= 0:
        raise ValueError(f"{name} must be a positive finite number")
    return number


@dataclass(frozen=True)
class Order:
    """A single price level of resting liquidity."""

    price: float
    quantity: float
    source: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "price", _require_positive("price", self.price))
        object.__setattr__(
            self, "quantity", _require_positive("quantity", self.quantity)
        )

    @property
    def notional(self) -> float:
        return self.price * self.quantity


@dataclass(frozen=True)
class OrderBook:
    """
    Point-in-time snapshot from one source.

    Bids and asks are populated independently and either may be empty.
    An empty book is the degraded result of a rate-limited or failed fetch.
    """

    source: str
    bids: tuple[Order, ...] = ()
    asks: tuple[Order, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "bids", tuple(self.bids))
        object.__setattr__(self, "asks", tuple(self.asks))

    @classmethod
    def empty(cls, source: str) -> "OrderBook":
        return cls(source=source)

    @property
    def is_empty(self) -> bool:
        return not self.bids and not self.asks


@dataclass(frozen=True)
class Fill:
    """Quantity taken from one level during a match."""

    price: float
    quantity: float
    cost: float
    source: str = ""


@dataclass(frozen=True)
class ExecutionResult:
    """
    Outcome of walking one side of an aggregated book.

    ``cost`` is the total paid (buy) or received (sell) in quote currency.
    When liquidity runs out before ``requested`` is reached, ``filled`` is
    smaller than ``requested`` and ``cost`` covers only what was available.
    """

    side: str
    requested: float
    filled: float = 0.0
    cost: float = 0.0
    fills: tuple[Fill, ...] = field(default_factory=tuple)

    @property
    def fully_filled(self) -> bool:
        return self.filled >= self.requested or math.isclose(
            self.filled, self.requested, rel_tol=1e-12, abs_tol=1e-12
        )

    @property
    def unfilled(self) -> float:
        return max(self.requested - self.filled, 0.0)

    @property
    def avg_price(self) -> Optional[float]:
        if self.filled <= 0:
            return None
        return self.cost / self.filled

    @property
    def levels_consumed(self) -> int:
        return len(self.fills)
