import math
from operator import attrgetter

from core.base_types import ExecutionResult, Fill, Order

BUY = "buy"
SELL = "sell"

# residue float subtraction leaves when liquidity exactly covers qty
FILL_TOLERANCE = 1e-12


def _within_tolerance(filled: float, qty: float) -> bool:
    return math.isclose(filled, qty, rel_tol=FILL_TOLERANCE, abs_tol=FILL_TOLERANCE)


def walk_the_book(side: str, levels: list[Order], qty: float) -> ExecutionResult:
    """
    Simulate filling `qty` against one side of an aggregated book.

    side:
        "buy" walks asks cheapest first, "sell" walks bids highest first.
    levels:
        The pool to consume. It is sorted in place and should not be reused.

    Each level contributes min(remaining, level.quantity) at its own price.
    If liquidity runs out first, the result is a partial fill: `filled` is
    below `requested` and `cost` covers only what was available.
    """
    if side not in (BUY, SELL):
        raise ValueError(f"side must be '{BUY}' or '{SELL}'")
    if not math.isfinite(qty):
        raise ValueError("qty must be a finite number")
    if qty <= 0 or not levels:
        return ExecutionResult(side=side, requested=qty)

    levels.sort(key=attrgetter("price"), reverse=(side == SELL))

    remaining = qty
    cost = 0.0
    fills: list[Fill] = []
    for level in levels:
        take = min(remaining, level.quantity)
        level_cost = take * level.price
        cost += level_cost
        remaining -= take
        fills.append(
            Fill(price=level.price, quantity=take, cost=level_cost, source=level.source)
        )
        if remaining <= 0:
            break

    filled = math.fsum(fill.quantity for fill in fills)
    if remaining <= 0 or _within_tolerance(filled, qty):
        filled = qty

    return ExecutionResult(
        side=side,
        requested=qty,
        filled=filled,
        cost=cost,
        fills=tuple(fills),
    )


def execute_buy(asks: list[Order], qty: float) -> float:
    """Total cost of buying `qty` from `asks`, best (lowest) price first."""
    return walk_the_book(BUY, asks, qty).cost


def execute_sell(bids: list[Order], qty: float) -> float:
    """Total proceeds of selling `qty` into `bids`, best (highest) price first."""
    return walk_the_book(SELL, bids, qty).cost
