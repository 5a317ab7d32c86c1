import pytest

from core.base_types import Order
from exchange.orderbook import execute_buy, execute_sell, walk_the_book


def _levels(*pairs, source=""):
    return [Order(price=price, quantity=qty, source=source) for price, qty in pairs]


def test_buy_takes_cheapest_asks_first():
    asks = _levels((50010.0, 2.0), (50000.0, 0.5))
    assert execute_buy(asks, 1.0) == pytest.approx(50005.0)


def test_sell_takes_highest_bids_first():
    bids = _levels((90.0, 5.0), (100.0, 1.0))
    assert execute_sell(bids, 1.0) == pytest.approx(100.0)


def test_sell_walks_into_second_level():
    bids = _levels((100.0, 1.0), (90.0, 5.0))
    assert execute_sell(bids, 3.0) == pytest.approx(100.0 + 2 * 90.0)


def test_zero_quantity_costs_nothing():
    asks = _levels((100.0, 1.0))
    assert execute_buy(asks, 0) == 0
    assert execute_sell(_levels((100.0, 1.0)), 0.0) == 0


def test_negative_quantity_treated_as_boundary():
    result = walk_the_book("buy", _levels((100.0, 1.0)), -1.0)
    assert result.cost == 0
    assert result.filled == 0
    assert result.fills == ()


def test_empty_levels_cost_nothing():
    assert execute_buy([], 5.0) == 0
    assert execute_sell([], 5.0) == 0


def test_insufficient_liquidity_consumes_everything():
    asks = _levels((100.0, 1.0), (101.0, 2.0), (105.0, 0.5))
    expected = sum(order.price * order.quantity for order in asks)
    result = walk_the_book("buy", asks, 10.0)
    assert result.cost == pytest.approx(expected)
    assert result.filled == pytest.approx(3.5)
    assert not result.fully_filled
    assert result.unfilled == pytest.approx(6.5)
    assert result.levels_consumed == 3


def test_full_fill_reports_requested_quantity():
    result = walk_the_book("buy", _levels((50000.0, 0.5), (50010.0, 2.0)), 1.0)
    assert result.fully_filled
    assert result.filled == 1.0
    assert result.avg_price == pytest.approx(50005.0)
    assert [fill.quantity for fill in result.fills] == [0.5, 0.5]


def test_buy_cost_is_monotonic_in_quantity():
    pairs = [(101.0, 0.3), (99.5, 1.2), (100.0, 0.7), (120.0, 4.0)]
    costs = [
        execute_buy(_levels(*pairs), qty)
        for qty in (0.0, 0.1, 0.5, 1.2, 2.2, 5.0, 6.2, 10.0)
    ]
    assert costs == sorted(costs)


def test_equal_prices_from_different_sources_are_both_used():
    asks = _levels((100.0, 1.0), source="coinbase") + _levels(
        (100.0, 1.0), source="gemini"
    )
    result = walk_the_book("buy", asks, 2.0)
    assert result.cost == pytest.approx(200.0)
    assert {fill.source for fill in result.fills} == {"coinbase", "gemini"}


def test_pool_is_sorted_in_place():
    asks = _levels((3.0, 1.0), (1.0, 1.0), (2.0, 1.0))
    execute_buy(asks, 1.0)
    assert [order.price for order in asks] == [1.0, 2.0, 3.0]


def test_unknown_side_rejected():
    with pytest.raises(ValueError, match="side must be"):
        walk_the_book("hold", [], 1.0)


@pytest.mark.parametrize("qty", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_quantity_rejected(qty):
    with pytest.raises(ValueError, match="qty must be a finite number"):
        walk_the_book("buy", _levels((100.0, 1.0)), qty)


def test_liquidity_exactly_covering_quantity_is_full_fill():
    asks = _levels(*[(100.0 + i, 0.1) for i in range(10)])
    result = walk_the_book("buy", asks, 1.0)
    assert result.fully_filled
    assert result.filled == 1.0
    assert result.unfilled == 0.0
    assert result.levels_consumed == 10


def test_tiny_residue_is_not_reported_as_partial():
    bids = _levels((100.0, 0.1), (99.0, 0.2))
    result = walk_the_book("sell", bids, 0.1 + 0.2)
    assert result.fully_filled
    assert result.cost == pytest.approx(10.0 + 19.8)
