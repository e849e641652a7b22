from __future__ import annotations

import pytest

from itrend.execution.broker import Broker, PaperBroker
from itrend.execution.orders import OrderIntent, OrderSide, OrderType, PositionStatus


def test_order_intent_validation() -> None:
    with pytest.raises(ValueError):
        OrderIntent.market("SPY", OrderSide.BUY, 0)
    with pytest.raises(ValueError):
        OrderIntent(symbol="SPY", side=OrderSide.BUY, quantity=1, order_type=OrderType.LIMIT)
    with pytest.raises(ValueError):
        OrderIntent(symbol="SPY", side=OrderSide.BUY, quantity=1, limit_price=10.0)


def test_order_intent_is_immutable_and_serializable() -> None:
    o = OrderIntent.limit("SPY", OrderSide.SELL, 10, 101.25, tag="Short Limit")

    with pytest.raises(AttributeError):
        o.quantity = 5  # type: ignore[misc]
    assert o.signed_quantity == -10
    assert o.to_dict() == {
        "symbol": "SPY",
        "side": "SELL",
        "quantity": 10,
        "order_type": "LIMIT",
        "limit_price": 101.25,
        "tag": "Short Limit",
    }
    assert str(o) == "SELL 10 SPY limit @ 101.25"


def test_position_status_from_quantity() -> None:
    assert PositionStatus.from_quantity(5) is PositionStatus.LONG
    assert PositionStatus.from_quantity(-1) is PositionStatus.SHORT
    assert PositionStatus.from_quantity(0) is PositionStatus.FLAT


def test_paper_broker_satisfies_protocol() -> None:
    assert isinstance(PaperBroker(), Broker)


def test_market_orders_fill_at_marked_price() -> None:
    b = PaperBroker()
    b.mark("SPY", 100.0)

    oid = b.submit(OrderIntent.market("SPY", OrderSide.BUY, 10))

    assert oid == 1
    assert b.position_of("SPY") == 10
    rec = b.get_order(oid)
    assert rec.filled and rec.fill_price == 100.0


def test_limit_orders_rest_until_touched() -> None:
    b = PaperBroker()
    buy = b.submit(OrderIntent.limit("SPY", OrderSide.BUY, 5, 99.5))
    sell = b.submit(OrderIntent.limit("SPY", OrderSide.SELL, 3, 101.0))

    assert b.position_of("SPY") == 0
    assert len(b.pending("SPY")) == 2

    filled = b.fill_pending("SPY", high=100.5, low=99.4)
    assert [r.order_id for r in filled] == [buy]
    assert b.position_of("SPY") == 5

    filled = b.fill_pending("SPY", high=101.0, low=100.0)
    assert [r.order_id for r in filled] == [sell]
    assert b.position_of("SPY") == 2


def test_cancel_all_drops_only_pending() -> None:
    b = PaperBroker()
    b.mark("SPY", 50.0)
    b.submit(OrderIntent.market("SPY", OrderSide.SELL, 1))
    b.submit(OrderIntent.limit("SPY", OrderSide.BUY, 1, 49.0))
    b.submit(OrderIntent.limit("QQQ", OrderSide.BUY, 1, 49.0))

    assert b.cancel_all("SPY") == 1
    assert len(b.orders) == 2
    assert b.cancel_all() == 1
    assert len(b.orders) == 1


def test_rejecting_broker_returns_zero_id() -> None:
    b = PaperBroker(reject_all=True)
    assert b.submit(OrderIntent.market("SPY", OrderSide.BUY, 1)) == 0
    assert b.orders == []


def test_cancel_all_spares_kept_order() -> None:
    b = PaperBroker()
    stale = b.submit(OrderIntent.limit("SPY", OrderSide.BUY, 1, 49.0))
    fresh = b.submit(OrderIntent.limit("SPY", OrderSide.SELL, 1, 51.0))

    assert b.cancel_all("SPY", keep=fresh) == 1
    assert b.get_order(stale) is None
    assert [r.order_id for r in b.pending("SPY")] == [fresh]
