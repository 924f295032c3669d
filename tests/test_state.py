import pytest

from infrastructure.database.models import OrderStatus
from isready.schemas import ShopIdentity
from isready.services.state import (
    AppState,
    MutationSucceeded,
    OperationFailed,
    OrdersLoaded,
    SessionChanged,
    reduce,
)

from tests.conftest import SHOP, make_order


def test_sign_in_enqueues_first_load():
    state = reduce(AppState(), SessionChanged(SHOP))

    assert state.shop == SHOP
    assert state.pending_refresh is True
    assert state.orders == ()


def test_orders_loaded_recomputes_stats_and_clears_pending():
    state = AppState(shop=SHOP, pending_refresh=True, error="boom")
    orders = (make_order(1), make_order(2, status=OrderStatus.READY))

    state = reduce(state, OrdersLoaded(orders))

    assert state.orders == orders
    assert (state.stats.in_progress, state.stats.ready) == (1, 1)
    assert state.pending_refresh is False
    assert state.error is None


def test_mutation_does_not_touch_orders():
    orders = (make_order(1),)
    state = AppState(shop=SHOP, orders=orders)

    new_state = reduce(state, MutationSucceeded(order_id=1))

    assert new_state.orders is orders
    assert new_state.pending_refresh is True
    assert state.pending_refresh is False


def test_failure_keeps_previous_data():
    orders = (make_order(1),)
    state = reduce(AppState(shop=SHOP, orders=orders), OperationFailed("Error loading orders"))

    assert state.orders == orders
    assert state.error == "Error loading orders"


def test_switching_shop_drops_previous_orders():
    state = AppState(shop=SHOP, orders=(make_order(1),))

    state = reduce(state, SessionChanged(ShopIdentity(id=2, shop_name="Other")))

    assert state.shop.id == 2
    assert state.orders == ()
    assert state.pending_refresh is True


def test_sign_out_resets_everything():
    state = AppState(shop=SHOP, orders=(make_order(1),))

    assert reduce(state, SessionChanged(None)) == AppState()


def test_unknown_event_is_rejected():
    with pytest.raises(TypeError):
        reduce(AppState(), object())
