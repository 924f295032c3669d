from datetime import date
from decimal import Decimal

from isready.services.notifications import (
    HandoffCollector,
    MessageContext,
    MessageKind,
    NotificationDispatcher,
    build_handoff_uri,
    compose_message,
    format_money,
    phone_digits,
)

from tests.conftest import make_order


def test_handoff_uri_strips_phone_to_digits():
    assert build_handoff_uri("+91 98765-43210", "Hi") == "https://wa.me/919876543210?text=Hi"


def test_handoff_uri_encodes_like_encode_uri_component():
    uri = build_handoff_uri("5551234", "Hello John!\nTotal: ₹1,500 & more")

    assert uri == (
        "https://wa.me/5551234?text="
        "Hello%20John!%0ATotal%3A%20%E2%82%B91%2C500%20%26%20more"
    )


def test_phone_digits_can_be_empty():
    assert phone_digits("call me") == ""


def test_format_money():
    assert format_money(Decimal("1500.00")) == "₹1,500"
    assert format_money(Decimal("99.5")) == "₹99.50"
    assert format_money(Decimal("-200")) == "-₹200"


def test_created_message_mentions_order_details():
    order = make_order(delivery_date=date(2026, 10, 25))

    text = compose_message(MessageKind.CREATED, order, MessageContext(shop_name="Stitch Perfect"))

    assert text.startswith("Hello John Doe!")
    assert "received at Stitch Perfect" in text
    assert "📦 Items: 2 shirts" in text
    assert "📅 Expected Delivery: 2026-10-25" in text
    assert "💰 Total: ₹1,500" in text
    assert "✅ Advance Paid: ₹500" in text


def test_created_message_without_date_or_shop_name():
    text = compose_message(MessageKind.CREATED, make_order(), MessageContext())

    assert "received at our shop" in text
    assert "Expected Delivery: Not set" in text


def test_ready_message_balance_is_price_minus_advance():
    order = make_order(price=Decimal("1200"), advance_payment=Decimal("1500"))

    text = compose_message(MessageKind.READY, order, MessageContext(shop_name="Stitch Perfect"))

    assert "ready for pickup at Stitch Perfect" in text
    assert "Balance Due: -₹300" in text


def test_extended_message_uses_new_date_from_context():
    order = make_order(delivery_date=date(2026, 10, 20))

    text = compose_message(
        MessageKind.EXTENDED,
        order,
        MessageContext(new_delivery_date=date(2026, 10, 27)),
    )

    assert "We apologize for the delay" in text
    assert "New Delivery Date: 2026-10-27" in text
    assert "2026-10-20" not in text


def test_notify_hands_uri_to_opener():
    collector = HandoffCollector()
    dispatcher = NotificationDispatcher(collector)

    uri = dispatcher.notify(MessageKind.READY, make_order(), MessageContext())

    assert collector.uris == [uri]
    assert uri.startswith("https://wa.me/919876543210?text=Good%20news%20John%20Doe!")


def test_notify_skips_phone_without_digits():
    collector = HandoffCollector()
    dispatcher = NotificationDispatcher(collector)

    uri = dispatcher.notify(MessageKind.CREATED, make_order(customer_phone="n/a"), MessageContext())

    assert uri is None
    assert collector.uris == []


def test_dispatch_does_not_raise_when_opener_fails():
    def broken_opener(uri):
        raise RuntimeError("no browser")

    dispatcher = NotificationDispatcher(broken_opener)

    assert dispatcher.notify(MessageKind.CREATED, make_order(), MessageContext()) is not None
