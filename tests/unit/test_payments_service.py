import json

import pytest

from backend.payments import service as payments_service
from backend.utils.errors import InvalidSignatureError, ValidationError
from conftest import WEBHOOK_SECRET, client_signature, compute_signature


@pytest.fixture()
def online_order(store):
    return store.insert_order({
        "id": "o-1",
        "user_id": "u1",
        "products": [{"productId": "P1", "quantity": 2}],
        "payment_method": "online",
        "payment_info": {"billingAmount": 200.0, "totalSaved": 100.0},
        "status": "pending",
        "is_paid": False,
        "delivery_address": {"id": "a1", "city": "Pune"},
        "address_id": "a1",
        "razorpay_order": {"id": "order_GW1", "amount": 20000, "currency": "INR"},
    })

def _captured_event(gateway_order_id="order_GW1", payment_id="pay_W1", event="payment.captured") -> bytes:
    return json.dumps({
        "event": event,
        "payload": {"payment": {"entity": {"id": payment_id, "order_id": gateway_order_id, "amount": 20000}}},
    }).encode("utf-8")

def test_forged_client_signature_changes_nothing(store, online_order):
    with pytest.raises(InvalidSignatureError) as exc:
        payments_service.confirm_client_payment("order_GW1", "pay_1", "0" * 64)
    assert exc.value.status_code == 400
    assert store.orders["o-1"]["is_paid"] is False
    assert store.orders["o-1"]["razorpay_payment_id"] is None

def test_valid_client_signature_reconciles(store, online_order):
    sig = client_signature("order_GW1", "pay_1")
    updated = payments_service.confirm_client_payment("order_GW1", "pay_1", sig)
    assert updated["is_paid"] is True
    assert updated["status"] == "processing"
    assert store.orders["o-1"]["razorpay_payment_id"] == "pay_1"
    assert store.orders["o-1"]["razorpay_signature"] == sig

def test_valid_signature_without_order_returns_none(store):
    assert payments_service.confirm_client_payment("order_X", "pay_1", client_signature("order_X", "pay_1")) is None

def test_apply_payment_never_regresses_status(store, online_order):
    store.update_order("o-1", {"status": "shipped", "is_paid": True})
    updated = payments_service.apply_payment(store.get_order("o-1"), "pay_2")
    assert updated["status"] == "shipped"
    assert updated["is_paid"] is True

def test_webhook_rejects_bad_signature(store, online_order):
    body = _captured_event()
    with pytest.raises(InvalidSignatureError):
        payments_service.handle_webhook(body, "bad")
    with pytest.raises(InvalidSignatureError):
        payments_service.handle_webhook(body, None)
    assert store.orders["o-1"]["is_paid"] is False

def test_webhook_captured_marks_paid_and_keeps_signature(store, online_order):
    store.update_order("o-1", {"razorpay_signature": "client-sig"})
    body = _captured_event()
    result = payments_service.handle_webhook(body, compute_signature(WEBHOOK_SECRET, body))
    assert result == {"status": "ok", "orderId": "o-1"}
    row = store.orders["o-1"]
    assert row["is_paid"] is True
    assert row["status"] == "processing"
    assert row["razorpay_payment_id"] == "pay_W1"
    assert row["razorpay_signature"] == "client-sig"

def test_webhook_other_event_is_acknowledged(store, online_order):
    body = _captured_event(event="payment.failed")
    assert payments_service.handle_webhook(body, compute_signature(WEBHOOK_SECRET, body)) == {"status": "ok"}
    assert store.orders["o-1"]["is_paid"] is False

def test_webhook_unknown_order_is_acknowledged(store):
    body = _captured_event(gateway_order_id="order_unknown")
    assert payments_service.handle_webhook(body, compute_signature(WEBHOOK_SECRET, body)) == {"status": "ok"}

def test_webhook_invalid_json(store):
    body = b"not json"
    with pytest.raises(ValidationError):
        payments_service.handle_webhook(body, compute_signature(WEBHOOK_SECRET, body))

def test_webhook_signed_with_key_secret_is_rejected(store, online_order):
    from conftest import KEY_SECRET
    body = _captured_event()
    with pytest.raises(InvalidSignatureError):
        payments_service.handle_webhook(body, compute_signature(KEY_SECRET, body))

def test_webhook_non_ascii_signature_is_rejected(store, online_order):
    with pytest.raises(InvalidSignatureError):
        payments_service.handle_webhook(_captured_event(), "\xe9")
    assert store.orders["o-1"]["is_paid"] is False

def test_confirm_non_ascii_signature_is_rejected(store, online_order):
    with pytest.raises(InvalidSignatureError):
        payments_service.confirm_client_payment("order_GW1", "pay_1", "é" * 64)
    assert store.orders["o-1"]["is_paid"] is False
