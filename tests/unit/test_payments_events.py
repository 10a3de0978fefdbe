from backend.payments.events import extract_captured_payment

def test_extracts_order_and_payment_ids():
    event = {"event": "payment.captured", "payload": {"payment": {"entity": {"id": "pay_1", "order_id": "order_1"}}}}
    assert extract_captured_payment(event) == ("order_1", "pay_1")

def test_other_events_and_incomplete_payloads_are_ignored():
    assert extract_captured_payment({"event": "order.paid", "payload": {}}) is None
    assert extract_captured_payment({"event": "payment.captured", "payload": {}}) is None
    assert extract_captured_payment({"event": "payment.captured", "payload": {"payment": {"entity": {"id": "pay_1"}}}}) is None
    assert extract_captured_payment(["not", "a", "dict"]) is None
