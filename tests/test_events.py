from datetime import datetime

from financeflow.events import (
    BUDGET_ALERT, TRANSACTION_ADDED, TRANSACTION_DELETED, Event, EventBus,
    budget_alert_handler, register_default_handlers, transaction_delta_handler,
)


def make_event(name, payload):
    return Event(name=name, ts=datetime.now().isoformat(), payload=payload)


def test_event_bus_subscribe_and_publish():
    bus = EventBus()
    seen = []

    def handler(event: Event, payload: dict) -> dict:
        seen.append(event.name)
        return {"processed": True}

    bus.subscribe(TRANSACTION_ADDED, handler)
    results = bus.publish(TRANSACTION_ADDED, {"amount": 50})

    assert results == [{"processed": True}]
    assert seen == [TRANSACTION_ADDED]


def test_publish_without_subscribers_returns_empty():
    assert EventBus().publish(BUDGET_ALERT, {}) == []


def test_multiple_subscribers_run_in_order():
    bus = EventBus()
    bus.subscribe(TRANSACTION_ADDED, lambda e, p: {"handler": 1})
    bus.subscribe(TRANSACTION_ADDED, lambda e, p: {"handler": 2})
    assert bus.publish(TRANSACTION_ADDED, {}) == [{"handler": 1}, {"handler": 2}]


def test_unsubscribe():
    bus = EventBus()
    calls = []

    def handler(event, payload):
        calls.append(payload)
        return {}

    bus.subscribe(TRANSACTION_ADDED, handler)
    bus.publish(TRANSACTION_ADDED, {"amount": 1})
    bus.unsubscribe(TRANSACTION_ADDED, handler)
    bus.unsubscribe(TRANSACTION_ADDED, handler)
    bus.publish(TRANSACTION_ADDED, {"amount": 2})

    assert calls == [{"amount": 1}]


def test_transaction_delta_handler_uses_type_for_direction():
    expense = {"amount": 150, "type": "EXPENSE"}
    income = {"amount": 90, "type": "INCOME"}

    assert transaction_delta_handler(make_event(TRANSACTION_ADDED, expense), expense) == {"balance_delta": -150}
    assert transaction_delta_handler(make_event(TRANSACTION_ADDED, income), income) == {"balance_delta": 90}
    assert transaction_delta_handler(make_event(TRANSACTION_DELETED, income), income) == {"balance_delta": -90}


def test_budget_alert_handler_over_budget():
    payload = {"category": "Food", "spent": 550, "limit": 500, "percentage": 100,
               "severity": "CRITICAL", "is_over_budget": True}
    result = budget_alert_handler(make_event(BUDGET_ALERT, payload), payload)

    assert "Budget exceeded for Food" in result["alert"]
    assert result["severity"] == "CRITICAL"


def test_budget_alert_handler_warning_and_ok():
    warning = {"category": "Food", "spent": 360, "limit": 500, "percentage": 72,
               "severity": "WARNING", "is_over_budget": False}
    ok = dict(warning, spent=10, percentage=2, severity="OK")

    assert "72%" in budget_alert_handler(make_event(BUDGET_ALERT, warning), warning)["alert"]
    assert budget_alert_handler(make_event(BUDGET_ALERT, ok), ok) == {}


def test_register_default_handlers():
    bus = register_default_handlers()
    results = bus.publish(TRANSACTION_ADDED, {"amount": 5, "type": "EXPENSE"})
    assert results == [{"balance_delta": -5}]
