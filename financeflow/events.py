from datetime import datetime
from typing import Callable, Dict, List, NamedTuple, Optional

from financeflow.domain import Severity, TransactionType

__all__ = [
    'TRANSACTION_ADDED', 'TRANSACTION_DELETED', 'BUDGET_ALERT', 'Event', 'EventBus',
    'transaction_delta_handler', 'budget_alert_handler', 'register_default_handlers',
]

TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"
BUDGET_ALERT = "BUDGET_ALERT"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name)
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in list(handlers)]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


def transaction_delta_handler(event: Event, payload: dict) -> dict:
    amount = payload.get("amount", 0)
    sign = 1 if payload.get("type") == TransactionType.INCOME.value else -1
    if event.name == TRANSACTION_DELETED:
        sign = -sign
    return {"balance_delta": sign * amount}


def budget_alert_handler(event: Event, payload: dict) -> dict:
    severity = payload.get("severity")
    category = payload.get("category", "")
    spent = payload.get("spent", 0)
    limit = payload.get("limit", 0)

    if payload.get("is_over_budget"):
        return {
            "alert": f"Budget exceeded for {category}: {spent:,.2f} / {limit:,.2f}",
            "category": category,
            "severity": Severity.CRITICAL.value,
        }
    if severity in (Severity.WARNING.value, Severity.CRITICAL.value):
        return {
            "alert": f"{category} budget at {payload.get('percentage', 0):.0f}% ({spent:,.2f} / {limit:,.2f})",
            "category": category,
            "severity": severity,
        }
    return {}


def register_default_handlers(bus: Optional[EventBus] = None) -> EventBus:
    bus = bus or EventBus()
    bus.subscribe(TRANSACTION_ADDED, transaction_delta_handler)
    bus.subscribe(TRANSACTION_DELETED, transaction_delta_handler)
    bus.subscribe(BUDGET_ALERT, budget_alert_handler)
    return bus
