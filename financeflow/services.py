from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from uuid import uuid4

from financeflow.aggregation import dashboard_stats, expense_by_category
from financeflow.budgets import evaluate_budgets
from financeflow.domain import Budget, Severity, Transaction, TransactionDraft
from financeflow.events import (
    BUDGET_ALERT, TRANSACTION_ADDED, TRANSACTION_DELETED, EventBus, register_default_handlers
)
from financeflow.functional import validate_draft
from financeflow.repository import TransactionRepository
from financeflow.transforms import (
    add_transaction, delete_transaction, find_transaction, new_transaction, recent,
    transaction_to_dict,
)

Calculator = Callable[[Tuple[Transaction, ...], Sequence[Budget]], Dict[str, Any]]


class LedgerService:
    """Owns the current transaction snapshot and keeps the repository in step.

    Manual entries and entries parsed by the assistant both go through
    ``add_transaction``; there is no other way into the ledger.
    """

    def __init__(
        self,
        repository: TransactionRepository,
        bus: Optional[EventBus] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.repository = repository
        self.bus = bus if bus is not None else register_default_handlers()
        self._id_factory = id_factory or (lambda: str(uuid4()))
        self._transactions: Tuple[Transaction, ...] = tuple(repository.load())

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    def _commit(self, transactions: Tuple[Transaction, ...]) -> None:
        # persist first so a failed write leaves the snapshot untouched
        self.repository.save(transactions)
        self._transactions = transactions

    def add_transaction(self, draft: Union[TransactionDraft, Mapping[str, Any]]) -> Transaction:
        result = validate_draft(draft)
        if result.is_left():
            raise ValueError(result.get_error()["message"])

        tx = new_transaction(result.get_or_else(None), self._id_factory())
        self._commit(add_transaction(self._transactions, tx))
        self.bus.publish(TRANSACTION_ADDED, transaction_to_dict(tx))
        return tx

    def delete_transaction(self, tx_id: str) -> bool:
        found = find_transaction(self._transactions, tx_id)
        if found.is_none():
            return False

        self._commit(delete_transaction(self._transactions, tx_id))
        self.bus.publish(TRANSACTION_DELETED, transaction_to_dict(found.get_or_else(None)))
        return True

    def recent(self, limit: int) -> Tuple[Transaction, ...]:
        return recent(self._transactions, limit)

    def check_budgets(self, budgets: Sequence[Budget]) -> List[dict]:
        """Publish BUDGET_ALERT for each budget that is not OK and collect the alerts."""
        alerts = []
        for status in evaluate_budgets(self._transactions, budgets):
            if status.severity == Severity.OK:
                continue
            payload = {
                "category": status.category,
                "spent": status.spent,
                "limit": status.limit,
                "percentage": status.percentage,
                "severity": status.severity.value,
                "is_over_budget": status.is_over_budget,
            }
            alerts.extend(r for r in self.bus.publish(BUDGET_ALERT, payload) if "alert" in r)
        return alerts


def calc_stats(transactions, budgets):
    return {"stats": dashboard_stats(transactions)}


def calc_expense_breakdown(transactions, budgets):
    return {"expense_by_category": expense_by_category(transactions)}


def calc_budget_statuses(transactions, budgets):
    return {"budgets": evaluate_budgets(transactions, budgets)}


def default_calculators() -> List[Calculator]:
    return [calc_stats, calc_expense_breakdown, calc_budget_statuses]


class ReportService:
    """Facade building a dashboard report from injected calculators.

    calculators: sequence of functions taking (transactions, budgets) -> dict (partial results)
    """

    def __init__(self, calculators: Optional[Sequence[Calculator]] = None):
        self.calculators = list(calculators) if calculators is not None else default_calculators()

    def dashboard_report(self, transactions: Sequence[Transaction], budgets: Sequence[Budget]) -> Dict[str, Any]:
        snapshot = tuple(transactions)
        report = {"transaction_count": len(snapshot), "steps": [], "result": {}}

        acc = {}
        for calc in self.calculators:
            out = calc(snapshot, budgets)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        return report
