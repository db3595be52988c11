import json
from typing import Tuple

from financeflow.domain import Budget, Transaction, TransactionDraft, TransactionType
from financeflow.functional import REQUIRED_FIELDS, Maybe, Nothing, Some, validate_draft


def transaction_from_dict(d: dict) -> Transaction:
    """Build a Transaction from its persisted form.

    Stored fields go through the same checks as a new entry. Raises KeyError,
    TypeError or ValueError for a record without an id, one that is not an
    object, or one whose fields do not validate.
    """
    tx_id = str(d["id"])
    result = validate_draft({name: d.get(name) for name in REQUIRED_FIELDS})
    if result.is_left():
        raise ValueError(result.get_error()["message"])
    return new_transaction(result.get_or_else(None), tx_id)


def transaction_to_dict(t: Transaction) -> dict:
    return {
        "id": t.id,
        "amount": t.amount,
        "type": TransactionType(t.type).value,
        "category": t.category,
        "description": t.description,
        "date": t.date,
    }


def budget_from_dict(d: dict) -> Budget:
    return Budget(category=d["category"], limit=d["limit"])


def load_seed(path: str) -> Tuple[Tuple[Transaction, ...], Tuple[Budget, ...]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    transactions = tuple(transaction_from_dict(t) for t in data.get("transactions", []))
    budgets = tuple(budget_from_dict(b) for b in data.get("budgets", []))

    return transactions, budgets


def new_transaction(draft: TransactionDraft, tx_id: str) -> Transaction:
    return Transaction(
        id=tx_id,
        amount=draft.amount,
        type=draft.type,
        category=draft.category,
        description=draft.description,
        date=draft.date,
    )


# newest first, matching the order the ledger is displayed in
def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return (t,) + trans


def delete_transaction(
    trans: Tuple[Transaction, ...], tx_id: str
) -> Tuple[Transaction, ...]:
    return tuple(t for t in trans if t.id != tx_id)


def find_transaction(trans: Tuple[Transaction, ...], tx_id: str) -> Maybe[Transaction]:
    for t in trans:
        if t.id == tx_id:
            return Some(t)
    return Nothing()


def recent(trans: Tuple[Transaction, ...], limit: int) -> Tuple[Transaction, ...]:
    return tuple(trans[: max(0, limit)])


def income_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == TransactionType.INCOME, trans))


def expense_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == TransactionType.EXPENSE, trans))
