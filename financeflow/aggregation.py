"""Totals and category breakdowns over a transaction snapshot.

Every function here is pure: it reads the sequence it is given, keeps no
state between calls, and never raises for a single bad record. Records that
are not well formed are skipped by ``iter_valid`` and the rest are still
counted.
"""
import math
from collections import defaultdict
from typing import Callable, Iterable, Iterator, Tuple

from financeflow.domain import (
    Amount, CategoryTotal, DashboardStats, Transaction, TransactionType, category_label
)


def _type_of(t: Transaction):
    try:
        return TransactionType(getattr(t, "type", None))
    except ValueError:
        return None


def is_well_formed(t: Transaction) -> bool:
    amount = getattr(t, "amount", None)
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return False
    if not math.isfinite(amount):
        return False
    return isinstance(getattr(t, "category", None), str) and _type_of(t) is not None


def iter_valid(
    trans: Iterable[Transaction], pred: Callable[[Transaction], bool] = lambda t: True
) -> Iterator[Transaction]:
    for t in trans:
        if is_well_formed(t) and pred(t):
            yield t


def _sum_of_type(trans: Iterable[Transaction], t_type: TransactionType) -> Amount:
    return sum((t.amount for t in iter_valid(trans, lambda t: _type_of(t) == t_type)), 0)


def total_income(trans: Iterable[Transaction]) -> Amount:
    return _sum_of_type(trans, TransactionType.INCOME)


def total_expense(trans: Iterable[Transaction]) -> Amount:
    return _sum_of_type(trans, TransactionType.EXPENSE)


def balance(trans: Iterable[Transaction]) -> Amount:
    trans = tuple(trans)
    return total_income(trans) - total_expense(trans)


def dashboard_stats(trans: Iterable[Transaction]) -> DashboardStats:
    trans = tuple(trans)
    income = total_income(trans)
    expense = total_expense(trans)
    return DashboardStats(total_income=income, total_expense=expense, balance=income - expense)


def expense_by_category(trans: Iterable[Transaction]) -> Tuple[CategoryTotal, ...]:
    """Sum expenses per exact category label, largest first.

    Categories with equal totals stay in the order they were first seen.
    """
    totals_by_category: dict[str, Amount] = defaultdict(int)

    for t in iter_valid(trans, lambda t: _type_of(t) == TransactionType.EXPENSE):
        totals_by_category[category_label(t.category)] += t.amount

    ordered = sorted(totals_by_category.items(), key=lambda item: item[1], reverse=True)
    return tuple(CategoryTotal(category, total) for category, total in ordered)
