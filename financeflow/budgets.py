from typing import Iterable, Sequence, Tuple

from financeflow.aggregation import iter_valid
from financeflow.domain import (
    Amount, Budget, BudgetStatus, Severity, Transaction, TransactionType, category_label
)
from financeflow.functional import Either, Left, Right

WARNING_THRESHOLD = 70
CRITICAL_THRESHOLD = 90
PERCENT_CAP = 100


def spent_in_category(trans: Iterable[Transaction], category: str) -> Amount:
    label = category_label(category)
    return sum(
        (t.amount for t in iter_valid(
            trans,
            lambda t: t.type == TransactionType.EXPENSE and category_label(t.category) == label,
        )),
        0,
    )


def severity_for(raw_pct: float, is_over_budget: bool) -> Severity:
    # first match wins
    if raw_pct > CRITICAL_THRESHOLD or is_over_budget:
        return Severity.CRITICAL
    if raw_pct > WARNING_THRESHOLD:
        return Severity.WARNING
    return Severity.OK


def evaluate_budget(trans: Iterable[Transaction], b: Budget) -> BudgetStatus:
    """Spent amount, display percentage and severity for one budget.

    The percentage is capped at 100 for display while ``is_over_budget`` and
    the severity use the uncapped ratio, so a budget can show 100% and still
    be flagged. A limit of zero or less cannot be divided by: any spending
    makes it over budget and critical, no spending leaves it OK at 0%.
    """
    spent = spent_in_category(trans, b.category)

    if b.limit <= 0:
        over = spent > 0
        return BudgetStatus(
            category=category_label(b.category),
            spent=spent,
            limit=b.limit,
            percentage=float(PERCENT_CAP) if over else 0.0,
            severity=Severity.CRITICAL if over else Severity.OK,
            is_over_budget=over,
        )

    raw_pct = spent * 100 / b.limit
    is_over_budget = spent > b.limit
    return BudgetStatus(
        category=category_label(b.category),
        spent=spent,
        limit=b.limit,
        percentage=float(min(raw_pct, PERCENT_CAP)),
        severity=severity_for(raw_pct, is_over_budget),
        is_over_budget=is_over_budget,
    )


def evaluate_budgets(
    trans: Iterable[Transaction], budgets: Sequence[Budget]
) -> Tuple[BudgetStatus, ...]:
    trans = tuple(trans)
    return tuple(evaluate_budget(trans, b) for b in budgets)


def check_budget(
    b: Budget,
    trans: Iterable[Transaction]
) -> Either[dict, BudgetStatus]:
    status = evaluate_budget(trans, b)

    if status.is_over_budget:
        return Left({
            "error": "budget_exceeded",
            "message": f"Budget limit exceeded for category {status.category}",
            "category": status.category,
            "limit": status.limit,
            "spent": status.spent,
            "over_budget": status.spent - status.limit
        })

    return Right(status)
