from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Union

Amount = Union[int, float]


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Category(str, Enum):
    """Known category labels.

    Members compare equal to their plain string value, so a transaction
    stored with category "Food" matches Category.FOOD and any other label
    simply forms its own group.
    """

    FOOD = "Food"
    TRANSPORT = "Transport"
    HOUSING = "Housing"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    SHOPPING = "Shopping"
    SALARY = "Salary"
    INVESTMENT = "Investment"
    OTHER = "Other"


class Severity(str, Enum):
    OK = "OK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class TransactionDraft:
    amount: Amount
    type: TransactionType
    category: str
    description: str
    date: str        # YYYY-MM-DD


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: Amount   # unsigned, direction comes from type
    type: TransactionType
    category: str
    description: str
    date: str        # YYYY-MM-DD


# A spending ceiling for one category
@dataclass(frozen=True)
class Budget:
    category: str
    limit: Amount


class CategoryTotal(NamedTuple):
    category: str
    total: Amount


@dataclass(frozen=True)
class BudgetStatus:
    category: str
    spent: Amount
    limit: Amount
    percentage: float
    severity: Severity
    is_over_budget: bool


@dataclass(frozen=True)
class DashboardStats:
    total_income: Amount
    total_expense: Amount
    balance: Amount


def category_label(category) -> str:
    """Plain string behind a category, whether a Category member or free text."""
    return getattr(category, "value", category)
