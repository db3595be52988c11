import math
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, is_dataclass
from datetime import date
from typing import Any, Callable, Generic, Mapping, TypeVar, Union

from financeflow.domain import Category, TransactionDraft, TransactionType

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

REQUIRED_FIELDS = ("amount", "type", "category", "description", "date")


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return not self.is_some()


@dataclass(frozen=True)
class Some(Maybe[T]):
    value: T

    def map(self, f):
        return Some(f(self.value))

    def bind(self, f):
        return f(self.value)

    def get_or_else(self, default):
        return self.value


@dataclass(frozen=True)
class Nothing(Maybe[T]):

    def map(self, f):
        return Nothing()

    def bind(self, f):
        return Nothing()

    def get_or_else(self, default):
        return default


class Either(Generic[E, T], ABC):
    """Tagged result: Right carries a value, Left carries an error."""

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()


@dataclass(frozen=True)
class Right(Either[E, T]):
    value: T

    def map(self, f):
        return Right(f(self.value))

    def bind(self, f):
        return f(self.value)

    def get_or_else(self, default):
        return self.value

    def get_error(self):
        raise ValueError("Cannot get error from Right")


@dataclass(frozen=True)
class Left(Either[E, T]):
    error: E

    def map(self, f):
        return self

    def bind(self, f):
        return self

    def get_or_else(self, default):
        return default

    def get_error(self):
        return self.error


def known_category(label: str) -> Maybe[Category]:
    for cat in Category:
        if cat.value == label:
            return Some(cat)
    return Nothing()


def _error(code: str, message: str, **extra: Any) -> Left:
    return Left({"error": code, "message": message, **extra})


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_draft(candidate: Union[Mapping[str, Any], TransactionDraft]) -> Either[dict, TransactionDraft]:
    """Check the five transaction fields and build a normalised draft.

    Accepts a mapping (e.g. decoded model JSON or form values) or an existing
    TransactionDraft. Nothing partial is ever returned: the result is either
    a complete draft or the first problem found.
    """
    data = asdict(candidate) if is_dataclass(candidate) else dict(candidate)

    for name in REQUIRED_FIELDS:
        if data.get(name) is None:
            return _error("missing_field", f"Field '{name}' is required", field=name)

    amount = data["amount"]
    if not _is_number(amount) or amount < 0:
        return _error("invalid_amount", f"Amount must be a non-negative number, got {amount!r}", amount=amount)

    try:
        t_type = TransactionType(str(getattr(data["type"], "value", data["type"])).strip().upper())
    except ValueError:
        return _error("invalid_type", f"Type must be INCOME or EXPENSE, got {data['type']!r}", type=data["type"])

    category = data["category"]
    if not isinstance(category, str) or not category.strip():
        return _error("invalid_category", "Category must be a non-empty string", category=category)

    description = data["description"]
    if not isinstance(description, str) or not description.strip():
        return _error("invalid_description", "Description must be a non-empty string", description=description)

    raw_date = data["date"]
    try:
        parsed = date.fromisoformat(raw_date) if isinstance(raw_date, str) and len(raw_date) == 10 else None
    except ValueError:
        parsed = None
    if parsed is None:
        return _error("invalid_date", f"Date must be YYYY-MM-DD, got {raw_date!r}", date=raw_date)

    return Right(TransactionDraft(
        amount=amount,
        type=t_type,
        category=category.strip(),
        description=description.strip(),
        date=parsed.isoformat(),
    ))
