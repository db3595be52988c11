import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence, Tuple, Union

from financeflow.domain import Budget, Transaction
from financeflow.transforms import load_seed, transaction_from_dict, transaction_to_dict

logger = logging.getLogger(__name__)

SEED_ERRORS = (OSError, ValueError, KeyError, TypeError, AttributeError)


def load_budgets(seed_path: Union[str, Path]) -> Tuple[Budget, ...]:
    """Default budgets from the seed file, or none if it cannot be read."""
    try:
        _, budgets = load_seed(str(seed_path))
    except SEED_ERRORS:
        logger.warning("Could not read budgets from %s", seed_path, exc_info=True)
        return ()
    return budgets


class TransactionRepository(Protocol):
    """Where the ledger is kept between runs.

    load() returns the stored snapshot, save() replaces it. The computation
    modules never call either; the service layer does, around each mutation.
    """

    def load(self) -> Tuple[Transaction, ...]:
        ...

    def save(self, transactions: Sequence[Transaction]) -> None:
        ...


class InMemoryRepository:

    def __init__(self, transactions: Sequence[Transaction] = ()):
        self._transactions = tuple(transactions)
        self.saves = 0

    def load(self) -> Tuple[Transaction, ...]:
        return self._transactions

    def save(self, transactions: Sequence[Transaction]) -> None:
        self._transactions = tuple(transactions)
        self.saves += 1


class JsonFileRepository:
    """Ledger stored as a JSON array of transaction objects.

    When the file does not exist yet, the transactions from ``seed_path``
    (if given) are returned so a first run starts with demo data. A file that
    cannot be read or decoded yields an empty ledger; single records that
    cannot be rebuilt are skipped.
    """

    def __init__(self, path: Union[str, Path], seed_path: Optional[Union[str, Path]] = None):
        self.path = Path(path)
        self.seed_path = Path(seed_path) if seed_path else None

    def _load_seed(self) -> Tuple[Transaction, ...]:
        if self.seed_path is None or not self.seed_path.exists():
            return ()
        try:
            transactions, _ = load_seed(str(self.seed_path))
        except SEED_ERRORS:
            logger.warning("Could not read seed file %s", self.seed_path, exc_info=True)
            return ()
        logger.info("Seeded ledger with %d transactions from %s", len(transactions), self.seed_path)
        return transactions

    def load(self) -> Tuple[Transaction, ...]:
        if not self.path.exists():
            return self._load_seed()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.error("Failed to load transactions from %s", self.path, exc_info=True)
            return ()

        if not isinstance(data, list):
            logger.error("Expected a JSON array in %s, got %s", self.path, type(data).__name__)
            return ()

        transactions = []
        for record in data:
            try:
                transactions.append(transaction_from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping invalid transaction %r: %s", record, e)

        logger.debug("Loaded %d transactions from %s", len(transactions), self.path)
        return tuple(transactions)

    def save(self, transactions: Sequence[Transaction]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([transaction_to_dict(t) for t in transactions], indent=2)
        self.path.write_text(payload, encoding="utf-8")
        logger.debug("Saved %d transactions to %s", len(transactions), self.path)
