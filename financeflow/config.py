"""Configuration for FinanceFlow.

Paths, model settings and limits, each overridable through environment
variables. A ``.env`` file in the working directory is read first.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("FINANCEFLOW_DATA_DIR", _PROJECT_ROOT / "data"))
STORE_PATH = Path(os.getenv("FINANCEFLOW_STORE_PATH", DATA_DIR / "transactions.json"))
SEED_PATH = Path(os.getenv("FINANCEFLOW_SEED_PATH", DATA_DIR / "seed.json"))

MODEL_NAME = os.getenv("FINANCEFLOW_MODEL", "gemini-2.5-flash")

# Only the most recent transactions are sent for insights, to bound prompt size
INSIGHT_TRANSACTION_LIMIT = 20
RECENT_ACTIVITY_LIMIT = 5

LOG_LEVEL = os.getenv("FINANCEFLOW_LOG_LEVEL", "INFO")


def get_api_key() -> Optional[str]:
    """Gemini API key, from GEMINI_API_KEY or the older API_KEY variable."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
