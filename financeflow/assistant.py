"""Gemini-backed helpers: free-text transaction entry and spending insights.

Both helpers are coroutines and both return an ``Either``: a Right with a
validated TransactionDraft (or the advice text), or a Left carrying an
``{"error": code, "message": text}`` dict. Errors from the model service are
logged and turned into a Left, never raised to the caller.
"""
import json
import logging
from datetime import date
from typing import Any, Optional, Sequence

from google import genai
from google.genai import types

from financeflow.config import INSIGHT_TRANSACTION_LIMIT, MODEL_NAME, get_api_key
from financeflow.domain import Category, Transaction, TransactionDraft, TransactionType
from financeflow.functional import REQUIRED_FIELDS, Either, Left, Right, validate_draft
from financeflow.transforms import recent, transaction_to_dict

logger = logging.getLogger(__name__)

CATEGORY_CHOICES = ", ".join(c.value for c in Category)

TRANSACTION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "amount": types.Schema(type=types.Type.NUMBER),
        "type": types.Schema(type=types.Type.STRING, enum=[t.value for t in TransactionType]),
        "category": types.Schema(type=types.Type.STRING),
        "description": types.Schema(type=types.Type.STRING),
        "date": types.Schema(type=types.Type.STRING),
    },
    required=list(REQUIRED_FIELDS),
)


def make_client(api_key: Optional[str] = None) -> genai.Client:
    return genai.Client(api_key=api_key or get_api_key())


def build_parse_prompt(text: str, today: date) -> str:
    return (
        f'Parse this financial transaction: "{text}". '
        f"Return JSON with amount, type (INCOME or EXPENSE), "
        f"category (pick best fit from: {CATEGORY_CHOICES}), description, "
        f"and date (YYYY-MM-DD, assume today is {today.isoformat()} if not specified)."
    )


def build_insights_prompt(transactions: Sequence[Transaction], limit: int = INSIGHT_TRANSACTION_LIMIT) -> str:
    summary = json.dumps([transaction_to_dict(t) for t in recent(tuple(transactions), limit)])
    return (
        "Analyze these recent financial transactions and provide 3 brief, actionable "
        "bullet points of advice or observations about spending habits. "
        "Keep it encouraging but realistic.\n"
        f"Data: {summary}"
    )


async def _generate(client: Any, prompt: str, gen_config: Optional[types.GenerateContentConfig] = None) -> Optional[str]:
    client = client or make_client()
    response = await client.aio.models.generate_content(
        model=MODEL_NAME,
        contents=prompt,
        config=gen_config,
    )
    return response.text


async def parse_transaction_from_text(
    text: str,
    client: Any = None,
    today: Optional[date] = None,
) -> Either[dict, TransactionDraft]:
    if not text or not text.strip():
        return Left({"error": "empty_input", "message": "Describe the transaction first."})

    prompt = build_parse_prompt(text.strip(), today or date.today())
    gen_config = types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=TRANSACTION_SCHEMA,
    )

    try:
        raw = await _generate(client, prompt, gen_config)
    except Exception:
        logger.error("Error parsing transaction with Gemini", exc_info=True)
        return Left({"error": "service_error", "message": "Error connecting to AI service."})

    if not raw:
        return Left({"error": "empty_response", "message": "Could not understand that transaction. Please try again."})

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Model returned invalid JSON: %r", raw)
        return Left({"error": "invalid_json", "message": "Could not understand that transaction. Please try again."})

    if not isinstance(data, dict):
        logger.warning("Model returned %s instead of an object", type(data).__name__)
        return Left({"error": "invalid_json", "message": "Could not understand that transaction. Please try again."})

    result = validate_draft(data)
    if result.is_left():
        logger.warning("Rejected parsed transaction %r: %s", data, result.get_error()["message"])
    return result


async def get_financial_insights(
    transactions: Sequence[Transaction],
    client: Any = None,
    limit: int = INSIGHT_TRANSACTION_LIMIT,
) -> Either[dict, str]:
    if not transactions:
        return Left({"error": "no_transactions", "message": "Add some transactions first to get insights!"})

    try:
        raw = await _generate(client, build_insights_prompt(transactions, limit))
    except Exception:
        logger.error("Error generating insights", exc_info=True)
        return Left({"error": "service_error", "message": "Could not generate insights at this time."})

    text = (raw or "").strip()
    if not text:
        return Left({"error": "empty_response", "message": "No insights available at the moment."})
    return Right(text)
