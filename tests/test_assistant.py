import json
from datetime import date
from types import SimpleNamespace

import pytest

from financeflow.assistant import (
    CATEGORY_CHOICES, build_insights_prompt, build_parse_prompt, get_financial_insights,
    parse_transaction_from_text,
)
from financeflow.domain import Transaction, TransactionDraft, TransactionType


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def fake_client(text=None, error=None):
    return SimpleNamespace(aio=SimpleNamespace(models=FakeModels(text, error)))


def make_tx(i):
    return Transaction(f"t{i}", i, TransactionType.EXPENSE, "Food", f"item {i}", "2024-08-01")


def test_parse_prompt_mentions_categories_and_today():
    prompt = build_parse_prompt("coffee 4 bucks", date(2025, 3, 9))
    assert '"coffee 4 bucks"' in prompt
    assert CATEGORY_CHOICES in prompt
    assert "2025-03-09" in prompt


def test_insights_prompt_is_bounded():
    prompt = build_insights_prompt([make_tx(i) for i in range(30)], limit=20)
    data = json.loads(prompt.split("Data: ", 1)[1])
    assert len(data) == 20
    assert data[0]["id"] == "t0"


@pytest.mark.asyncio
async def test_parse_transaction_success():
    client = fake_client(json.dumps({
        "amount": 45, "type": "EXPENSE", "category": "Food",
        "description": "Dinner with friends", "date": "2025-03-08",
    }))

    result = await parse_transaction_from_text("Spent $45 on dinner yesterday", client=client, today=date(2025, 3, 9))

    assert result.is_right()
    assert result.get_or_else(None) == TransactionDraft(
        45, TransactionType.EXPENSE, "Food", "Dinner with friends", "2025-03-08"
    )
    call = client.aio.models.calls[0]
    assert call["config"].response_mime_type == "application/json"
    assert "2025-03-09" in call["contents"]


@pytest.mark.asyncio
async def test_parse_transaction_empty_input_skips_service():
    client = fake_client("{}")
    result = await parse_transaction_from_text("   ", client=client)
    assert result.get_error()["error"] == "empty_input"
    assert client.aio.models.calls == []


@pytest.mark.asyncio
async def test_parse_transaction_service_error():
    result = await parse_transaction_from_text("rent 1500", client=fake_client(error=RuntimeError("boom")))
    assert result.get_error()["error"] == "service_error"


@pytest.mark.asyncio
async def test_parse_transaction_empty_and_invalid_responses():
    assert (await parse_transaction_from_text("x", client=fake_client(None))).get_error()["error"] == "empty_response"
    assert (await parse_transaction_from_text("x", client=fake_client("not json"))).get_error()["error"] == "invalid_json"
    assert (await parse_transaction_from_text("x", client=fake_client("[1, 2]"))).get_error()["error"] == "invalid_json"


@pytest.mark.asyncio
async def test_parse_transaction_rejects_incomplete_candidate():
    client = fake_client(json.dumps({"amount": 45, "type": "EXPENSE", "category": "Food", "description": "x"}))
    result = await parse_transaction_from_text("dinner 45", client=client)
    assert result.get_error()["error"] == "missing_field"


@pytest.mark.asyncio
async def test_insights_need_transactions():
    client = fake_client("advice")
    result = await get_financial_insights([], client=client)
    assert result.get_error()["error"] == "no_transactions"
    assert client.aio.models.calls == []


@pytest.mark.asyncio
async def test_insights_success_strips_text():
    client = fake_client("  - Spend less on food\n")
    result = await get_financial_insights([make_tx(1)], client=client)
    assert result.get_or_else("") == "- Spend less on food"
    assert "3 brief, actionable bullet points" in client.aio.models.calls[0]["contents"]


@pytest.mark.asyncio
async def test_insights_failures():
    empty = await get_financial_insights([make_tx(1)], client=fake_client(""))
    broken = await get_financial_insights([make_tx(1)], client=fake_client(error=ConnectionError()))
    assert empty.get_error()["message"] == "No insights available at the moment."
    assert broken.get_error()["message"] == "Could not generate insights at this time."
