import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio

import streamlit as st
import pandas as pd
import plotly.express as px

from financeflow.aggregation import dashboard_stats, expense_by_category
from financeflow.assistant import get_financial_insights, parse_transaction_from_text
from financeflow.budgets import evaluate_budgets
from financeflow.config import RECENT_ACTIVITY_LIMIT, SEED_PATH, STORE_PATH, configure_logging
from financeflow.domain import Category, Severity, TransactionDraft, TransactionType
from financeflow.functional import known_category, validate_draft
from financeflow.repository import JsonFileRepository, load_budgets
from financeflow.services import LedgerService
from financeflow.transforms import expense_transactions, income_transactions

configure_logging()
st.set_page_config(page_title="FinanceFlow", layout="wide")

if "ledger" not in st.session_state:
    st.session_state.ledger = LedgerService(JsonFileRepository(STORE_PATH, seed_path=SEED_PATH))

if "budgets" not in st.session_state:
    st.session_state.budgets = load_budgets(SEED_PATH)

if "insight" not in st.session_state:
    st.session_state.insight = None

ledger: LedgerService = st.session_state.ledger
budgets = st.session_state.budgets

SEVERITY_COLORS = {
    Severity.OK: "#10b981",
    Severity.WARNING: "#f59e0b",
    Severity.CRITICAL: "#ef4444",
}


def tx_to_df(tx_list):
    rows = [
        {
            "id": t.id,
            "date": t.date,
            "description": t.description,
            "category": t.category,
            "type": TransactionType(t.type).value,
            "amount": t.amount,
        }
        for t in tx_list
    ]
    return pd.DataFrame(rows, columns=["id", "date", "description", "category", "type", "amount"])


def signed(t) -> str:
    sign = "+" if t.type == TransactionType.INCOME else "-"
    return f"{sign}${t.amount:,.2f}"


def render_transaction_rows(tx_list, key_prefix: str):
    for t in tx_list:
        c1, c2, c3 = st.columns([5, 2, 1])
        with c1:
            st.markdown(f"**{t.description}**")
            label = known_category(t.category).map(lambda c: c.value).get_or_else(f"{t.category} (custom)")
            st.caption(f"{label} • {t.date}")
        with c2:
            st.markdown(signed(t))
        with c3:
            if st.button("✕", key=f"{key_prefix}_{t.id}"):
                ledger.delete_transaction(t.id)
                st.rerun()


menu = st.sidebar.radio(
    "Menu",
    ["🏠 Dashboard", "🧾 Transactions", "💰 Budgets", "💡 Insights"]
)

if menu == "🏠 Dashboard":
    st.title("💼 FinanceFlow")
    stats = dashboard_stats(ledger.transactions)
    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Total Balance", f"${stats.balance:,.2f}")
    with k2:
        st.metric("Total Income", f"${stats.total_income:,.2f}")
    with k3:
        st.metric("Total Expenses", f"${stats.total_expense:,.2f}")

    left, right = st.columns([2, 1])
    with left:
        st.subheader("➕ Add Transaction")
        mode = st.radio("Entry mode", ["Manual", "✨ AI"], horizontal=True)

        if mode == "Manual":
            with st.form("manual_form", clear_on_submit=True):
                col1, col2 = st.columns(2)
                with col1:
                    amount = st.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")
                    t_type = st.selectbox("Type", [t.value for t in TransactionType], index=1)
                with col2:
                    category = st.selectbox("Category", [c.value for c in Category])
                    date = st.date_input("Date")
                description = st.text_input("Description")
                submitted = st.form_submit_button("Add Transaction")

            if submitted:
                checked = validate_draft(TransactionDraft(
                    amount=float(amount),
                    type=TransactionType(t_type),
                    category=category,
                    description=description,
                    date=date.isoformat(),
                ))
                if not amount:
                    st.warning("Amount is required.")
                elif checked.is_left():
                    st.warning(checked.get_error()["message"])
                else:
                    ledger.add_transaction(checked.get_or_else(None))
                    st.success("✅ Transaction added!")
                    st.rerun()
        else:
            with st.form("ai_form", clear_on_submit=True):
                ai_input = st.text_input("Describe it", placeholder="Spent $45 on dinner with friends yesterday")
                ai_submitted = st.form_submit_button("Parse & Add")

            if ai_submitted and ai_input.strip():
                with st.spinner("Parsing..."):
                    result = asyncio.run(parse_transaction_from_text(ai_input))
                if result.is_right():
                    ledger.add_transaction(result.get_or_else(None))
                    st.success("✅ Transaction added!")
                    st.rerun()
                else:
                    st.error(result.get_error()["message"])

        st.subheader("🕒 Recent Activity")
        latest = ledger.recent(RECENT_ACTIVITY_LIMIT)
        if latest:
            render_transaction_rows(latest, "recent")
        else:
            st.info("No transactions yet. Add one above!")

    with right:
        st.subheader("📊 Expenses by Category")
        breakdown = expense_by_category(ledger.transactions)
        if breakdown:
            df_cat = pd.DataFrame(breakdown, columns=["Category", "Total"])
            fig_cat = px.pie(df_cat, values="Total", names="Category", hole=0.4, template="plotly_dark")
            fig_cat.update_layout(height=350, margin=dict(t=10, b=10, l=10, r=10))
            st.plotly_chart(fig_cat, use_container_width=True)
        else:
            st.info("No expenses recorded yet.")

elif menu == "🧾 Transactions":
    st.title("🧾 All Transactions")

    view = st.radio("Show", ["All", "Income", "Expenses"], horizontal=True)
    if view == "Income":
        shown = income_transactions(ledger.transactions)
    elif view == "Expenses":
        shown = expense_transactions(ledger.transactions)
    else:
        shown = ledger.transactions

    if shown:
        render_transaction_rows(shown, "all")
        csv = tx_to_df(shown).to_csv(index=False)
        st.download_button("⬇ Download CSV", csv, file_name="transactions.csv", mime="text/csv")
    else:
        st.info("No transactions to display.")

elif menu == "💰 Budgets":
    st.title("💰 Budget Monitor")

    if budgets:
        for status in evaluate_budgets(ledger.transactions, budgets):
            color = SEVERITY_COLORS[status.severity]
            c1, c2 = st.columns([3, 1])
            c1.markdown(f"**{status.category}**")
            c2.markdown(
                f"<span style='color:{color}'>${status.spent:,.0f} / ${status.limit:,.0f}</span>",
                unsafe_allow_html=True,
            )
            st.progress(status.percentage / 100)
            if status.is_over_budget:
                st.error("⚠️ Budget exceeded!")

        alerts = ledger.check_budgets(budgets)
        if alerts:
            with st.expander(f"Alerts ({len(alerts)})"):
                for alert in alerts:
                    st.warning(alert["alert"])
    else:
        st.info("No budgets set.")

elif menu == "💡 Insights":
    st.title("💡 AI Financial Coach")

    if st.button("🔄 Refresh insights"):
        with st.spinner("Analyzing your spending habits..."):
            result = asyncio.run(get_financial_insights(ledger.transactions))
        st.session_state.insight = (
            result.get_or_else("") if result.is_right() else result.get_error()["message"]
        )

    if st.session_state.insight:
        st.markdown(st.session_state.insight)
    else:
        st.caption("Click refresh to get personalized advice based on your recent activity.")
