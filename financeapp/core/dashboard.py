# financeapp/core/dashboard.py
import pandas as pd
from typing import Any, Dict, List

from financeapp.core.categories import get_category_display
from financeapp.core.installments import calculate_installment_status, installment_month


def _transactions_frame(transactions: List[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(transactions)
    if df.empty:
        return pd.DataFrame(columns=["type", "amount", "transaction_date", "category_id"])
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0)
    df["transaction_date"] = pd.to_datetime(df["transaction_date"])
    if "category_id" not in df.columns:
        df["category_id"] = None
    return df


def summarize(transactions: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Totais de receitas e despesas, saldo e parcelas em aberto."""
    summary = {
        "total_income": 0.0,
        "total_expense": 0.0,
        "balance": 0.0,
        "open_installments": 0,
        "pending_value": 0.0,
    }
    for transaction in transactions:
        amount = float(transaction.get("amount") or 0)
        if transaction.get("type") == "income":
            summary["total_income"] += amount
            continue

        summary["total_expense"] += amount
        status = calculate_installment_status(transaction)
        if status.total_installments > 1:
            summary["open_installments"] += 1
            summary["pending_value"] += status.remaining_value

    summary["balance"] = summary["total_income"] - summary["total_expense"]
    return summary


def monthly_trend(transactions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Receitas e despesas por mês: [{name: 'MM/AAAA', despesas, receitas}]."""
    df = _transactions_frame(transactions)
    if df.empty:
        return []

    df["mes_ano"] = df["transaction_date"].dt.to_period("M")
    monthly = df.groupby(["mes_ano", "type"])["amount"].sum().unstack(fill_value=0).sort_index()

    trend = []
    for period, row in monthly.iterrows():
        trend.append({
            "name": period.strftime("%m/%Y"),
            "despesas": round(float(row.get("expense", 0.0)), 2),
            "receitas": round(float(row.get("income", 0.0)), 2),
        })
    return trend


def category_breakdown(transactions: List[Dict[str, Any]],
                       categories: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Despesas por categoria, da maior para a menor, com a participação no total."""
    df = _transactions_frame(transactions)
    if df.empty:
        return []
    df = df[df["type"] == "expense"]
    if df.empty:
        return []

    categories_by_id = {cat["id"]: cat for cat in categories}
    df = df.assign(category_key=df["category_id"].fillna(""))
    totals = df.groupby("category_key")["amount"].sum().sort_values(ascending=False)
    grand_total = float(totals.sum())

    breakdown = []
    for category_id, value in totals.items():
        display = get_category_display(categories_by_id.get(category_id))
        value = round(float(value), 2)
        breakdown.append({
            "name": display["name"],
            "icon": display["icon"],
            "color": display["color"],
            "value": value,
            "percentage": 0.0 if grand_total == 0 else round(value / grand_total * 100, 1),
        })
    return breakdown


def recent_transactions(transactions: List[Dict[str, Any]], limit: int = 5) -> List[Dict[str, Any]]:
    ordered = sorted(transactions, key=lambda t: str(t.get("transaction_date") or ""), reverse=True)
    return ordered[:limit]


def installment_rows(transactions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Linhas da tabela da visão geral: cada transação com a situação das parcelas."""
    rows = []
    for transaction in transactions:
        status = calculate_installment_status(transaction)
        is_expense = transaction.get("type") == "expense"
        show_remaining = is_expense and status.total_installments > 1
        next_month = None
        if show_remaining and not status.is_paid_off and transaction.get("transaction_date"):
            next_month = installment_month(transaction["transaction_date"], status.paid_installments + 1)
        rows.append({
            "transaction": transaction,
            "category": get_category_display(transaction.get("categories")),
            "status": status,
            "is_expense": is_expense,
            "show_remaining": show_remaining,
            "next_month": next_month,
        })
    return rows
