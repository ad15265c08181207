# financeapp/core/invoices.py
"""
Conciliação da fatura mensal de um cartão.

Cada parcela de uma despesa no cartão é cobrada em um mês: a parcela 1 no mês
da compra, a parcela 2 no mês seguinte e assim por diante. A fatura de um mês
é a soma das parcelas cobradas nele; o pagamento é acompanhado em
`paid_amount` e `status`, e a linha é gravada em `card_invoices` pela chave
(card_id, month).
"""
import calendar
import datetime
from typing import Any, Dict, Iterable, List, Union

from financeapp.core.installments import calculate_installment_status, installment_index_for_month
from financeapp.utils.text_utils import parse_month

STATUS_OPEN = "open"
STATUS_PARTIAL = "partial"
STATUS_PAID = "paid"

STATUS_LABELS = {
    STATUS_OPEN: "Em aberto",
    STATUS_PARTIAL: "Parcialmente paga",
    STATUS_PAID: "Paga",
}


def invoice_items(transactions: Iterable[Dict[str, Any]], card_id: str,
                  month: Union[str, datetime.date]) -> List[Dict[str, Any]]:
    """Parcelas das despesas do cartão que são cobradas em `month`."""
    items = []
    for transaction in transactions:
        if transaction.get("type", "expense") != "expense":
            continue
        if transaction.get("source_type") != "card" or transaction.get("source_id") != card_id:
            continue
        index = installment_index_for_month(transaction, month)
        if index is None:
            continue
        status = calculate_installment_status(transaction)
        items.append({
            "transaction_id": transaction.get("id"),
            "description": transaction.get("description") or "Sem descrição",
            "transaction_date": transaction.get("transaction_date"),
            "installment_index": index,
            "total_installments": status.total_installments,
            "installment_value": status.installment_value,
            "paid_installments": status.paid_installments,
            "label": f"{index}/{status.total_installments}" if status.total_installments > 1 else "À vista",
        })
    return items


def invoice_total(items: Iterable[Dict[str, Any]]) -> float:
    return round(sum(item["installment_value"] for item in items), 2)


def invoice_status(total_amount: float, paid_amount: float) -> str:
    total_amount = round(float(total_amount or 0), 2)
    paid_amount = round(float(paid_amount or 0), 2)
    if paid_amount >= total_amount:
        return STATUS_PAID
    if paid_amount <= 0:
        return STATUS_OPEN
    return STATUS_PARTIAL


def build_invoice(user_id: str, card_id: str, month: Union[str, datetime.date],
                  transactions: Iterable[Dict[str, Any]],
                  existing: Union[Dict[str, Any], None] = None) -> Dict[str, Any]:
    """Monta a linha de `card_invoices` recalculando o total, preservando o que já foi pago."""
    items = invoice_items(transactions, card_id, month)
    total_amount = invoice_total(items)
    paid_amount = round(float((existing or {}).get("paid_amount") or 0), 2)
    status = invoice_status(total_amount, paid_amount)

    paid_at = (existing or {}).get("paid_at")
    if status != STATUS_PAID:
        paid_at = None

    return {
        "user_id": user_id,
        "card_id": card_id,
        "month": parse_month(month).isoformat(),
        "total_amount": total_amount,
        "paid_amount": paid_amount,
        "status": status,
        "paid_at": paid_at,
    }


def apply_payment(invoice: Dict[str, Any], amount: float,
                  paid_at: Union[datetime.datetime, None] = None) -> Dict[str, Any]:
    """Registra um pagamento na fatura e devolve a linha atualizada."""
    amount = round(float(amount), 2)
    if amount < 0:
        raise ValueError("O valor do pagamento não pode ser negativo")

    updated = dict(invoice)
    updated["paid_amount"] = round(float(invoice.get("paid_amount") or 0) + amount, 2)
    updated["status"] = invoice_status(updated.get("total_amount") or 0, updated["paid_amount"])
    if updated["status"] == STATUS_PAID:
        paid_at = paid_at or datetime.datetime.now(datetime.timezone.utc)
        updated["paid_at"] = paid_at.isoformat()
    else:
        updated["paid_at"] = None
    return updated


def installment_updates_for_paid_invoice(items: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """
    Com a fatura paga, a parcela cobrada no mês passa a contar como paga.
    Retorna {transaction_id: novo installment_number} só para as transações que mudam.
    """
    updates = {}
    for item in items:
        transaction_id = item.get("transaction_id")
        if not transaction_id:
            continue
        new_number = min(item["installment_index"], item["total_installments"])
        if new_number > item["paid_installments"]:
            updates[transaction_id] = max(new_number, updates.get(transaction_id, 0))
    return updates


def due_date(card: Dict[str, Any], month: Union[str, datetime.date]) -> Union[datetime.date, None]:
    """Data de vencimento da fatura; dia 31 em fevereiro vira o último dia do mês."""
    due_day = card.get("billing_due_day")
    if not due_day:
        return None
    first_day = parse_month(month)
    last_day = calendar.monthrange(first_day.year, first_day.month)[1]
    return first_day.replace(day=min(int(due_day), last_day))


def available_limit(card: Dict[str, Any], open_amount: float) -> Union[float, None]:
    """Limite disponível = limite do cartão - valor das parcelas ainda em aberto."""
    credit_limit = card.get("credit_limit")
    if credit_limit is None:
        return None
    return round(float(credit_limit) - float(open_amount or 0), 2)


def open_amount_for_card(transactions: Iterable[Dict[str, Any]], card_id: str) -> float:
    """Soma das parcelas ainda não pagas das despesas do cartão."""
    total = 0.0
    for transaction in transactions:
        if transaction.get("type", "expense") != "expense":
            continue
        if transaction.get("source_type") != "card" or transaction.get("source_id") != card_id:
            continue
        total += calculate_installment_status(transaction).remaining_value
    return round(total, 2)
