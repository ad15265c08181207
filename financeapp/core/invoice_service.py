# financeapp/core/invoice_service.py
import logging
from typing import Any, Dict, Union

from supabase import Client

from financeapp.core import db
from financeapp.core import invoices
from financeapp.core.models import CardInvoice

logger = logging.getLogger(__name__)


def _normalize(row: Dict[str, Any]) -> Dict[str, Any]:
    invoice = CardInvoice.model_validate(row).model_dump(mode="json")
    if invoice["id"] is None:
        invoice.pop("id")
    return invoice


def reconcile_invoice(supabase_client: Client, user_id: str, card: Dict[str, Any], month) -> Union[Dict[str, Any], None]:
    """
    Recalcula a fatura do cartão no mês a partir das transações e grava no Supabase.
    Retorna {"invoice", "items", "due_date"} ou None se a leitura ou a gravação falhar.
    Sem leitura completa nada é gravado, para não apagar pagamentos já registrados.
    """
    try:
        transactions = db.get_card_transactions(supabase_client, user_id, card["id"], strict=True)
        existing = db.get_invoice(supabase_client, card["id"], month, strict=True)
    except Exception as e:
        logger.warning("Fatura do cartão %s (%s) não foi recalculada: %s", card["id"], month, e)
        return None
    row = invoices.build_invoice(user_id, card["id"], month, transactions, existing)

    saved = db.upsert_invoice(supabase_client, row)
    if saved is None:
        return None
    return {
        "invoice": _normalize(saved),
        "items": invoices.invoice_items(transactions, card["id"], month),
        "due_date": invoices.due_date(card, month),
    }


def pay_invoice(supabase_client: Client, user_id: str, card: Dict[str, Any], month, amount: float) -> Union[Dict[str, Any], None]:
    """
    Registra um pagamento na fatura. Quando ela fica quitada, as parcelas do mês
    passam a contar como pagas nas transações.
    """
    reconciled = reconcile_invoice(supabase_client, user_id, card, month)
    if reconciled is None:
        return None

    updated = invoices.apply_payment(reconciled["invoice"], amount)
    saved = db.upsert_invoice(supabase_client, updated)
    if saved is None:
        return None

    if saved.get("status") == invoices.STATUS_PAID:
        for transaction_id, installment_number in invoices.installment_updates_for_paid_invoice(reconciled["items"]).items():
            if not db.update_transaction(supabase_client, transaction_id, {"installment_number": installment_number}):
                logger.warning("Parcela da transação %s não foi atualizada após pagamento da fatura", transaction_id)

    reconciled["invoice"] = _normalize(saved)
    return reconciled
