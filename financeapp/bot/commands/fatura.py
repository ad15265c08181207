import datetime

from telegram import Update
from telegram.ext import ContextTypes

from financeapp.core import db
from financeapp.core import invoice_service
from financeapp.core.invoices import STATUS_LABELS
from financeapp.utils.text_utils import format_currency, format_date, format_month, parse_month, MONTH_PATTERN
from .utils import linked_user_id, reply_not_linked


def _split_args(args: list):
    """'/fatura Nubank Pessoal 2025-07' -> ('Nubank Pessoal', '2025-07')"""
    if args and MONTH_PATTERN.match(args[-1]):
        return " ".join(args[:-1]).strip(), args[-1]
    return " ".join(args).strip(), None


async def fatura_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Mostra a fatura de um cartão no mês informado (ou no mês atual)."""
    user_id = linked_user_id(context)
    if not user_id:
        await reply_not_linked(update)
        return

    supabase_client = context.bot_data['supabase_client']
    cards = db.get_cards(supabase_client, user_id)
    if not cards:
        await update.message.reply_text("Nenhum cartão cadastrado. Cadastre seus cartões pelo site.")
        return

    card_name, month_arg = _split_args(context.args or [])
    if not card_name:
        if len(cards) > 1:
            names = ", ".join(card['card_nickname'] for card in cards)
            await update.message.reply_text(
                f"Uso: `/fatura [cartão] [AAAA-MM]`\nSeus cartões: {names}", parse_mode='Markdown'
            )
            return
        card = cards[0]
    else:
        card = next((c for c in cards if c['card_nickname'].lower() == card_name.lower()), None)
        if card is None:
            await update.message.reply_text(f"Cartão '{card_name}' não encontrado.")
            return

    try:
        month = parse_month(month_arg) if month_arg else datetime.date.today().replace(day=1)
    except ValueError:
        await update.message.reply_text("Mês inválido. Use o formato AAAA-MM (ex: 2025-07).")
        return

    reconciled = invoice_service.reconcile_invoice(supabase_client, user_id, card, month)
    if reconciled is None:
        await update.message.reply_text("Não consegui carregar a fatura. Tente novamente mais tarde.")
        return

    invoice = reconciled['invoice']
    message = f"**Fatura {card['card_nickname']} - {format_month(month)}**\n\n"
    for item in reconciled['items']:
        message += f"- {format_date(item['transaction_date'], short=True)} {item['description']} ({item['label']}): {format_currency(item['installment_value'])}\n"
    if not reconciled['items']:
        message += "Nenhuma compra nesta fatura.\n"
    message += (
        f"\nTotal: {format_currency(invoice.get('total_amount'))}\n"
        f"Pago: {format_currency(invoice.get('paid_amount'))}\n"
        f"Situação: {STATUS_LABELS.get(invoice.get('status'), invoice.get('status'))}"
    )
    if reconciled['due_date']:
        message += f"\nVencimento: {format_date(reconciled['due_date'])}"
    await update.message.reply_text(message, parse_mode='Markdown')
