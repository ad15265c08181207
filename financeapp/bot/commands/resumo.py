from telegram import Update
from telegram.ext import ContextTypes

from financeapp.core import dashboard
from financeapp.core import db
from financeapp.core.filters import current_month_range
from financeapp.utils.text_utils import format_currency
from .utils import linked_user_id, reply_not_linked


async def resumo_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Mostra receitas, despesas e saldo do mês atual."""
    user_id = linked_user_id(context)
    if not user_id:
        await reply_not_linked(update)
        return

    supabase_client = context.bot_data['supabase_client']
    start_date, end_date = current_month_range()
    transactions = db.get_transactions(
        supabase_client, user_id,
        start_date=start_date.isoformat(), end_date=end_date.isoformat()
    )
    if not transactions:
        await update.message.reply_text("Nenhuma transação registrada neste mês.")
        return

    summary = dashboard.summarize(transactions)
    message = (
        f"**Resumo de {start_date.strftime('%m/%Y')}**\n\n"
        f"Receitas: {format_currency(summary['total_income'])}\n"
        f"Despesas: {format_currency(summary['total_expense'])}\n"
        f"Saldo: {format_currency(summary['balance'])}\n"
    )
    if summary['open_installments']:
        message += (
            f"\nParcelas em aberto: {summary['open_installments']} "
            f"({format_currency(summary['pending_value'])} pendentes)"
        )
    await update.message.reply_text(message, parse_mode='Markdown')


async def parcelas_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Lista as compras parceladas que ainda têm parcelas a pagar."""
    user_id = linked_user_id(context)
    if not user_id:
        await reply_not_linked(update)
        return

    supabase_client = context.bot_data['supabase_client']
    transactions = db.get_transactions(supabase_client, user_id, transaction_type='expense')
    rows = [
        row for row in dashboard.installment_rows(transactions)
        if row['show_remaining'] and not row['status'].is_paid_off
    ]
    if not rows:
        await update.message.reply_text("Você não tem parcelas em aberto. 🎉")
        return

    message = "**Parcelas em aberto:**\n\n"
    total = 0.0
    for row in rows:
        status = row['status']
        total += status.remaining_value
        message += (
            f"- {row['transaction'].get('description')}: {status.label} de "
            f"{format_currency(status.installment_value)} "
            f"(restam {format_currency(status.remaining_value)})\n"
        )
    message += f"\n**Total pendente: {format_currency(total)}**"
    await update.message.reply_text(message, parse_mode='Markdown')
