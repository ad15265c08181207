from telegram import Update
from telegram.ext import ContextTypes

from financeapp.core import charts
from financeapp.core import dashboard
from financeapp.core import db
from .utils import linked_user_id, reply_not_linked


async def grafico_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Gera e envia o gráfico de tendência mensal."""
    user_id = linked_user_id(context)
    if not user_id:
        await reply_not_linked(update)
        return

    supabase_client = context.bot_data['supabase_client']
    await update.message.reply_text("Gerando seu gráfico mensal, por favor aguarde...")
    transactions = db.get_transactions(supabase_client, user_id)
    chart_buffer = charts.generate_monthly_trend_chart(dashboard.monthly_trend(transactions))
    if chart_buffer:
        chart_buffer.name = "tendencia_mensal.png"
        await update.message.reply_photo(
            photo=chart_buffer, caption="Aqui está sua tendência mensal:"
        )
    else:
        await update.message.reply_text(
            "Ainda não tenho dados suficientes para gerar o gráfico. Registre algumas transações primeiro!"
        )
