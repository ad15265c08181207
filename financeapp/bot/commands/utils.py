from typing import Union

from telegram import Update
from telegram.ext import ContextTypes


def linked_user_id(context: ContextTypes.DEFAULT_TYPE) -> Union[str, None]:
    """Usuário do Supabase cujos dados o bot consulta."""
    return context.bot_data.get('user_id')


async def reply_not_linked(update: Update) -> None:
    await update.message.reply_text(
        "Nenhum usuário vinculado ao bot. Defina `TELEGRAM_LINKED_USER_ID` no `.env`.",
        parse_mode='Markdown'
    )


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /start é emitido."""
    await update.message.reply_text(
        "Olá! Sou o bot do FinanceApp. Consulte suas finanças por aqui:\n\n"
        "- `/resumo` para ver receitas, despesas e saldo do mês.\n"
        "- `/parcelas` para ver as compras parceladas em aberto.\n"
        "- `/fatura [cartão] [AAAA-MM]` para ver a fatura de um cartão.\n"
        "- `/grafico` para receber o gráfico de tendência mensal.\n"
        "- `/help` para mais informações.",
        parse_mode='Markdown'
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /help é emitido."""
    await update.message.reply_text(
        "**Comandos:**\n"
        "- `/start`: Mensagem de boas-vindas.\n"
        "- `/help`: Mostra esta mensagem.\n"
        "- `/resumo`: Totais do mês atual (receitas, despesas, saldo e parcelas pendentes).\n"
        "- `/parcelas`: Lista as compras parceladas que ainda têm parcelas a pagar.\n"
        "- `/fatura [cartão] [AAAA-MM]`: Fatura do cartão no mês (ex: `/fatura Nubank 2025-07`). "
        "Sem o mês, mostra a fatura atual.\n"
        "- `/grafico`: Gráfico de receitas e despesas por mês.\n\n"
        "Os lançamentos são feitos pelo site.",
        parse_mode='Markdown'
    )
