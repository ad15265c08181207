# financeapp/bot/bot_setup.py
import logging

from telegram.ext import Application, CommandHandler, filters

from financeapp.bot.commands import (
    start_command, help_command, resumo_command, parcelas_command,
    fatura_command, grafico_command
)

logger = logging.getLogger(__name__)


def linked_chat_filter(chat_id) -> filters.Chat:
    """Filtro que só deixa passar o chat vinculado. Sem chat configurado, nenhum chat passa."""
    if chat_id in (None, ""):
        return filters.Chat(chat_id=[])
    return filters.Chat(chat_id=int(chat_id))


def setup_bot(config: dict) -> Application:
    """
    Configura a aplicação do bot do Telegram (comandos de consulta).
    Retorna o objeto Application configurado, pronto para receber updates pelo webhook.
    """
    application = Application.builder().token(config["TELEGRAM_BOT_TOKEN"]).build()

    # Cliente Supabase e usuário vinculado ficam no bot_data para os comandos
    application.bot_data['supabase_client'] = config["SUPABASE_CLIENT"]
    application.bot_data['user_id'] = config.get("TELEGRAM_LINKED_USER_ID")

    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))

    # Comandos que leem ou gravam dados do usuário respondem apenas ao chat vinculado
    chat_filter = linked_chat_filter(config.get("TELEGRAM_LINKED_CHAT_ID"))
    application.add_handler(CommandHandler("resumo", resumo_command, filters=chat_filter))
    application.add_handler(CommandHandler("parcelas", parcelas_command, filters=chat_filter))
    application.add_handler(CommandHandler("fatura", fatura_command, filters=chat_filter))
    application.add_handler(CommandHandler("grafico", grafico_command, filters=chat_filter))

    if not application.bot_data['user_id']:
        logger.warning("TELEGRAM_LINKED_USER_ID não definido: os comandos de consulta ficarão indisponíveis")
    if not config.get("TELEGRAM_LINKED_CHAT_ID"):
        logger.warning("TELEGRAM_LINKED_CHAT_ID não definido: nenhum chat poderá usar os comandos de consulta")
    logger.info("Bot Telegram configurado para webhooks")
    return application
