# financeapp/main.py
import asyncio
import logging

from flask import Flask, request, jsonify
from telegram import Update
from telegram.ext import Application

from financeapp import config
from financeapp.bot.bot_setup import setup_bot
from financeapp.core.db import get_supabase_client
from financeapp.web import create_app

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def register_webhook(flask_app: Flask, ptb_application: Application) -> None:
    """Registra a rota que recebe os updates do Telegram."""

    @flask_app.route(config.WEBHOOK_PATH, methods=['POST'])
    async def telegram_webhook():
        if not request.is_json:
            logger.error("Webhook recebeu uma requisição que não é JSON")
            return jsonify({"status": "error", "message": "Request must be JSON"}), 400

        try:
            update = Update.de_json(request.get_json(), ptb_application.bot)
            await ptb_application.process_update(update)
            return jsonify({"status": "ok"}), 200
        except Exception:
            logger.exception("Falha ao processar update do Telegram")
            return jsonify({"status": "error", "message": "Failed to process update"}), 500


def build_bot() -> Application:
    """Configura e inicializa o bot uma única vez, no carregamento do módulo."""
    ptb_application = setup_bot({
        "TELEGRAM_BOT_TOKEN": config.TELEGRAM_BOT_TOKEN,
        "SUPABASE_CLIENT": get_supabase_client(),
        "TELEGRAM_LINKED_USER_ID": config.TELEGRAM_LINKED_USER_ID,
        "TELEGRAM_LINKED_CHAT_ID": config.TELEGRAM_LINKED_CHAT_ID,
    })
    try:
        asyncio.run(ptb_application.initialize())
    except RuntimeError as e:
        if "cannot be called from a running event loop" not in str(e):
            raise
        logger.warning("Event loop já em execução, pulando initialize() do bot")
    return ptb_application


flask_app = create_app()

if config.TELEGRAM_BOT_TOKEN:
    register_webhook(flask_app, build_bot())
    logger.info("Webhook do Telegram disponível em %s", config.WEBHOOK_PATH)
else:
    logger.info("TELEGRAM_BOT_TOKEN não definido: bot desativado")

# Gunicorn: financeapp.main:wsgi_app
wsgi_app = flask_app


if __name__ == "__main__":
    flask_app.run(debug=True)
