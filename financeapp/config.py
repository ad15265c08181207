# financeapp/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Configurações do Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Configurações da aplicação web
FLASK_SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-secret-key")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configurações do Telegram (opcional)
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
# Usuário do Supabase cujos dados o bot responde
TELEGRAM_LINKED_USER_ID = os.getenv("TELEGRAM_LINKED_USER_ID")
# Único chat do Telegram autorizado a consultar esses dados
TELEGRAM_LINKED_CHAT_ID = os.getenv("TELEGRAM_LINKED_CHAT_ID")
WEBHOOK_PATH = "/webhook"
