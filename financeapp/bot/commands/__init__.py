# financeapp/bot/commands/__init__.py

from .utils import start_command, help_command
from .resumo import resumo_command, parcelas_command
from .fatura import fatura_command
from .grafico import grafico_command
