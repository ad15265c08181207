# financeapp/utils/text_utils.py
import datetime
import math
import re
from typing import Union

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def format_currency(value: Union[float, int, str, None], decimals: int = 2) -> str:
    """Formata um valor no padrão brasileiro.
    Ex: 1234.5 -> "R$ 1.234,50"
    Ex: -80 -> "-R$ 80,00"
    """
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        number = 0.0

    sign = "-" if number < 0 else ""
    formatted = f"{abs(number):,.{decimals}f}"
    # Troca os separadores do padrão americano pelo brasileiro
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {formatted}"


def parse_decimal(value: Union[str, float, int, None]) -> Union[float, None]:
    """Converte texto digitado pelo usuário em float, aceitando vírgula decimal.
    Ex: "1.234,56" -> 1234.56
    Ex: "18,50" -> 18.5
    Ex: "99.90" -> 99.9
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    text = value.strip().replace("R$", "").replace(" ", "")
    if not text:
        return None
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        number = float(text)
    except ValueError:
        return None
    # "nan" e "inf" são aceitos por float()
    return number if math.isfinite(number) else None


def to_date(value: Union[str, datetime.date, datetime.datetime, None]) -> Union[datetime.date, None]:
    """Aceita date, datetime ou string ISO (com ou sem horário)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value)[:10])


def format_date(value, short: bool = False) -> str:
    """Data no formato dd/mm/aaaa, ou dd/mm quando short=True."""
    parsed = to_date(value)
    if parsed is None:
        return "—"
    return parsed.strftime("%d/%m") if short else parsed.strftime("%d/%m/%Y")


def parse_month(value: Union[str, datetime.date]) -> datetime.date:
    """Normaliza um mês ('AAAA-MM', 'AAAA-MM-DD' ou date) para o primeiro dia."""
    if isinstance(value, datetime.date):
        return value.replace(day=1)

    text = str(value).strip()
    match = MONTH_PATTERN.match(text)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Mês inválido: {value}")
        return datetime.date(year, month, 1)
    try:
        return datetime.date.fromisoformat(text[:10]).replace(day=1)
    except ValueError:
        raise ValueError(f"Mês inválido: {value}")


def month_key(value: Union[str, datetime.date]) -> str:
    """Ex: date(2025, 7, 14) -> '2025-07'"""
    return parse_month(value).strftime("%Y-%m")


def format_month(value: Union[str, datetime.date]) -> str:
    """Ex: '2025-07-01' -> '07/2025'"""
    return parse_month(value).strftime("%m/%Y")


def mask_short(last4: Union[str, None]) -> str:
    """Ex: '1234' -> '•••• 1234'"""
    return f"•••• {last4 or '0000'}"


def format_expiration(month: Union[int, None], year: Union[int, None]) -> str:
    """Ex: (5, 2028) -> '05/28'. Sem mês ou ano -> '--/--'."""
    if not month or not year:
        return "--/--"
    return f"{int(month):02d}/{str(year)[-2:]}"


def only_digits(value: Union[str, None]) -> str:
    return re.sub(r"\D", "", value or "")
