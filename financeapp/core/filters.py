# financeapp/core/filters.py
import calendar
import datetime
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel

DATE_RANGES = {
    "today": "Hoje",
    "week": "Esta Semana",
    "month": "Este Mês",
    "last30": "Últimos 30 Dias",
    "custom": "Personalizado",
}
DEFAULT_DATE_RANGE = "month"
SOURCE_TYPES = ("card", "bank")


class FilterState(BaseModel):
    date_range: str = DEFAULT_DATE_RANGE
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    category_id: Optional[str] = None
    source_id: Optional[str] = None
    source_type: Optional[str] = None

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "FilterState":
        """Lê os filtros da query string; valores inválidos voltam ao padrão."""
        date_range = args.get("date_range") or DEFAULT_DATE_RANGE
        if date_range not in DATE_RANGES:
            date_range = DEFAULT_DATE_RANGE

        category_id = args.get("category_id") or None
        if category_id == "all":
            category_id = None

        source_type, source_id = parse_source(args.get("source"))

        return cls(
            date_range=date_range,
            start_date=safe_date(args.get("start_date")) if date_range == "custom" else None,
            end_date=safe_date(args.get("end_date")) if date_range == "custom" else None,
            category_id=category_id,
            source_id=source_id,
            source_type=source_type,
        )

    def to_args(self) -> Dict[str, str]:
        args = {"date_range": self.date_range}
        if self.date_range == "custom":
            if self.start_date:
                args["start_date"] = self.start_date.isoformat()
            if self.end_date:
                args["end_date"] = self.end_date.isoformat()
        if self.category_id:
            args["category_id"] = self.category_id
        if self.source_id and self.source_type:
            args["source"] = f"{self.source_type}-{self.source_id}"
        return args

    @property
    def source_value(self) -> str:
        if self.source_id and self.source_type:
            return f"{self.source_type}-{self.source_id}"
        return "all"


def safe_date(value: Any) -> Optional[datetime.date]:
    """Data ISO vinda da query string, ou None se estiver vazia ou malformada."""
    if not value:
        return None
    try:
        return datetime.date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_source(value: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    "card-<id>" -> ("card", "<id>"); "all" ou vazio -> (None, None).
    O id é um UUID com hífens, então só o primeiro hífen separa o tipo.
    """
    if not value or value == "all" or "-" not in value:
        return None, None
    source_type, source_id = value.split("-", 1)
    if source_type not in SOURCE_TYPES or not source_id:
        return None, None
    return source_type, source_id


def current_month_range(today: Optional[datetime.date] = None) -> Tuple[datetime.date, datetime.date]:
    today = today or datetime.date.today()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def resolve_date_range(filters: FilterState,
                       today: Optional[datetime.date] = None) -> Tuple[Optional[datetime.date], Optional[datetime.date]]:
    """Converte o período escolhido em (data inicial, data final), ambas inclusivas."""
    today = today or datetime.date.today()
    if filters.date_range == "today":
        return today, today
    if filters.date_range == "week":
        # Semana começando no domingo
        days_since_sunday = (today.weekday() + 1) % 7
        return today - datetime.timedelta(days=days_since_sunday), today
    if filters.date_range == "last30":
        return today - datetime.timedelta(days=29), today
    if filters.date_range == "custom":
        return filters.start_date, filters.end_date
    return current_month_range(today)


def has_active_filters(filters: FilterState) -> bool:
    return bool(filters.category_id or filters.source_id or filters.date_range == "custom")


def source_options(cards: list, banks: list) -> list:
    """Opções do seletor Cartão/Banco: [(valor, rótulo)]."""
    options = [("all", "Todos")]
    options += [(f"card-{card['id']}", f"💳 {card.get('card_nickname')}") for card in cards]
    options += [(f"bank-{bank['id']}", f"🏦 {bank.get('bank_name')}") for bank in banks]
    return options


def source_label(transaction: Dict[str, Any], cards: list, banks: list) -> Union[str, None]:
    """Nome do cartão ou banco de uma transação, para a listagem."""
    source_id = transaction.get("source_id")
    if transaction.get("source_type") == "card":
        card = next((c for c in cards if c.get("id") == source_id), None)
        return f"💳 {card['card_nickname']}" if card else None
    if transaction.get("source_type") == "bank":
        bank = next((b for b in banks if b.get("id") == source_id), None)
        return f"🏦 {bank['bank_name']}" if bank else None
    return None
