# financeapp/core/schemas.py
"""
Validação dos formulários da aplicação.

Os formulários chegam como texto (request.form); cada schema converte e valida
os campos e devolve, via `to_row`, o dicionário pronto para gravar no Supabase.
"""
import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from financeapp.core.filters import parse_source
from financeapp.utils.text_utils import only_digits, parse_decimal

CARD_BRANDS = ("visa", "mastercard", "amex", "elo")

PAYMENT_METHOD_LABELS = {
    "debit": "Débito",
    "credit": "Crédito",
    "pix": "Pix",
    "cash": "Dinheiro",
}

FIELD_LABELS = {
    "amount": "Valor",
    "description": "Descrição",
    "transaction_date": "Data",
    "installments": "Parcelas",
    "card_nickname": "Nome do cartão",
    "card_number_last4": "Últimos 4 dígitos",
    "card_brand": "Bandeira",
    "credit_limit": "Limite",
    "expiration_month": "Mês de vencimento",
    "expiration_year": "Ano de vencimento",
    "billing_due_day": "Dia do vencimento",
    "bank_name": "Nome do banco",
    "cpf": "CPF",
}


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TransactionForm(BaseModel):
    type: Literal["expense", "income"] = "expense"
    amount: str
    description: str
    category_id: Optional[str] = None
    payment_method: Optional[Literal["debit", "credit", "pix", "cash"]] = "debit"
    source: Optional[str] = None
    transaction_date: Optional[datetime.date] = Field(default_factory=datetime.date.today)
    notes: Optional[str] = None
    is_installment: bool = False
    installments: int = 1

    @field_validator("category_id", "payment_method", "source", "notes", "transaction_date", mode="before")
    @classmethod
    def blank_fields(cls, value):
        return _blank_to_none(value)

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("Descrição deve ter no mínimo 3 caracteres")
        return value

    @field_validator("amount")
    @classmethod
    def amount_is_number(cls, value: str) -> str:
        number = parse_decimal(value)
        if number is None:
            raise ValueError("Valor é obrigatório")
        if number <= 0:
            raise ValueError("Valor deve ser maior que zero")
        return value

    @field_validator("installments", mode="before")
    @classmethod
    def installments_default(cls, value):
        value = _blank_to_none(value)
        return 1 if value is None else value

    @model_validator(mode="after")
    def default_date(self):
        if self.transaction_date is None:
            self.transaction_date = datetime.date.today()
        return self

    def to_row(self, user_id: str) -> Dict[str, Any]:
        is_income = self.type == "income"
        total_installments = max(1, self.installments) if (not is_income and self.is_installment) else 1
        source_type, source_id = parse_source(self.source)
        return {
            "user_id": user_id,
            "type": self.type,
            "amount": parse_decimal(self.amount),
            "description": self.description,
            "category_id": self.category_id,
            "payment_method": None if is_income else (self.payment_method or None),
            "source_type": source_type,
            "source_id": source_id,
            "transaction_date": self.transaction_date.isoformat(),
            "notes": self.notes,
            "installments": total_installments,
            "installment_number": 1,
        }


class CardForm(BaseModel):
    card_nickname: str
    card_brand: Literal["visa", "mastercard", "amex", "elo"] = "visa"
    card_number_last4: Optional[str] = None
    cardholder_name: Optional[str] = None
    card_gradient_start: Optional[str] = None
    card_gradient_end: Optional[str] = None
    card_color: Optional[str] = None
    credit_limit: Optional[float] = Field(default=None, ge=0)
    expiration_month: Optional[int] = Field(default=None, ge=1, le=12)
    expiration_year: Optional[int] = Field(default=None, ge=2024, le=2099)
    billing_due_day: Optional[int] = Field(default=None, ge=1, le=31)

    @field_validator("card_number_last4", "cardholder_name", "card_gradient_start", "card_gradient_end",
                     "card_color", "expiration_month", "expiration_year", "billing_due_day", mode="before")
    @classmethod
    def blank_fields(cls, value):
        return _blank_to_none(value)

    @field_validator("credit_limit", mode="before")
    @classmethod
    def parse_limit(cls, value):
        value = _blank_to_none(value)
        if isinstance(value, str):
            parsed = parse_decimal(value)
            if parsed is None:
                raise ValueError("Limite inválido")
            return parsed
        return value

    @field_validator("card_nickname")
    @classmethod
    def nickname_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Nome do cartão é obrigatório")
        return value

    @field_validator("card_number_last4")
    @classmethod
    def last4_digits(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return only_digits(value)[:4] or None

    @field_validator("cardholder_name")
    @classmethod
    def upper_holder(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().upper() if value else None

    def to_row(self, user_id: str) -> Dict[str, Any]:
        return {"user_id": user_id, **self.model_dump()}


class BankForm(BaseModel):
    bank_name: str
    bank_code: Optional[str] = None
    nickname: Optional[str] = None
    account_type: Optional[str] = None
    branch_number: Optional[str] = None
    account_number: Optional[str] = None

    @field_validator("bank_code", "nickname", "account_type", "branch_number", "account_number", mode="before")
    @classmethod
    def blank_fields(cls, value):
        return _blank_to_none(value)

    @field_validator("bank_name")
    @classmethod
    def name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Nome do banco é obrigatório")
        return value

    def to_row(self, user_id: str) -> Dict[str, Any]:
        return {"user_id": user_id, **self.model_dump()}


class ProfileForm(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    cpf: Optional[str] = None
    address_street: Optional[str] = None
    address_number: Optional[str] = None
    address_complement: Optional[str] = None
    address_neighborhood: Optional[str] = None
    address_city: Optional[str] = None
    address_state: Optional[str] = None
    address_zip: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_fields(cls, value):
        value = _blank_to_none(value)
        return value.strip() if isinstance(value, str) else value

    @field_validator("cpf")
    @classmethod
    def cpf_digits(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        digits = only_digits(value)
        if len(digits) != 11:
            raise ValueError("CPF deve ter 11 dígitos")
        return digits

    def to_row(self, user_id: str) -> Dict[str, Any]:
        return {
            "id": user_id,
            **self.model_dump(),
            "updated_at": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        }


class InvoicePaymentForm(BaseModel):
    amount: float = Field(gt=0, allow_inf_nan=False)

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value):
        if isinstance(value, str):
            parsed = parse_decimal(value)
            if parsed is None:
                raise ValueError("Valor é obrigatório")
            return parsed
        return value


def error_messages(error: ValidationError) -> List[str]:
    """Transforma os erros do pydantic em mensagens para o usuário."""
    messages = []
    for err in error.errors():
        field = str(err["loc"][0]) if err.get("loc") else ""
        label = FIELD_LABELS.get(field, field)
        message = err.get("msg", "Valor inválido").removeprefix("Value error, ")
        messages.append(f"{label}: {message}" if label else message)
    return messages
