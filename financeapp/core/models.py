# financeapp/core/models.py
from typing import Optional
from datetime import date, datetime

from pydantic import BaseModel

# Linhas do Supabase lidas de forma tipada. Colunas numéricas podem chegar como
# texto e são convertidas aqui.


class CardInvoice(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    card_id: str
    month: date
    total_amount: float = 0.0
    paid_amount: float = 0.0
    status: str = "open"  # open | partial | paid
    paid_at: Optional[datetime] = None


class Profile(BaseModel):
    id: str
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
    profile_photo: Optional[str] = None
