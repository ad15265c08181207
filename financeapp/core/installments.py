# financeapp/core/installments.py
import datetime
from typing import Any, Dict, Union

from pydantic import BaseModel

from financeapp.utils.text_utils import parse_month, to_date


class InstallmentStatus(BaseModel):
    total_installments: int
    paid_installments: int
    remaining_installments: int
    installment_value: float
    remaining_value: float
    paid_value: float
    is_paid_off: bool
    label: str


def _total_installments(transaction: Dict[str, Any]) -> int:
    return max(int(transaction.get("installments") or 1), 1)


def calculate_installment_status(transaction: Dict[str, Any]) -> InstallmentStatus:
    """
    Calcula a situação das parcelas de uma transação.

    `installment_number` é a quantidade de parcelas já pagas. Quando não vem
    preenchido, uma compra parcelada conta como nenhuma parcela paga e uma
    compra à vista conta como quitada. O valor é sempre limitado a [0, total].
    """
    total_installments = _total_installments(transaction)
    paid_raw = transaction.get("installment_number")
    if paid_raw is None:
        paid_raw = 0 if total_installments > 1 else total_installments
    paid_installments = min(max(int(paid_raw), 0), total_installments)

    amount = float(transaction.get("amount") or 0)
    installment_value = amount / total_installments if total_installments > 0 else amount
    remaining_installments = max(total_installments - paid_installments, 0)

    is_expense = transaction.get("type", "expense") == "expense"
    if is_expense and total_installments > 1:
        label = f"{paid_installments}/{total_installments}"
    else:
        label = "À vista"

    return InstallmentStatus(
        total_installments=total_installments,
        paid_installments=paid_installments,
        remaining_installments=remaining_installments,
        installment_value=installment_value,
        remaining_value=installment_value * remaining_installments,
        paid_value=installment_value * paid_installments,
        is_paid_off=remaining_installments == 0,
        label=label,
    )


def advance_installment(transaction: Dict[str, Any], count: int = 1) -> int:
    """Retorna o novo `installment_number` após pagar `count` parcelas."""
    status = calculate_installment_status(transaction)
    return min(max(status.paid_installments + count, 0), status.total_installments)


def installment_month(transaction_date: Union[str, datetime.date], index: int) -> datetime.date:
    """Mês (primeiro dia) em que a parcela `index` é cobrada. A parcela 1 cai no mês da compra."""
    if index < 1:
        raise ValueError("A parcela deve ser maior ou igual a 1")
    start = parse_month(to_date(transaction_date))
    months = start.year * 12 + (start.month - 1) + (index - 1)
    return datetime.date(months // 12, months % 12 + 1, 1)


def installment_index_for_month(transaction: Dict[str, Any], month: Union[str, datetime.date]) -> Union[int, None]:
    """Qual parcela da transação é cobrada em `month` (1-based), ou None."""
    start = parse_month(to_date(transaction["transaction_date"]))
    target = parse_month(month)
    index = (target.year - start.year) * 12 + (target.month - start.month) + 1
    if 1 <= index <= _total_installments(transaction):
        return index
    return None
