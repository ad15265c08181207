# financeapp/core/card_wizard.py
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from financeapp.core.card_presets import DEFAULT_PRESET, get_preset_by_id
from financeapp.core.schemas import CardForm, error_messages
from financeapp.utils.text_utils import only_digits

TOTAL_STEPS = 6
NICKNAME_STEP = 4

STEP_TITLES = {
    1: "Número do Cartão (Opcional)",
    2: "Bandeira do Cartão",
    3: "Nome do Titular (Opcional)",
    4: "Nome do Cartão",
    5: "Informações do Cartão",
    6: "Tema do Cartão",
}

CARD_FIELDS = (
    "card_number_last4",
    "card_brand",
    "cardholder_name",
    "card_nickname",
    "card_gradient_start",
    "card_gradient_end",
    "card_color",
    "credit_limit",
    "expiration_month",
    "expiration_year",
    "billing_due_day",
)


def _initial_data() -> Dict[str, str]:
    return {
        "card_number_last4": "",
        "card_brand": "visa",
        "cardholder_name": "",
        "card_nickname": "",
        "card_gradient_start": DEFAULT_PRESET["gradient_start"],
        "card_gradient_end": DEFAULT_PRESET["gradient_end"],
        "card_color": DEFAULT_PRESET["accent"],
        "credit_limit": "",
        "expiration_month": "",
        "expiration_year": "",
        "billing_due_day": "",
    }


class CardWizard:
    """
    Cadastro de cartão em 6 etapas lineares.

    O estado vive no formulário: cada requisição reconstrói o assistente com
    `from_form`, aplica a ação (próximo, voltar, preset) e devolve os campos em
    inputs ocultos. Nada é gravado até `submit()`.
    """

    def __init__(self, step: int = 1, data: Optional[Dict[str, str]] = None,
                 preset_id: Optional[str] = None):
        self.step = min(max(step, 1), TOTAL_STEPS)
        self.data = _initial_data()
        if data:
            self.update(**data)
        self.preset_id = preset_id or DEFAULT_PRESET["id"]
        self.errors = []

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "CardWizard":
        try:
            step = int(form.get("step") or 1)
        except ValueError:
            step = 1
        data = {field: form.get(field) for field in CARD_FIELDS if form.get(field) is not None}
        return cls(step=step, data=data, preset_id=form.get("preset_id"))

    @property
    def progress(self) -> float:
        return self.step / TOTAL_STEPS * 100

    @property
    def title(self) -> str:
        return STEP_TITLES[self.step]

    @property
    def is_last_step(self) -> bool:
        return self.step == TOTAL_STEPS

    def update(self, **fields: Any) -> None:
        for field, value in fields.items():
            if field not in self.data:
                continue
            value = "" if value is None else str(value)
            if field == "card_number_last4":
                value = only_digits(value)[:4]
            elif field == "cardholder_name":
                value = value.upper()
            self.data[field] = value

    def next_step(self) -> bool:
        if self.step == NICKNAME_STEP and not self.data["card_nickname"].strip():
            self.errors.append("Nome do cartão é obrigatório")
            return False
        if self.step < TOTAL_STEPS:
            self.step += 1
        return True

    def prev_step(self) -> bool:
        if self.step > 1:
            self.step -= 1
            return True
        return False

    def apply_preset(self, preset_id: str) -> bool:
        preset = get_preset_by_id(preset_id)
        if preset is None:
            return False
        self.preset_id = preset_id
        self.update(
            card_gradient_start=preset["gradient_start"],
            card_gradient_end=preset["gradient_end"],
            card_color=preset["accent"],
        )
        return True

    def submit(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Valida tudo e devolve a linha para `cards`, ou None com `errors` preenchido."""
        if not self.data["card_nickname"].strip():
            self.errors.append("Nome do cartão é obrigatório")
            return None
        try:
            form = CardForm(**self.data)
        except ValidationError as e:
            self.errors.extend(error_messages(e))
            return None
        return form.to_row(user_id)

    def reset(self) -> None:
        self.step = 1
        self.data = _initial_data()
        self.preset_id = DEFAULT_PRESET["id"]
        self.errors = []

    def preview(self) -> Dict[str, Any]:
        """Dados para desenhar o cartão enquanto o usuário preenche."""
        return {
            **self.data,
            "card_nickname": self.data["card_nickname"] or "Meu Cartão",
        }
