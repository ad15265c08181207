# financeapp/core/categories.py
import re
import unicodedata
from typing import Any, Dict, List, Union

FALLBACK_COLOR = "#6b7280"

DEFAULT_EXPENSE_CATEGORIES = [
    {"name": "Alimentação", "icon": "🍔", "color": "#EF4444", "type": "expense"},
    {"name": "Transporte", "icon": "🚗", "color": "#F59E0B", "type": "expense"},
    {"name": "Moradia", "icon": "🏠", "color": "#8B5CF6", "type": "expense"},
    {"name": "Saúde", "icon": "💊", "color": "#EC4899", "type": "expense"},
    {"name": "Educação", "icon": "📚", "color": "#3B82F6", "type": "expense"},
    {"name": "Lazer", "icon": "🎮", "color": "#10B981", "type": "expense"},
    {"name": "Compras", "icon": "🛍️", "color": "#F97316", "type": "expense"},
    {"name": "Outros", "icon": "📦", "color": "#6B7280", "type": "expense"},
]

DEFAULT_INCOME_CATEGORIES = [
    {"name": "Salário", "icon": "💼", "color": "#22c55e", "type": "income"},
    {"name": "Investimento", "icon": "📈", "color": "#0ea5e9", "type": "income"},
    {"name": "Outro", "icon": "💡", "color": "#a855f7", "type": "income"},
]

# Nome canônico das categorias padrão, indexado pela chave normalizada
DEFAULT_CATEGORY_MAP = {
    "alimentacao": {"name": "Alimentação", "icon": "🍔", "color": "#ef4444"},
    "transporte": {"name": "Transporte", "icon": "🚗", "color": "#f59e0b"},
    "moradia": {"name": "Moradia", "icon": "🏠", "color": "#8b5cf6"},
    "saude": {"name": "Saúde", "icon": "💊", "color": "#ec4899"},
    "educacao": {"name": "Educação", "icon": "📚", "color": "#3b82f6"},
    "lazer": {"name": "Lazer", "icon": "🎮", "color": "#10b981"},
    "compras": {"name": "Compras", "icon": "🛍️", "color": "#f97316"},
    "outros": {"name": "Outros", "icon": "📦", "color": "#6b7280"},
    "salario": {"name": "Salário", "icon": "💼", "color": "#0ea5e9"},
    "investimento": {"name": "Investimento", "icon": "📈", "color": "#22c55e"},
}

# Chaves que aparecem quando os acentos foram perdidos na gravação
CATEGORY_ALIASES = {
    "alimentao": "alimentacao",
    "alimentacaoo": "alimentacao",
    "sade": "saude",
    "educao": "educacao",
    "salrio": "salario",
}

MOJIBAKE_MARKERS = re.compile("[ÃÂðŸ�]")


def normalize(value: str) -> str:
    """Ex: "Alimentação" -> "alimentacao"; "Saúde!" -> "saude" """
    decomposed = unicodedata.normalize("NFD", value)
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    without_marks = without_marks.replace("�", "")
    return re.sub(r"[^a-zA-Z0-9]", "", without_marks).lower().strip()


def sanitize_unknown(value: str) -> str:
    return value.replace("�", "").replace("??", "").strip()


def needs_fix(value: Union[str, None]) -> bool:
    return bool(value) and (bool(MOJIBAKE_MARKERS.search(value)) or "??" in value)


def decode_mojibake(value: str) -> str:
    """
    Desfaz texto UTF-8 que foi lido como Latin-1/CP1252.
    Ex: "AlimentaÃ§Ã£o" -> "Alimentação"
    Sequências que não formam UTF-8 válido são descartadas.
    """
    try:
        raw = value.encode("cp1252")
    except UnicodeEncodeError:
        # Caracteres fora do CP1252: usa só o byte baixo de cada um
        raw = bytes(ord(ch) & 0xFF for ch in value)
    return sanitize_unknown(raw.decode("utf-8", errors="replace"))


def get_category_display(category: Union[Dict[str, Any], None]) -> Dict[str, str]:
    """Nome, ícone e cor usados para exibir uma categoria, corrigindo textos corrompidos."""
    if not category:
        return {"name": "Sem categoria", "icon": "•", "color": FALLBACK_COLOR}

    raw_name = category.get("name") or "Categoria"
    cleaned_name = decode_mojibake(raw_name) if needs_fix(raw_name) else raw_name
    base_key = normalize(cleaned_name)
    normalized_key = CATEGORY_ALIASES.get(base_key, base_key)

    if category.get("is_default") and normalized_key in DEFAULT_CATEGORY_MAP:
        return dict(DEFAULT_CATEGORY_MAP[normalized_key])

    raw_icon = category.get("icon") or ""
    cleaned_icon = decode_mojibake(raw_icon) if needs_fix(raw_icon) else raw_icon

    return {
        "name": cleaned_name.strip() or "Categoria",
        "icon": cleaned_icon.strip() or "•",
        "color": category.get("color") or FALLBACK_COLOR,
    }


def default_categories_for(user_id: str, category_type: str) -> List[Dict[str, Any]]:
    """Linhas prontas para inserir as categorias padrão de um usuário."""
    base = DEFAULT_EXPENSE_CATEGORIES if category_type == "expense" else DEFAULT_INCOME_CATEGORIES
    return [{**cat, "user_id": user_id, "is_default": True} for cat in base]
