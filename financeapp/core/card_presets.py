# financeapp/core/card_presets.py
from typing import Dict, List, Union

# Cores oficiais dos bancos e alguns gradientes "premium"
CARD_COLOR_PRESETS: List[Dict[str, str]] = [
    {
        "id": "nubank",
        "label": "Nubank Roxo",
        "bank": "Nubank",
        "gradient_start": "#5f17c5",
        "gradient_end": "#a854ff",
        "accent": "#f4c95d",
        "description": "Roxo oficial com brilho dourado",
    },
    {
        "id": "santander",
        "label": "Santander Vermelho",
        "bank": "Santander",
        "gradient_start": "#c7141a",
        "gradient_end": "#ff4b2b",
        "accent": "#ffe4d5",
    },
    {
        "id": "itau",
        "label": "Itaú Laranja",
        "bank": "Itaú",
        "gradient_start": "#f18a00",
        "gradient_end": "#ffb347",
        "accent": "#123d8d",
    },
    {
        "id": "bb",
        "label": "Banco do Brasil",
        "bank": "Banco do Brasil",
        "gradient_start": "#0052a3",
        "gradient_end": "#00a2ff",
        "accent": "#ffd200",
    },
    {
        "id": "caixa",
        "label": "Caixa Azul",
        "bank": "Caixa",
        "gradient_start": "#005aae",
        "gradient_end": "#0085ff",
        "accent": "#fdb812",
    },
    {
        "id": "bradesco",
        "label": "Bradesco Ruby",
        "bank": "Bradesco",
        "gradient_start": "#b00045",
        "gradient_end": "#ff3d7f",
        "accent": "#ffdce5",
    },
    {
        "id": "inter",
        "label": "Banco Inter",
        "bank": "Inter",
        "gradient_start": "#ff6f00",
        "gradient_end": "#ff944d",
        "accent": "#fff3e6",
    },
    {
        "id": "neon",
        "label": "Neon Ciano",
        "bank": "Neon",
        "gradient_start": "#00a4ff",
        "gradient_end": "#01f7ff",
        "accent": "#ffffff",
    },
    {
        "id": "custom-midnight",
        "label": "Midnight Wave",
        "gradient_start": "#1f1c2c",
        "gradient_end": "#928dab",
        "accent": "#c3aed6",
        "description": "Gradiente premium roxo",
    },
    {
        "id": "custom-carbon",
        "label": "Carbono Azul",
        "gradient_start": "#0f2027",
        "gradient_end": "#203a43",
        "accent": "#64b5f6",
    },
]

FALLBACK_PRESET = {
    "id": "default",
    "label": "Roxo Premium",
    "gradient_start": "#4c1d95",
    "gradient_end": "#7c3aed",
    "accent": "#facc15",
}

DEFAULT_PRESET = CARD_COLOR_PRESETS[0] if CARD_COLOR_PRESETS else FALLBACK_PRESET


def get_preset_by_id(preset_id: str) -> Union[Dict[str, str], None]:
    return next((preset for preset in CARD_COLOR_PRESETS if preset["id"] == preset_id), None)


def hex_to_rgb(hex_color: Union[str, None]) -> Dict[str, int]:
    """Ex: "#fff" -> {r: 255, g: 255, b: 255}. Cor inválida ou vazia vira branco."""
    white = {"r": 255, "g": 255, "b": 255}
    if not hex_color:
        return white
    normalized = hex_color.replace("#", "")
    try:
        value = int(normalized, 16)
    except ValueError:
        return white

    if len(normalized) == 3:
        r, g, b = (value >> 8) & 0xF, (value >> 4) & 0xF, value & 0xF
        return {"r": (r << 4) | r, "g": (g << 4) | g, "b": (b << 4) | b}
    return {"r": (value >> 16) & 255, "g": (value >> 8) & 255, "b": value & 255}


def rgba(hex_color: Union[str, None], alpha: float = 1) -> str:
    rgb = hex_to_rgb(hex_color)
    return f"rgba({rgb['r']}, {rgb['g']}, {rgb['b']}, {alpha})"


def card_theme(card: Dict) -> Dict[str, str]:
    """Cores usadas na pré-visualização do cartão, com os mesmos fallbacks do cadastro."""
    start = card.get("card_gradient_start") or "#5b21b6"
    end = card.get("card_gradient_end") or "#7c3aed"
    accent = card.get("card_color") or end
    return {
        "gradient": f"linear-gradient(135deg, {start}, {end})",
        "glow": rgba(accent, 0.55),
        "accent": accent,
    }
