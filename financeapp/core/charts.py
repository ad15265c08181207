# financeapp/core/charts.py
import io
from typing import Any, Dict, List, Union

import matplotlib
matplotlib.use('Agg')  # Sem janela: os gráficos são servidos como PNG
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from financeapp.utils.text_utils import format_currency

# Configurações globais para os gráficos (cores, fontes, etc.)
plt.style.use('seaborn-v0_8-darkgrid')
plt.rcParams['font.family'] = 'sans-serif'
plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14
plt.rcParams['xtick.labelsize'] = 10
plt.rcParams['ytick.labelsize'] = 10
plt.rcParams['legend.fontsize'] = 10

COLORS = {
    'Receitas': '#22c55e',
    'Despesas': '#ef4444',
}


def _currency_tick(value: float, _position: int) -> str:
    return format_currency(value, decimals=0)


def _to_png(fig) -> io.BytesIO:
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150)
    buf.seek(0)
    plt.close(fig)
    return buf


def generate_monthly_trend_chart(trend: List[Dict[str, Any]]) -> Union[io.BytesIO, None]:
    """Gráfico de barras com despesas e receitas por mês (Tendência Mensal)."""
    if not trend:
        return None

    labels = [point['name'] for point in trend]
    despesas = [point['despesas'] for point in trend]
    receitas = [point['receitas'] for point in trend]
    positions = range(len(labels))
    width = 0.38

    fig, ax = plt.subplots(figsize=(10, 5))
    bars_expense = ax.bar([p - width / 2 for p in positions], despesas, width,
                          label='Despesas', color=COLORS['Despesas'])
    bars_income = ax.bar([p + width / 2 for p in positions], receitas, width,
                         label='Receitas', color=COLORS['Receitas'])

    ax.set_title('Tendência Mensal', fontsize=16, fontweight='bold')
    ax.set_xticks(list(positions))
    ax.set_xticklabels(labels, rotation=45, ha='right')
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(_currency_tick))
    ax.grid(axis='y', linestyle='--', alpha=0.7)
    ax.legend()

    for bars in (bars_expense, bars_income):
        ax.bar_label(bars, labels=[format_currency(bar.get_height(), decimals=0) for bar in bars],
                     fontsize=8, padding=3)

    fig.tight_layout()
    return _to_png(fig)


def generate_category_pie_chart(breakdown: List[Dict[str, Any]]) -> Union[io.BytesIO, None]:
    """Gráfico de pizza dos gastos por categoria, com a porcentagem na legenda."""
    values = [item['value'] for item in breakdown]
    if not breakdown or sum(values) <= 0:
        return None

    total = sum(values)
    colors = [item['color'] for item in breakdown]
    labels = [f"{item['name']} ({item['value'] / total * 100:.0f}%)" for item in breakdown]

    fig, ax = plt.subplots(figsize=(8, 6))
    wedges, _texts = ax.pie(values, colors=colors, startangle=90,
                            wedgeprops={'linewidth': 1, 'edgecolor': 'white'})
    ax.set_title('Gastos por Categoria', fontsize=16, fontweight='bold')
    ax.axis('equal')
    ax.legend(wedges, labels, loc='center left', bbox_to_anchor=(1, 0, 0.5, 1))

    fig.tight_layout()
    return _to_png(fig)
