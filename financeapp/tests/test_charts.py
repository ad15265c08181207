# tests/test_charts.py
import unittest

from financeapp.core import charts

PNG_SIGNATURE = b'\x89PNG'


class TestCharts(unittest.TestCase):
    def test_monthly_trend_chart(self):
        trend = [
            {"name": "06/2025", "despesas": 1200.0, "receitas": 5000.0},
            {"name": "07/2025", "despesas": 800.0, "receitas": 0.0},
        ]
        chart_buffer = charts.generate_monthly_trend_chart(trend)
        self.assertIsNotNone(chart_buffer)
        self.assertEqual(chart_buffer.read(4), PNG_SIGNATURE)

    def test_monthly_trend_chart_without_data(self):
        self.assertIsNone(charts.generate_monthly_trend_chart([]))

    def test_category_pie_chart(self):
        breakdown = [
            {"name": "Alimentação", "icon": "🍔", "color": "#ef4444", "value": 1500.0, "percentage": 75.0},
            {"name": "Sem categoria", "icon": "•", "color": "#6b7280", "value": 500.0, "percentage": 25.0},
        ]
        chart_buffer = charts.generate_category_pie_chart(breakdown)
        self.assertEqual(chart_buffer.read(4), PNG_SIGNATURE)

    def test_category_pie_chart_without_data(self):
        self.assertIsNone(charts.generate_category_pie_chart([]))
        self.assertIsNone(charts.generate_category_pie_chart(
            [{"name": "Outros", "color": "#6b7280", "value": 0.0}]
        ))


if __name__ == '__main__':
    unittest.main()
