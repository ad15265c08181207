# tests/test_dashboard.py
import datetime
import unittest

from financeapp.core import dashboard


def _transactions():
    return [
        {"id": "t1", "type": "income", "amount": 5000, "transaction_date": "2025-06-05", "category_id": "cat-sal"},
        {"id": "t2", "type": "expense", "amount": 1200, "installments": 12, "installment_number": 3,
         "transaction_date": "2025-06-10", "category_id": "cat-food"},
        {"id": "t3", "type": "expense", "amount": 300, "installments": 1, "installment_number": 1,
         "transaction_date": "2025-07-02", "category_id": "cat-food"},
        {"id": "t4", "type": "expense", "amount": "500.00", "transaction_date": "2025-07-15", "category_id": None},
    ]


CATEGORIES = [
    {"id": "cat-food", "name": "Alimentação", "icon": "🍔", "color": "#ef4444"},
    {"id": "cat-sal", "name": "Salário", "icon": "💼", "color": "#22c55e", "type": "income"},
]


class TestDashboard(unittest.TestCase):
    def test_summarize(self):
        summary = dashboard.summarize(_transactions())
        self.assertEqual(summary["total_income"], 5000)
        self.assertEqual(summary["total_expense"], 2000)
        self.assertEqual(summary["balance"], 3000)
        self.assertEqual(summary["open_installments"], 1)
        self.assertEqual(summary["pending_value"], 900)

    def test_summarize_empty(self):
        self.assertEqual(dashboard.summarize([])["balance"], 0)

    def test_monthly_trend(self):
        self.assertEqual(dashboard.monthly_trend(_transactions()), [
            {"name": "06/2025", "despesas": 1200.0, "receitas": 5000.0},
            {"name": "07/2025", "despesas": 800.0, "receitas": 0.0},
        ])
        self.assertEqual(dashboard.monthly_trend([]), [])

    def test_category_breakdown(self):
        breakdown = dashboard.category_breakdown(_transactions(), CATEGORIES)
        self.assertEqual(len(breakdown), 2)
        self.assertEqual(breakdown[0]["name"], "Alimentação")
        self.assertEqual(breakdown[0]["value"], 1500)
        self.assertEqual(breakdown[0]["percentage"], 75.0)
        self.assertEqual(breakdown[1]["name"], "Sem categoria")
        self.assertEqual(breakdown[1]["percentage"], 25.0)

    def test_category_breakdown_without_expenses(self):
        income_only = [t for t in _transactions() if t["type"] == "income"]
        self.assertEqual(dashboard.category_breakdown(income_only, CATEGORIES), [])

    def test_recent_transactions(self):
        recent = dashboard.recent_transactions(_transactions(), limit=2)
        self.assertEqual([t["id"] for t in recent], ["t4", "t3"])

    def test_installment_rows(self):
        rows = {row["transaction"]["id"]: row for row in dashboard.installment_rows(_transactions())}
        self.assertTrue(rows["t2"]["show_remaining"])
        self.assertEqual(rows["t2"]["status"].remaining_value, 900)
        self.assertEqual(rows["t2"]["next_month"], datetime.date(2025, 9, 1))
        self.assertIsNone(rows["t3"]["next_month"])
        self.assertFalse(rows["t1"]["show_remaining"])
        self.assertFalse(rows["t1"]["is_expense"])
        self.assertFalse(rows["t3"]["show_remaining"])
        self.assertEqual(rows["t4"]["category"]["name"], "Sem categoria")


if __name__ == '__main__':
    unittest.main()
