# tests/test_invoices.py
import datetime
import unittest

from financeapp.core import invoices

CARD_ID = "c1"


def _transactions():
    return [
        {"id": "t1", "type": "expense", "amount": 300, "installments": 3, "installment_number": 1,
         "transaction_date": "2025-06-10", "description": "Fone", "source_type": "card", "source_id": CARD_ID},
        {"id": "t2", "type": "expense", "amount": 50, "installments": 1, "installment_number": 1,
         "transaction_date": "2025-07-05", "description": "Cinema", "source_type": "card", "source_id": CARD_ID},
        {"id": "t3", "type": "expense", "amount": 100, "installments": 1,
         "transaction_date": "2025-07-01", "source_type": "card", "source_id": "c2"},
        {"id": "t4", "type": "income", "amount": 999, "installments": 1,
         "transaction_date": "2025-07-01", "source_type": "card", "source_id": CARD_ID},
    ]


class TestInvoiceItems(unittest.TestCase):
    def test_items_for_month(self):
        items = invoices.invoice_items(_transactions(), CARD_ID, "2025-07")
        self.assertEqual([item["transaction_id"] for item in items], ["t1", "t2"])
        self.assertEqual(items[0]["installment_index"], 2)
        self.assertEqual(items[0]["installment_value"], 100)
        self.assertEqual(items[0]["label"], "2/3")
        self.assertEqual(items[1]["label"], "À vista")
        self.assertEqual(invoices.invoice_total(items), 150)

    def test_month_after_last_installment_is_empty(self):
        items = invoices.invoice_items(_transactions(), CARD_ID, "2025-09")
        self.assertEqual(items, [])
        self.assertEqual(invoices.invoice_total(items), 0)


class TestInvoiceStatus(unittest.TestCase):
    def test_status_boundaries(self):
        self.assertEqual(invoices.invoice_status(150, 0), invoices.STATUS_OPEN)
        self.assertEqual(invoices.invoice_status(150, 50), invoices.STATUS_PARTIAL)
        self.assertEqual(invoices.invoice_status(150, 150), invoices.STATUS_PAID)
        self.assertEqual(invoices.invoice_status(150, 200), invoices.STATUS_PAID)

    def test_empty_invoice_is_paid(self):
        self.assertEqual(invoices.invoice_status(0, 0), invoices.STATUS_PAID)


class TestBuildInvoice(unittest.TestCase):
    def test_keeps_previous_payments(self):
        invoice = invoices.build_invoice("u1", CARD_ID, "2025-07", _transactions(), existing={"paid_amount": "50"})
        self.assertEqual(invoice["month"], "2025-07-01")
        self.assertEqual(invoice["total_amount"], 150)
        self.assertEqual(invoice["paid_amount"], 50)
        self.assertEqual(invoice["status"], invoices.STATUS_PARTIAL)
        self.assertIsNone(invoice["paid_at"])

    def test_new_invoice_is_open(self):
        invoice = invoices.build_invoice("u1", CARD_ID, datetime.date(2025, 7, 15), _transactions())
        self.assertEqual(invoice["paid_amount"], 0)
        self.assertEqual(invoice["status"], invoices.STATUS_OPEN)


class TestApplyPayment(unittest.TestCase):
    def setUp(self):
        self.invoice = {"card_id": CARD_ID, "month": "2025-07-01", "total_amount": 150,
                        "paid_amount": 50, "status": invoices.STATUS_PARTIAL, "paid_at": None}

    def test_full_payment(self):
        paid_at = datetime.datetime(2025, 7, 20, 10, 0, tzinfo=datetime.timezone.utc)
        updated = invoices.apply_payment(self.invoice, 100, paid_at=paid_at)
        self.assertEqual(updated["paid_amount"], 150)
        self.assertEqual(updated["status"], invoices.STATUS_PAID)
        self.assertEqual(updated["paid_at"], paid_at.isoformat())
        # O dicionário original não é alterado
        self.assertEqual(self.invoice["paid_amount"], 50)

    def test_partial_payment(self):
        updated = invoices.apply_payment(self.invoice, 20)
        self.assertEqual(updated["paid_amount"], 70)
        self.assertEqual(updated["status"], invoices.STATUS_PARTIAL)
        self.assertIsNone(updated["paid_at"])

    def test_negative_payment(self):
        with self.assertRaises(ValueError):
            invoices.apply_payment(self.invoice, -10)


class TestInvoiceHelpers(unittest.TestCase):
    def test_installment_updates_for_paid_invoice(self):
        items = invoices.invoice_items(_transactions(), CARD_ID, "2025-07")
        self.assertEqual(invoices.installment_updates_for_paid_invoice(items), {"t1": 2})

    def test_due_date_clamped_to_month_end(self):
        self.assertEqual(invoices.due_date({"billing_due_day": 31}, "2025-02"), datetime.date(2025, 2, 28))
        self.assertEqual(invoices.due_date({"billing_due_day": 10}, "2025-07"), datetime.date(2025, 7, 10))
        self.assertIsNone(invoices.due_date({}, "2025-07"))

    def test_available_limit(self):
        self.assertEqual(invoices.available_limit({"credit_limit": 1000}, 250), 750)
        self.assertIsNone(invoices.available_limit({"credit_limit": None}, 250))

    def test_open_amount_for_card(self):
        # t1: 2 parcelas de 100 em aberto; t2 quitada; t3 é de outro cartão
        self.assertEqual(invoices.open_amount_for_card(_transactions(), CARD_ID), 200)


if __name__ == '__main__':
    unittest.main()
