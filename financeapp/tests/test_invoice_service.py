# tests/test_invoice_service.py
import datetime
import unittest
from unittest.mock import MagicMock, patch

from financeapp.core import invoice_service
from financeapp.core.invoices import STATUS_OPEN, STATUS_PAID, STATUS_PARTIAL

CARD = {"id": "c1", "card_nickname": "Nubank", "billing_due_day": 10}

TRANSACTIONS = [
    {"id": "t1", "type": "expense", "amount": 300, "installments": 3, "installment_number": 1,
     "transaction_date": "2025-06-10", "source_type": "card", "source_id": "c1"},
    {"id": "t2", "type": "expense", "amount": 50, "installments": 1, "installment_number": 1,
     "transaction_date": "2025-07-05", "source_type": "card", "source_id": "c1"},
]


class TestInvoiceService(unittest.TestCase):
    def setUp(self):
        patcher = patch('financeapp.core.invoice_service.db')
        self.mock_db = patcher.start()
        self.addCleanup(patcher.stop)

        self.client = MagicMock()
        self.mock_db.get_card_transactions.return_value = TRANSACTIONS
        self.mock_db.get_invoice.return_value = None
        # Simula o Supabase devolvendo a linha gravada
        self.mock_db.upsert_invoice.side_effect = lambda client, row: {**row, "id": "inv1"}
        self.mock_db.update_transaction.return_value = True

    def test_reconcile_invoice(self):
        result = invoice_service.reconcile_invoice(self.client, "u1", CARD, "2025-07")

        self.assertEqual(result["invoice"]["total_amount"], 150)
        self.assertEqual(result["invoice"]["status"], STATUS_OPEN)
        self.assertEqual(result["invoice"]["month"], "2025-07-01")
        self.assertEqual(len(result["items"]), 2)
        self.assertEqual(result["due_date"], datetime.date(2025, 7, 10))
        self.mock_db.get_card_transactions.assert_called_once_with(self.client, "u1", "c1", strict=True)

        saved_row = self.mock_db.upsert_invoice.call_args.args[1]
        self.assertEqual(saved_row["card_id"], "c1")
        self.assertEqual(saved_row["user_id"], "u1")

    def test_reconcile_keeps_paid_amount(self):
        self.mock_db.get_invoice.return_value = {"id": "inv1", "card_id": "c1", "month": "2025-07-01",
                                                 "total_amount": 150, "paid_amount": 100, "status": STATUS_PARTIAL}
        result = invoice_service.reconcile_invoice(self.client, "u1", CARD, "2025-07")
        self.assertEqual(result["invoice"]["paid_amount"], 100)
        self.assertEqual(result["invoice"]["status"], STATUS_PARTIAL)

    def test_reconcile_save_error(self):
        self.mock_db.upsert_invoice.side_effect = None
        self.mock_db.upsert_invoice.return_value = None
        self.assertIsNone(invoice_service.reconcile_invoice(self.client, "u1", CARD, "2025-07"))

    def test_reconcile_invoice_read_error_does_not_save(self):
        self.mock_db.get_invoice.side_effect = Exception("timeout")
        self.assertIsNone(invoice_service.reconcile_invoice(self.client, "u1", CARD, "2025-07"))
        self.mock_db.upsert_invoice.assert_not_called()

    def test_reconcile_transactions_read_error_does_not_save(self):
        self.mock_db.get_card_transactions.side_effect = Exception("timeout")
        self.assertIsNone(invoice_service.reconcile_invoice(self.client, "u1", CARD, "2025-07"))
        self.mock_db.upsert_invoice.assert_not_called()

    def test_pay_invoice_read_error(self):
        self.mock_db.get_invoice.side_effect = Exception("timeout")
        self.assertIsNone(invoice_service.pay_invoice(self.client, "u1", CARD, "2025-07", 150))
        self.mock_db.upsert_invoice.assert_not_called()
        self.mock_db.update_transaction.assert_not_called()

    def test_pay_invoice_in_full_advances_installments(self):
        result = invoice_service.pay_invoice(self.client, "u1", CARD, "2025-07", 150)

        self.assertEqual(result["invoice"]["status"], STATUS_PAID)
        self.assertIsNotNone(result["invoice"]["paid_at"])
        # Só a compra parcelada muda: a parcela 2/3 passa a contar como paga
        self.mock_db.update_transaction.assert_called_once_with(self.client, "t1", {"installment_number": 2})

    def test_partial_payment_keeps_installments(self):
        result = invoice_service.pay_invoice(self.client, "u1", CARD, "2025-07", 100)

        self.assertEqual(result["invoice"]["status"], STATUS_PARTIAL)
        self.assertEqual(result["invoice"]["paid_amount"], 100)
        self.mock_db.update_transaction.assert_not_called()

    def test_pay_invoice_save_error(self):
        self.mock_db.upsert_invoice.side_effect = [{"card_id": "c1", "month": "2025-07-01", "total_amount": 150}, None]
        self.assertIsNone(invoice_service.pay_invoice(self.client, "u1", CARD, "2025-07", 150))
        self.mock_db.update_transaction.assert_not_called()

    def test_pay_invoice_negative_amount(self):
        with self.assertRaises(ValueError):
            invoice_service.pay_invoice(self.client, "u1", CARD, "2025-07", -1)


if __name__ == '__main__':
    unittest.main()
