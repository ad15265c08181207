# tests/test_installments.py
import datetime
import unittest

from financeapp.core.installments import (
    advance_installment, calculate_installment_status, installment_index_for_month, installment_month,
)


class TestInstallmentStatus(unittest.TestCase):
    def test_partially_paid_purchase(self):
        # R$ 1.200 em 12x com 3 parcelas pagas
        status = calculate_installment_status(
            {"type": "expense", "amount": 1200, "installments": 12, "installment_number": 3}
        )
        self.assertEqual(status.installment_value, 100)
        self.assertEqual(status.paid_installments, 3)
        self.assertEqual(status.remaining_installments, 9)
        self.assertEqual(status.remaining_value, 900)
        self.assertEqual(status.paid_value, 300)
        self.assertFalse(status.is_paid_off)
        self.assertEqual(status.label, "3/12")

    def test_status_holds_for_every_paid_count(self):
        for amount in (0, 0.01, 99.9, 1200, 12345.67):
            for total in range(1, 25):
                for paid in range(0, total + 1):
                    with self.subTest(amount=amount, total=total, paid=paid):
                        status = calculate_installment_status(
                            {"type": "expense", "amount": amount, "installments": total, "installment_number": paid}
                        )
                        self.assertAlmostEqual(status.installment_value, amount / total)
                        self.assertEqual(status.remaining_installments, total - paid)
                        self.assertAlmostEqual(status.remaining_value, status.installment_value * (total - paid))
                        self.assertEqual(status.is_paid_off, status.remaining_installments == 0)

    def test_paid_count_is_clamped(self):
        over = calculate_installment_status({"amount": 120, "installments": 12, "installment_number": 15})
        self.assertEqual(over.paid_installments, 12)
        self.assertEqual(over.remaining_value, 0)
        self.assertTrue(over.is_paid_off)

        under = calculate_installment_status({"amount": 120, "installments": 12, "installment_number": -2})
        self.assertEqual(under.paid_installments, 0)
        self.assertEqual(under.remaining_installments, 12)

    def test_missing_installment_number(self):
        installment_purchase = calculate_installment_status({"amount": 600, "installments": 6, "installment_number": None})
        self.assertEqual(installment_purchase.paid_installments, 0)
        self.assertEqual(installment_purchase.remaining_value, 600)

        single_payment = calculate_installment_status({"amount": 80, "installments": 1})
        self.assertEqual(single_payment.paid_installments, 1)
        self.assertTrue(single_payment.is_paid_off)
        self.assertEqual(single_payment.label, "À vista")

    def test_invalid_total_becomes_one(self):
        status = calculate_installment_status({"amount": 50, "installments": 0})
        self.assertEqual(status.total_installments, 1)
        self.assertEqual(status.installment_value, 50)

    def test_income_is_never_labelled_as_installments(self):
        status = calculate_installment_status({"type": "income", "amount": 300, "installments": 3, "installment_number": 1})
        self.assertEqual(status.label, "À vista")

    def test_values_add_up(self):
        status = calculate_installment_status({"amount": 100, "installments": 9, "installment_number": 4})
        self.assertAlmostEqual(status.paid_value + status.remaining_value, 100)
        self.assertEqual(status.paid_installments + status.remaining_installments, status.total_installments)


class TestInstallmentSchedule(unittest.TestCase):
    def test_advance_installment(self):
        self.assertEqual(advance_installment({"amount": 120, "installments": 12, "installment_number": 11}), 12)
        self.assertEqual(advance_installment({"amount": 120, "installments": 12, "installment_number": 12}), 12)
        self.assertEqual(advance_installment({"amount": 120, "installments": 12, "installment_number": None}), 1)

    def test_installment_month_crosses_year(self):
        self.assertEqual(installment_month("2025-11-20", 1), datetime.date(2025, 11, 1))
        self.assertEqual(installment_month("2025-11-20", 3), datetime.date(2026, 1, 1))

    def test_installment_month_rejects_zero(self):
        with self.assertRaises(ValueError):
            installment_month("2025-11-20", 0)

    def test_installment_index_for_month(self):
        transaction = {"amount": 300, "installments": 3, "transaction_date": "2025-11-20"}
        self.assertEqual(installment_index_for_month(transaction, "2025-11"), 1)
        self.assertEqual(installment_index_for_month(transaction, "2026-01"), 3)
        self.assertIsNone(installment_index_for_month(transaction, "2026-02"))
        self.assertIsNone(installment_index_for_month(transaction, "2025-10"))


if __name__ == '__main__':
    unittest.main()
