# tests/test_text_utils.py
import datetime
import unittest

from financeapp.utils.text_utils import (
    format_currency, format_date, format_expiration, format_month, mask_short,
    month_key, only_digits, parse_decimal, parse_month, to_date,
)


class TestTextUtils(unittest.TestCase):
    def test_format_currency(self):
        self.assertEqual(format_currency(1234.5), "R$ 1.234,50")
        self.assertEqual(format_currency(0), "R$ 0,00")
        self.assertEqual(format_currency(-80), "-R$ 80,00")
        self.assertEqual(format_currency(1500000, decimals=0), "R$ 1.500.000")

    def test_format_currency_invalid_value(self):
        self.assertEqual(format_currency(None), "R$ 0,00")
        self.assertEqual(format_currency("abc"), "R$ 0,00")

    def test_parse_decimal(self):
        self.assertEqual(parse_decimal("1.234,56"), 1234.56)
        self.assertEqual(parse_decimal("18,50"), 18.5)
        self.assertEqual(parse_decimal("99.90"), 99.9)
        self.assertEqual(parse_decimal("R$ 10"), 10.0)
        self.assertEqual(parse_decimal(7), 7.0)

    def test_parse_decimal_invalid(self):
        self.assertIsNone(parse_decimal(""))
        self.assertIsNone(parse_decimal(None))
        self.assertIsNone(parse_decimal("dez reais"))
        self.assertIsNone(parse_decimal("nan"))
        self.assertIsNone(parse_decimal("inf"))
        self.assertIsNone(parse_decimal(float("-inf")))

    def test_dates(self):
        self.assertEqual(to_date("2025-07-10T12:30:00"), datetime.date(2025, 7, 10))
        self.assertIsNone(to_date(""))
        self.assertEqual(format_date("2025-07-10"), "10/07/2025")
        self.assertEqual(format_date(datetime.date(2025, 7, 10), short=True), "10/07")
        self.assertEqual(format_date(None), "—")

    def test_parse_month(self):
        self.assertEqual(parse_month("2025-07"), datetime.date(2025, 7, 1))
        self.assertEqual(parse_month("2025-07-19"), datetime.date(2025, 7, 1))
        self.assertEqual(parse_month(datetime.date(2025, 2, 28)), datetime.date(2025, 2, 1))
        self.assertEqual(month_key(datetime.date(2025, 7, 14)), "2025-07")
        self.assertEqual(format_month("2025-07-01"), "07/2025")

    def test_parse_month_invalid(self):
        with self.assertRaises(ValueError):
            parse_month("2025-13")
        with self.assertRaises(ValueError):
            parse_month("julho")

    def test_card_helpers(self):
        self.assertEqual(mask_short("1234"), "•••• 1234")
        self.assertEqual(mask_short(None), "•••• 0000")
        self.assertEqual(format_expiration(5, 2028), "05/28")
        self.assertEqual(format_expiration(None, 2028), "--/--")
        self.assertEqual(only_digits("123.456.789-09"), "12345678909")


if __name__ == '__main__':
    unittest.main()
