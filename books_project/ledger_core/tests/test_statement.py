import datetime
from decimal import Decimal

from django.test import TestCase

from ..exceptions import NotFoundError
from ..models import EntrySide
from ..services import build_statement, get_or_create_voucher_type, post_voucher
from .base import OPEN_DAY, LedgerFixtureMixin

DR, CR = EntrySide.DEBIT, EntrySide.CREDIT


class LedgerStatementTests(LedgerFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.journal = get_or_create_voucher_type(self.company, "Journal")
        self.bank = self.make_ledger(
            "Bank", self.assets, opening_balance=Decimal("1000.00"), opening_balance_type=DR
        )

    def post(self, number, date, *rows):
        return post_voucher(
            self.company,
            voucher_type=self.journal,
            voucher_number=number,
            date=date,
            narration=f"entry {number}",
            entries=self.entries(*rows),
        )

    def test_running_balance_for_asset_ledger(self):
        self.post("JV-1", OPEN_DAY, (self.bank, "200", DR), (self.sales, "200", CR))
        self.post("JV-2", OPEN_DAY + datetime.timedelta(days=1),
                  (self.cash, "50", DR), (self.bank, "50", CR))

        statement = build_statement(self.company, self.bank.pk)

        self.assertEqual(statement.opening_balance, Decimal("1000.00"))
        self.assertEqual([line.balance for line in statement.transactions],
                         [Decimal("1200.00"), Decimal("1150.00")])
        self.assertEqual(statement.transactions[0].debit, Decimal("200.00"))
        self.assertEqual(statement.transactions[1].credit, Decimal("50.00"))
        self.assertEqual(statement.closing_balance, Decimal("1150.00"))
        self.assertEqual(statement.closing_balance_type, DR)

    def test_income_ledger_grows_on_credit(self):
        self.post("JV-1", OPEN_DAY, (self.cash, "300", DR), (self.sales, "300", CR))
        self.post("JV-2", OPEN_DAY, (self.sales, "100", DR), (self.cash, "100", CR))

        statement = build_statement(self.company, self.sales.pk)
        self.assertEqual(statement.closing_balance, Decimal("200.00"))

    def test_balance_crossing_zero_flips_side(self):
        self.post("JV-1", OPEN_DAY, (self.sales, "1500", DR), (self.bank, "1500", CR))
        statement = build_statement(self.company, self.bank.pk)

        self.assertEqual(statement.closing_balance, Decimal("-500.00"))
        self.assertEqual(statement.closing_balance_type, CR)

    def test_same_day_entries_follow_creation_order(self):
        first = self.post("JV-B", OPEN_DAY, (self.bank, "10", DR), (self.sales, "10", CR))
        second = self.post("JV-A", OPEN_DAY, (self.bank, "20", DR), (self.sales, "20", CR))
        earlier = self.post("JV-C", OPEN_DAY - datetime.timedelta(days=1),
                            (self.bank, "30", DR), (self.sales, "30", CR))

        statement = build_statement(self.company, self.bank.pk)
        self.assertEqual([line.voucher_id for line in statement.transactions],
                         [earlier.pk, first.pk, second.pk])

    def test_date_bounds_filter_entries(self):
        self.post("JV-1", datetime.date(2025, 5, 1), (self.bank, "10", DR), (self.sales, "10", CR))
        self.post("JV-2", datetime.date(2025, 6, 1), (self.bank, "20", DR), (self.sales, "20", CR))
        self.post("JV-3", datetime.date(2025, 7, 1), (self.bank, "40", DR), (self.sales, "40", CR))

        statement = build_statement(
            self.company, self.bank.pk,
            start_date=datetime.date(2025, 5, 15), end_date=datetime.date(2025, 6, 30),
        )
        self.assertEqual(len(statement.transactions), 1)
        self.assertEqual(statement.transactions[0].voucher_number, "JV-2")

    def test_statement_lines_carry_voucher_details(self):
        self.post("JV-9", OPEN_DAY, (self.bank, "10", DR), (self.sales, "10", CR))
        line = build_statement(self.company, self.bank.pk).transactions[0]
        self.assertEqual(line.voucher_type, "Journal")
        self.assertEqual(line.narration, "entry JV-9")
        self.assertEqual(line.date, OPEN_DAY)

    def test_statement_does_not_touch_cache(self):
        self.post("JV-1", OPEN_DAY, (self.bank, "200", DR), (self.sales, "200", CR))
        build_statement(self.company, self.bank.pk)
        self.bank.refresh_from_db()
        self.assertEqual(self.bank.current_balance, Decimal("1000.00"))

    def test_as_dict_is_plain_data(self):
        data = build_statement(self.company, self.bank.pk).as_dict()
        self.assertEqual(data["ledger_name"], "Bank")
        self.assertEqual(data["transactions"], [])

    def test_unknown_ledger_is_not_found(self):
        with self.assertRaises(NotFoundError):
            build_statement(self.company, 999999)
