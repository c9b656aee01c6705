import datetime
from decimal import Decimal

from django.db.models import ProtectedError
from django.test import TestCase

from ..exceptions import (ConflictError, NotFoundError, PeriodLockedError,
                          UnbalancedVoucherError, ValidationError)
from ..models import (AuditLog, Company, EntrySide, GroupType, Ledger,
                      LedgerGroup, Voucher, VoucherEntry)
from ..services import (delete_ledger, get_or_create_voucher_type, post_voucher,
                        record_payment, replace_voucher, void_voucher)
from .base import CLOSED_DAY, OPEN_DAY, LedgerFixtureMixin

DR, CR = EntrySide.DEBIT, EntrySide.CREDIT


class VoucherPostingTests(LedgerFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.journal = get_or_create_voucher_type(self.company, "Journal")

    def post(self, *rows, date=OPEN_DAY, number="JV-1"):
        return post_voucher(
            self.company,
            voucher_type=self.journal,
            voucher_number=number,
            date=date,
            entries=self.entries(*rows),
        )

    def test_balanced_voucher_is_written_with_entries(self):
        voucher = self.post((self.cash, "250.00", DR), (self.sales, "250.00", CR))

        self.assertEqual(voucher.total_amount, Decimal("250.00"))
        self.assertEqual(voucher.entries.count(), 2)
        self.assertTrue(voucher.is_balanced())
        for entry in voucher.entries.all():
            self.assertEqual(entry.company_id, self.company.pk)

    def test_voucher_type_by_id(self):
        voucher = post_voucher(
            self.company,
            voucher_type=self.journal.pk,
            voucher_number="JV-2",
            date=OPEN_DAY,
            entries=self.entries((self.cash, "5", DR), (self.sales, "5", CR)),
        )
        self.assertEqual(voucher.voucher_type, self.journal)

    def test_unknown_voucher_type_is_not_found(self):
        with self.assertRaises(NotFoundError):
            post_voucher(
                self.company,
                voucher_type=999999,
                voucher_number="JV-3",
                date=OPEN_DAY,
                entries=self.entries((self.cash, "5", DR), (self.sales, "5", CR)),
            )

    def test_single_entry_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.post((self.cash, "100", DR))
        self.assertEqual(Voucher.objects.count(), 0)

    def test_unbalanced_voucher_is_rejected_without_rows(self):
        with self.assertRaises(UnbalancedVoucherError) as ctx:
            self.post((self.cash, "100.00", DR), (self.sales, "90.00", CR))

        self.assertEqual(ctx.exception.debit, Decimal("100.00"))
        self.assertEqual(ctx.exception.credit, Decimal("90.00"))
        self.assertEqual(Voucher.objects.count(), 0)
        self.assertEqual(VoucherEntry.objects.count(), 0)

    def test_difference_within_tolerance_is_accepted(self):
        voucher = self.post((self.cash, "100.00", DR), (self.sales, "100.01", CR))
        self.assertEqual(voucher.total_amount, Decimal("100.00"))

    def test_zero_and_negative_amounts_are_rejected(self):
        with self.assertRaises(ValidationError):
            self.post((self.cash, "0", DR), (self.sales, "0", CR))
        with self.assertRaises(ValidationError):
            self.post((self.cash, "-10", DR), (self.sales, "-10", CR))

    def test_bad_side_is_rejected(self):
        with self.assertRaises(ValidationError):
            post_voucher(
                self.company,
                voucher_type=self.journal,
                voucher_number="JV-4",
                date=OPEN_DAY,
                entries=[
                    {"ledger": self.cash, "amount": "10", "entry_type": "Debit"},
                    {"ledger": self.sales, "amount": "10", "entry_type": "Cr"},
                ],
            )

    def test_non_finite_amounts_are_rejected(self):
        for amount in ("NaN", "Infinity", "-Infinity"):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationError):
                    self.post((self.cash, amount, DR), (self.sales, "10", CR))
        self.assertEqual(Voucher.objects.count(), 0)

    def test_ledger_ids_as_strings(self):
        voucher = post_voucher(
            self.company,
            voucher_type=self.journal,
            voucher_number="JV-5",
            date=OPEN_DAY,
            entries=[
                {"ledger_id": str(self.cash.pk), "amount": "10", "entry_type": "Dr"},
                {"ledger_id": str(self.sales.pk), "amount": "10", "entry_type": "Cr"},
            ],
        )
        self.assertEqual(voucher.entries.count(), 2)

    def test_malformed_ledger_id_is_not_found(self):
        with self.assertRaises(NotFoundError):
            post_voucher(
                self.company,
                voucher_type=self.journal,
                voucher_number="JV-6",
                date=OPEN_DAY,
                entries=[
                    {"ledger_id": "abc", "amount": "10", "entry_type": "Dr"},
                    {"ledger_id": self.sales.pk, "amount": "10", "entry_type": "Cr"},
                ],
            )
        self.assertEqual(Voucher.objects.count(), 0)

    def test_other_company_ledger_is_not_found(self):
        other = Company.objects.create(name="Elsewhere", state="KA")
        group = LedgerGroup.objects.create(
            company=other, name="Assets", group_type=GroupType.ASSET)
        foreign = Ledger.objects.create(company=other, group=group, name="Cash")

        with self.assertRaises(NotFoundError):
            self.post((foreign, "10", DR), (self.sales, "10", CR))
        self.assertEqual(Voucher.objects.count(), 0)

    def test_locked_period_is_rejected(self):
        with self.assertRaises(PeriodLockedError):
            self.post((self.cash, "100", DR), (self.sales, "100", CR), date=CLOSED_DAY)
        self.assertEqual(Voucher.objects.count(), 0)

    def test_post_writes_audit_row(self):
        voucher = self.post((self.cash, "40", DR), (self.sales, "40", CR))
        log = AuditLog.objects.get(object_type="Voucher", object_id=str(voucher.pk))
        self.assertEqual(log.action, "create")
        self.assertEqual(log.company, self.company)
        self.assertEqual(log.changes["entries"], 2)


class VoucherReplaceTests(LedgerFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.journal = get_or_create_voucher_type(self.company, "Journal")
        self.voucher = post_voucher(
            self.company,
            voucher_type=self.journal,
            voucher_number="JV-1",
            date=OPEN_DAY,
            entries=self.entries((self.cash, "100", DR), (self.sales, "100", CR)),
        )

    def test_replace_keeps_identity_and_supersedes_entries(self):
        old_entry_ids = set(self.voucher.entries.values_list("id", flat=True))
        created_at = self.voucher.created_at

        voucher = replace_voucher(
            self.company,
            self.voucher.pk,
            entries=self.entries(
                (self.cash, "300", DR),
                (self.sales, "200", CR),
                (self.cgst, "100", CR),
            ),
            narration="corrected",
        )

        self.assertEqual(voucher.pk, self.voucher.pk)
        self.assertEqual(voucher.created_at, created_at)
        self.assertEqual(voucher.total_amount, Decimal("300.00"))
        self.assertEqual(voucher.narration, "corrected")
        self.assertEqual(voucher.voucher_number, "JV-1")
        self.assertEqual(voucher.entries.count(), 3)
        self.assertFalse(VoucherEntry.objects.filter(id__in=old_entry_ids).exists())

    def test_unbalanced_replace_leaves_old_entries(self):
        with self.assertRaises(UnbalancedVoucherError):
            replace_voucher(
                self.company,
                self.voucher.pk,
                entries=self.entries((self.cash, "300", DR), (self.sales, "200", CR)),
            )
        self.voucher.refresh_from_db()
        self.assertEqual(self.voucher.total_amount, Decimal("100.00"))
        self.assertEqual(self.voucher.entries.count(), 2)

    def test_move_into_locked_period_is_rejected(self):
        with self.assertRaises(PeriodLockedError):
            replace_voucher(
                self.company,
                self.voucher.pk,
                date=CLOSED_DAY,
                entries=self.entries((self.cash, "100", DR), (self.sales, "100", CR)),
            )
        self.voucher.refresh_from_db()
        self.assertEqual(self.voucher.date, OPEN_DAY)

    def test_voucher_in_closed_period_cannot_be_replaced(self):
        later_day = datetime.date(2025, 6, 20)
        self.open_year.is_closed = True
        self.open_year.save()

        with self.assertRaises(PeriodLockedError):
            replace_voucher(
                self.company,
                self.voucher.pk,
                date=later_day,
                entries=self.entries((self.cash, "100", DR), (self.sales, "100", CR)),
            )

    def test_unknown_voucher_is_not_found(self):
        with self.assertRaises(NotFoundError):
            replace_voucher(
                self.company,
                999999,
                entries=self.entries((self.cash, "1", DR), (self.sales, "1", CR)),
            )


class VoucherVoidTests(LedgerFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.journal = get_or_create_voucher_type(self.company, "Journal")
        self.voucher = post_voucher(
            self.company,
            voucher_type=self.journal,
            voucher_number="JV-1",
            date=OPEN_DAY,
            entries=self.entries((self.cash, "100", DR), (self.sales, "100", CR)),
        )

    def test_void_removes_header_and_entries(self):
        void_voucher(self.company, self.voucher.pk)
        self.assertFalse(Voucher.objects.filter(pk=self.voucher.pk).exists())
        self.assertFalse(VoucherEntry.objects.filter(voucher_id=self.voucher.pk).exists())

    def test_void_in_closed_period_is_rejected(self):
        self.open_year.is_closed = True
        self.open_year.save()
        with self.assertRaises(PeriodLockedError):
            void_voucher(self.company, self.voucher.pk)
        self.assertTrue(Voucher.objects.filter(pk=self.voucher.pk).exists())

    def test_voucher_backing_an_invoice_cannot_be_voided(self):
        invoice = self.make_invoice()
        with self.assertRaises(ConflictError):
            void_voucher(self.company, invoice.voucher_id)

    def test_voucher_backing_an_invoice_cannot_be_replaced(self):
        invoice = self.make_invoice()
        with self.assertRaises(ConflictError):
            replace_voucher(
                self.company,
                invoice.voucher_id,
                entries=self.entries((self.cash, "5", DR), (self.sales, "5", CR)),
            )
        invoice.voucher.refresh_from_db()
        self.assertEqual(invoice.voucher.total_amount, invoice.grand_total)
        self.assertEqual(invoice.voucher.entries.count(), 4)

    def test_voucher_backing_a_payment_cannot_be_replaced(self):
        payment = record_payment(
            self.company, self.make_invoice().pk, payment_date=OPEN_DAY, amount="100")
        with self.assertRaises(ConflictError):
            replace_voucher(
                self.company,
                payment.voucher_id,
                entries=self.entries((self.cash, "5", DR), (self.sales, "5", CR)),
            )
        payment.voucher.refresh_from_db()
        self.assertEqual(payment.voucher.total_amount, Decimal("100.00"))

    def test_void_is_scoped_to_company(self):
        other = Company.objects.create(name="Elsewhere", state="KA")
        with self.assertRaises(NotFoundError):
            void_voucher(other, self.voucher.pk)


class LedgerDeleteTests(LedgerFixtureMixin, TestCase):
    def test_ledger_with_entries_cannot_be_deleted(self):
        post_voucher(
            self.company,
            voucher_type=get_or_create_voucher_type(self.company, "Journal"),
            voucher_number="JV-1",
            date=OPEN_DAY,
            entries=self.entries((self.cash, "100", DR), (self.sales, "100", CR)),
        )
        with self.assertRaises(ConflictError):
            delete_ledger(self.company, self.cash.pk)
        # the ORM refuses as well
        with self.assertRaises(ProtectedError):
            self.cash.delete()

    def test_unused_ledger_can_be_deleted(self):
        spare = self.make_ledger("Spare", self.assets)
        delete_ledger(self.company, spare.pk)
        self.assertFalse(Ledger.objects.filter(pk=spare.pk).exists())
