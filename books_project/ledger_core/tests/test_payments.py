from decimal import Decimal

from django.test import TestCase

from ..exceptions import NotFoundError, PeriodLockedError, ValidationError
from ..models import EntrySide, InvoiceType, Payment, PaymentStatus, Voucher
from ..services import delete_invoice, delete_payment, record_payment
from .base import CLOSED_DAY, OPEN_DAY, LedgerFixtureMixin


class PaymentTests(LedgerFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.invoice = self.make_invoice()  # grand total 1180

    def pay(self, amount, **kwargs):
        return record_payment(
            self.company, self.invoice.pk, payment_date=OPEN_DAY, amount=amount, **kwargs
        )

    def test_partial_then_full_payment(self):
        self.pay("500")
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.paid_amount, Decimal("500.00"))
        self.assertEqual(self.invoice.outstanding_amount, Decimal("680.00"))
        self.assertEqual(self.invoice.payment_status, PaymentStatus.PARTIAL)

        self.pay("680")
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.outstanding_amount, Decimal("0.00"))
        self.assertEqual(self.invoice.payment_status, PaymentStatus.PAID)

    def test_receipt_debits_cash_and_credits_party(self):
        payment = self.pay("300")
        voucher = payment.voucher

        self.assertEqual(voucher.voucher_type.name, "Receipt")
        self.assertEqual(voucher.voucher_number, f"PAY-{self.invoice.invoice_number}-1")
        sides = {e.ledger_id: e.entry_type for e in voucher.entries.all()}
        self.assertEqual(sides[self.cash.pk], EntrySide.DEBIT)
        self.assertEqual(sides[self.customer.pk], EntrySide.CREDIT)

    def test_purchase_payment_credits_bank(self):
        bill = self.make_invoice(
            invoice_type=InvoiceType.PURCHASE,
            invoice_number="BILL-1",
            party_ledger_id=self.supplier.pk,
            sales_ledger_id=self.purchase.pk,
        )
        payment = record_payment(self.company, bill.pk, payment_date=OPEN_DAY, amount="100",
                                 reference_number="CHQ-42")
        voucher = payment.voucher
        self.assertEqual(voucher.voucher_type.name, "Payment")
        self.assertEqual(voucher.voucher_number, "CHQ-42")
        sides = {e.ledger_id: e.entry_type for e in voucher.entries.all()}
        self.assertEqual(sides[self.cash.pk], EntrySide.CREDIT)
        self.assertEqual(sides[self.supplier.pk], EntrySide.DEBIT)

    def test_payment_mode_picks_ledger_by_name(self):
        bank = self.make_ledger("HDFC Bank", self.assets)
        payment = self.pay("100", payment_mode="Bank")
        self.assertTrue(payment.voucher.entries.filter(ledger=bank).exists())

    def test_unknown_payment_mode_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.pay("100", payment_mode="Wallet")
        self.assertFalse(Payment.objects.exists())

    def test_overpayment_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.pay("1180.01")
        self.assertFalse(Payment.objects.exists())

    def test_non_positive_amount_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.pay("0")

    def test_non_finite_amount_is_rejected(self):
        for amount in ("NaN", "Infinity"):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationError):
                    self.pay(amount)
        self.assertFalse(Payment.objects.exists())

    def test_locked_payment_date_is_rejected(self):
        with self.assertRaises(PeriodLockedError):
            record_payment(self.company, self.invoice.pk, payment_date=CLOSED_DAY, amount="10")

    def test_unknown_invoice_is_not_found(self):
        with self.assertRaises(NotFoundError):
            record_payment(self.company, 999999, payment_date=OPEN_DAY, amount="10")

    def test_delete_payment_restores_outstanding_and_unblocks_invoice(self):
        payment = self.pay("1180")
        voucher_id = payment.voucher_id

        invoice = delete_payment(self.company, payment.pk)

        self.assertEqual(invoice.paid_amount, Decimal("0.00"))
        self.assertEqual(invoice.outstanding_amount, Decimal("1180.00"))
        self.assertEqual(invoice.payment_status, PaymentStatus.UNPAID)
        self.assertFalse(Voucher.objects.filter(pk=voucher_id).exists())

        delete_invoice(self.company, self.invoice.pk)
