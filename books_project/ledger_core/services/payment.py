import logging

from django.db import transaction

from ..exceptions import NotFoundError, ValidationError
from ..models import EntrySide, Invoice, InvoiceType, Ledger, Payment
from .audit_helper import log_action
from .gst import money
from .periods import assert_period_open
from .vouchers import get_or_create_voucher_type, parse_money, post_voucher, void_voucher

logger = logging.getLogger(__name__)

# Money comes in for sales & debit notes, goes out for purchases & credit notes.
# (voucher type, bank/cash side); the party takes the opposite side
PAYMENT_VOUCHERS = {
    InvoiceType.SALES: ("Receipt", EntrySide.DEBIT),
    InvoiceType.DEBIT_NOTE: ("Receipt", EntrySide.DEBIT),
    InvoiceType.PURCHASE: ("Payment", EntrySide.CREDIT),
    InvoiceType.CREDIT_NOTE: ("Payment", EntrySide.CREDIT),
}


def _resolve_bank_ledger(company, payment_mode):
    """Exact name match first ("Cash"), then the first ledger whose name contains the mode."""
    mode = (payment_mode or "Cash").strip()
    ledgers = Ledger.objects.for_company(company).order_by("pk")
    ledger = ledgers.filter(name__iexact=mode).first() or ledgers.filter(name__icontains=mode).first()
    if ledger is None:
        raise ValidationError(f"No bank/cash ledger matches payment mode {mode!r}")
    return ledger


def _get_invoice(company, invoice_id):
    try:
        return Invoice.objects.for_company(company).select_for_update().get(pk=invoice_id)
    except (Invoice.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Invoice {invoice_id} not found")


# ----------------------------
# Payment-related workflows
# ----------------------------
def record_payment(company, invoice_id, *, payment_date, amount, payment_mode="Cash",
                   reference_number="", notes="", user=None):
    """
    Settle part (or all) of an invoice.
    Posts a Receipt/Payment voucher and refreshes paid / outstanding / status.
    """
    amount = parse_money(amount, "payment amount")
    if amount <= 0:
        raise ValidationError("Payment amount must be positive")
    assert_period_open(company, payment_date)

    # Everything inside either succeeds
    # as one unit or rolls back if something fails
    with transaction.atomic():
        invoice = _get_invoice(company, invoice_id)
        if invoice.paid_amount + amount > invoice.grand_total:
            raise ValidationError("Payment amount exceeds invoice total")

        voucher_type_name, bank_side = PAYMENT_VOUCHERS[InvoiceType(invoice.invoice_type)]
        bank_ledger = _resolve_bank_ledger(company, payment_mode)
        sequence = invoice.payments.count() + 1

        voucher = post_voucher(
            company,
            voucher_type=get_or_create_voucher_type(company, voucher_type_name),
            voucher_number=reference_number or f"PAY-{invoice.invoice_number}-{sequence}",
            date=payment_date,
            narration=f"Payment for Invoice #{invoice.invoice_number}",
            entries=[
                {"ledger": bank_ledger, "amount": amount, "entry_type": bank_side},
                {"ledger_id": invoice.party_ledger_id, "amount": amount,
                 "entry_type": bank_side.opposite},
            ],
            user=user,
        )
        payment = Payment.objects.create(
            company=company,
            invoice=invoice,
            voucher=voucher,
            payment_date=payment_date,
            amount=amount,
            payment_mode=payment_mode or "Cash",
            reference_number=reference_number or "",
            notes=notes or "",
        )

        invoice.paid_amount += amount
        invoice.refresh_payment_state()
        invoice.save(update_fields=["paid_amount", "outstanding_amount", "payment_status"])
        log_action(action="create", instance=payment, user=user,
                   changes={"invoice_id": invoice.pk, "amount": str(amount),
                            "payment_status": invoice.payment_status})

    logger.info("Recorded payment %s on invoice %s (%s)",
                amount, invoice.invoice_number, invoice.payment_status)
    return payment


def delete_payment(company, payment_id, user=None):
    """Undo record_payment: void its voucher and give the amount back to outstanding."""
    with transaction.atomic():
        try:
            payment = Payment.objects.for_company(company).select_for_update().get(pk=payment_id)
        except Payment.DoesNotExist:
            raise NotFoundError(f"Payment {payment_id} not found")
        assert_period_open(company, payment.payment_date)

        invoice = _get_invoice(company, payment.invoice_id)
        voucher_id = payment.voucher_id
        log_action(action="delete", instance=payment, user=user,
                   changes={"invoice_id": invoice.pk, "amount": str(payment.amount)})
        payment.delete()
        if voucher_id:
            void_voucher(company, voucher_id, user=user)

        invoice.paid_amount = max(invoice.paid_amount - payment.amount, money(0))
        invoice.refresh_payment_state()
        invoice.save(update_fields=["paid_amount", "outstanding_amount", "payment_status"])

    logger.info("Deleted payment %s on invoice %s", payment_id, invoice.invoice_number)
    return invoice
