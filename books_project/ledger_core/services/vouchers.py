import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction

from ..exceptions import (ConflictError, NotFoundError,
                          UnbalancedVoucherError, ValidationError)
from ..models import (EntrySide, Invoice, Ledger, Payment, Voucher,
                      VoucherEntry, VoucherType)
from .audit_helper import log_action
from .gst import money
from .periods import assert_period_open

logger = logging.getLogger(__name__)


def balance_tolerance():
    return Decimal(str(getattr(settings, "LEDGER_BALANCE_TOLERANCE", "0.01")))


def get_or_create_voucher_type(company, name):
    """The only master-data row the engine ever creates."""
    vt, _ = VoucherType.objects.get_or_create(company=company, name=name)
    return vt


def _resolve_voucher_type(company, voucher_type):
    if isinstance(voucher_type, VoucherType):
        if voucher_type.company_id != company.pk:
            raise ValidationError("Voucher type must belong to the same company")
        return voucher_type
    if voucher_type is None:
        raise ValidationError("Voucher type is required")
    try:
        return VoucherType.objects.for_company(company).get(pk=voucher_type)
    except (VoucherType.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Voucher type {voucher_type} not found")


def _get_voucher(company, voucher_id, lock=False):
    qs = Voucher.objects.for_company(company)
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=voucher_id)
    except (Voucher.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Voucher {voucher_id} not found")


def to_pk(value, label):
    """Ids arrive as ints or as strings from JSON bodies."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise NotFoundError(f"{label} {value!r} not found")


def parse_money(value, label):
    try:
        amount = money(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid {label} {value!r}")
    # NaN survives quantize
    if not amount.is_finite():
        raise ValidationError(f"Invalid {label} {value!r}")
    return amount


def _prepare_entries(company, entries):
    """
    Turn raw entry dicts into (ledger, amount, side) triples.
    Each dict carries `ledger` (instance) or `ledger_id`, `amount`, `entry_type`.
    """
    entries = list(entries or [])
    if len(entries) < 2:
        raise ValidationError("Voucher must have at least 2 entries")

    ledger_ids = [
        e["ledger"].pk if isinstance(e.get("ledger"), Ledger)
        else to_pk(e.get("ledger_id"), "Ledger")
        for e in entries
    ]
    ledgers = Ledger.objects.for_company(company).in_bulk(set(ledger_ids))

    prepared = []
    for e, ledger_id in zip(entries, ledger_ids):
        ledger = ledgers.get(ledger_id)
        if ledger is None:
            # unknown or another company's ledger
            raise NotFoundError(f"Ledger {ledger_id} not found")

        amount = parse_money(e.get("amount"), f"amount for ledger {ledger.name}:")
        if amount <= 0:
            raise ValidationError("Entry amount must be > 0")

        side = e.get("entry_type")
        if side not in EntrySide.values:
            raise ValidationError(f"Entry type must be Dr or Cr, got {side!r}")
        prepared.append((ledger, amount, EntrySide(side)))
    return prepared


def _check_balance(prepared, allow_unbalanced=False):
    debit = sum((amt for _, amt, side in prepared if side == EntrySide.DEBIT), Decimal("0.00"))
    credit = sum((amt for _, amt, side in prepared if side == EntrySide.CREDIT), Decimal("0.00"))
    if abs(debit - credit) > balance_tolerance():
        if not allow_unbalanced:
            raise UnbalancedVoucherError(debit, credit)
        logger.warning("Posting unbalanced voucher: Dr %s, Cr %s", debit, credit)
        return max(debit, credit)
    return debit


def _assert_free_standing(voucher):
    if Invoice.objects.filter(voucher=voucher).exists():
        raise ConflictError("Voucher backs an invoice; change the invoice instead")
    if Payment.objects.filter(voucher=voucher).exists():
        raise ConflictError("Voucher backs a payment; change the payment instead")


def _write_entries(voucher, prepared):
    VoucherEntry.objects.bulk_create([
        VoucherEntry(
            voucher=voucher,
            company_id=voucher.company_id,
            ledger=ledger,
            amount=amount,
            entry_type=side,
        )
        for ledger, amount, side in prepared
    ])


# ----------------------------
# Voucher workflows
# ----------------------------
def post_voucher(company, *, voucher_type, voucher_number, date, entries,
                 narration="", user=None, allow_unbalanced=False):
    """
    Create a voucher header and its entries as one unit.
    Rejects fewer than 2 entries and Dr/Cr totals that differ by more than the tolerance.
    allow_unbalanced is only for invoices whose tax ledger is missing.
    """
    assert_period_open(company, date)
    prepared = _prepare_entries(company, entries)
    debit_total = _check_balance(prepared, allow_unbalanced)

    with transaction.atomic():
        voucher = Voucher.objects.create(
            company=company,
            voucher_type=_resolve_voucher_type(company, voucher_type),
            voucher_number=voucher_number,
            date=date,
            narration=narration or "",
            total_amount=debit_total,
            created_by=user,
        )
        _write_entries(voucher, prepared)
        log_action(action="create", instance=voucher, user=user,
                   changes={"total_amount": str(debit_total), "entries": len(prepared)})

    logger.info("Posted voucher %s (%s) total=%s", voucher.voucher_number, voucher.pk, debit_total)
    return voucher


def replace_voucher(company, voucher_id, *, entries, voucher_type=None,
                    voucher_number=None, date=None, narration=None, user=None,
                    from_document=False, allow_unbalanced=False):
    """
    Supersede every entry of a voucher, keeping its id.
    Header fields left as None keep their current value.
    A voucher behind an invoice or payment is only rewritten by that document
    (from_document=True).
    """
    with transaction.atomic():
        voucher = _get_voucher(company, voucher_id, lock=True)
        new_date = date or voucher.date
        # both ends of a move must be open
        assert_period_open(company, voucher.date, new_date)
        if not from_document:
            _assert_free_standing(voucher)

        prepared = _prepare_entries(company, entries)
        debit_total = _check_balance(prepared, allow_unbalanced)

        old_total = voucher.total_amount
        voucher.entries.all().delete()
        _write_entries(voucher, prepared)

        if voucher_type is not None:
            voucher.voucher_type = _resolve_voucher_type(company, voucher_type)
        if voucher_number is not None:
            voucher.voucher_number = voucher_number
        if narration is not None:
            voucher.narration = narration
        voucher.date = new_date
        voucher.total_amount = debit_total
        voucher.save()

        log_action(action="update", instance=voucher, user=user,
                   changes={"total_amount": [str(old_total), str(debit_total)]})

    logger.info("Replaced voucher %s (%s) total=%s", voucher.voucher_number, voucher.pk, debit_total)
    return voucher


def void_voucher(company, voucher_id, user=None):
    """Delete a voucher's entries, then its header."""
    with transaction.atomic():
        voucher = _get_voucher(company, voucher_id, lock=True)
        assert_period_open(company, voucher.date)
        _assert_free_standing(voucher)

        log_action(action="delete", instance=voucher, user=user,
                   changes={"voucher_number": voucher.voucher_number,
                            "total_amount": str(voucher.total_amount)})
        voucher.entries.all().delete()
        voucher.delete()

    logger.info("Voided voucher %s (%s)", voucher.voucher_number, voucher_id)


def delete_ledger(company, ledger_id, user=None):
    """A ledger that has ever been posted to cannot be removed."""
    with transaction.atomic():
        try:
            ledger = Ledger.objects.for_company(company).select_for_update().get(pk=ledger_id)
        except Ledger.DoesNotExist:
            raise NotFoundError(f"Ledger {ledger_id} not found")

        if VoucherEntry.objects.filter(ledger=ledger).exists():
            raise ConflictError("Cannot delete ledger with existing transactions")

        log_action(action="delete", instance=ledger, user=user,
                   changes={"name": ledger.name})
        ledger.delete()
