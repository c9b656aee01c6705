import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from django.conf import settings
from django.db import transaction

from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models import (EntrySide, GSTSettings, Invoice, InvoiceItem,
                      InvoiceType, Item, Ledger, PaymentStatus)
from .audit_helper import log_action
from .gst import ZERO, is_inter_state, money, split_gst
from .inventory import apply_invoice_stock, reverse_invoice_stock
from .periods import assert_period_open
from .vouchers import (get_or_create_voucher_type, post_voucher, replace_voucher, to_pk,
                       void_voucher)

logger = logging.getLogger(__name__)

# (party side, account side); tax entries follow the account side
ENTRY_SIDES = {
    InvoiceType.SALES: (EntrySide.DEBIT, EntrySide.CREDIT),
    InvoiceType.PURCHASE: (EntrySide.CREDIT, EntrySide.DEBIT),
    InvoiceType.CREDIT_NOTE: (EntrySide.CREDIT, EntrySide.DEBIT),
    InvoiceType.DEBIT_NOTE: (EntrySide.DEBIT, EntrySide.CREDIT),
}

VOUCHER_TYPE_NAMES = {
    InvoiceType.SALES: "Sales",
    InvoiceType.PURCHASE: "Purchase",
    InvoiceType.CREDIT_NOTE: "Credit Note",
    InvoiceType.DEBIT_NOTE: "Debit Note",
}

# name fragment used by the legacy lookup, per GSTSettings slot
TAX_LEDGER_NAMES = {
    "igst": "IGST",
    "cgst": "CGST",
    "sgst": "SGST",
}


@dataclass
class InvoiceTotals:
    subtotal: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    discount_percent: Decimal = ZERO
    discount_amount: Decimal = ZERO
    lines: List[InvoiceItem] = field(default_factory=list)

    @property
    def tax_total(self):
        return self.cgst + self.sgst + self.igst

    @property
    def net_amount(self):
        # what lands on the sales / purchase ledger
        return self.subtotal - self.discount_amount

    @property
    def grand_total(self):
        return self.subtotal + self.tax_total - self.discount_amount


def _decimal(value, label, default=None):
    if value in (None, "") and default is not None:
        return Decimal(default)
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid {label}: {value!r}")
    if not number.is_finite():
        raise ValidationError(f"Invalid {label}: {value!r}")
    return number


def _percent(value, label):
    pct = _decimal(value, label, "0")
    if not ZERO <= pct <= 100:
        raise ValidationError(f"{label} must be between 0 and 100")
    return pct


def _get_ledger(company, ledger_id, label):
    try:
        return Ledger.objects.for_company(company).select_related("group").get(pk=ledger_id)
    except (Ledger.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"{label} {ledger_id} not found")


def resolve_tax_ledgers(company) -> Dict[str, Optional[Ledger]]:
    """
    Tax ledgers come from the company's GSTSettings.
    An empty slot falls back to a case-insensitive name match when
    LEDGER_TAX_LEDGER_NAME_FALLBACK is on.
    """
    gst_settings = GSTSettings.objects.filter(company=company).first()
    resolved = {
        slot: getattr(gst_settings, f"{slot}_ledger", None) if gst_settings else None
        for slot in TAX_LEDGER_NAMES
    }
    if getattr(settings, "LEDGER_TAX_LEDGER_NAME_FALLBACK", True):
        for slot, fragment in TAX_LEDGER_NAMES.items():
            if resolved[slot] is None:
                resolved[slot] = (
                    Ledger.objects.for_company(company)
                    .filter(name__icontains=fragment)
                    .order_by("pk")
                    .first()
                )
    return resolved


def compute_invoice(company, items, discount_percent, inter_state) -> InvoiceTotals:
    """
    Price every line, split its GST and roll up the invoice totals.
    Returns unsaved InvoiceItem rows; nothing is written.
    """
    if not items:
        raise ValidationError("Invoice must have at least one item")

    item_ids = [to_pk(row["item_id"], "Item") if row.get("item_id") else None for row in items]
    stock_items = Item.objects.for_company(company).in_bulk([pk for pk in item_ids if pk])

    totals = InvoiceTotals(discount_percent=_percent(discount_percent, "Discount percent"))
    for row, item_id in zip(items, item_ids):
        stock_item = None
        if item_id:
            stock_item = stock_items.get(item_id)
            if stock_item is None:
                raise NotFoundError(f"Item {item_id} not found")

        quantity = _decimal(row.get("quantity"), "quantity")
        rate = _decimal(row.get("rate"), "rate")
        if quantity <= 0:
            raise ValidationError("Quantity must be > 0")
        if rate < 0:
            raise ValidationError("Rate must be >= 0")

        # a line may override the item's GST rate (service lines must supply one)
        default_rate = stock_item.tax_rate if stock_item else "0"
        tax_rate = _decimal(row.get("tax_rate"), "tax rate", default_rate)
        line_discount_percent = _percent(row.get("discount_percent"), "Line discount percent")

        amount = money(quantity * rate)
        discount_amount = money(amount * line_discount_percent / 100)
        taxable_amount = amount - discount_amount
        split = split_gst(taxable_amount, tax_rate, inter_state)

        totals.subtotal += taxable_amount
        totals.cgst += split.cgst_amount
        totals.sgst += split.sgst_amount
        totals.igst += split.igst_amount
        totals.lines.append(InvoiceItem(
            item=stock_item,
            description=row.get("description") or (stock_item.name if stock_item else ""),
            quantity=quantity,
            rate=rate,
            amount=amount,
            discount_percent=line_discount_percent,
            discount_amount=discount_amount,
            taxable_amount=taxable_amount,
            tax_rate=tax_rate,
            cgst_rate=split.cgst_rate,
            cgst_amount=split.cgst_amount,
            sgst_rate=split.sgst_rate,
            sgst_amount=split.sgst_amount,
            igst_rate=split.igst_rate,
            igst_amount=split.igst_amount,
            total_amount=taxable_amount + split.total,
        ))

    totals.discount_amount = money(totals.subtotal * totals.discount_percent / 100)
    if totals.grand_total <= 0:
        raise ValidationError("Invoice total must be > 0")
    return totals


def build_voucher_entries(company, invoice_type, party_ledger, account_ledger, totals):
    """
    Party entry for the grand total, account entry for the net amount,
    and one entry per non-zero tax bucket.
    Returns the entries and the tax left unposted for want of a ledger.
    """
    party_side, account_side = ENTRY_SIDES[InvoiceType(invoice_type)]
    entries = [
        {"ledger": party_ledger, "amount": totals.grand_total, "entry_type": party_side},
    ]
    if totals.net_amount > 0:
        entries.append(
            {"ledger": account_ledger, "amount": totals.net_amount, "entry_type": account_side}
        )

    tax_ledgers = resolve_tax_ledgers(company)
    unposted = ZERO
    for slot in ("igst", "cgst", "sgst"):
        amount = getattr(totals, slot)
        if amount <= 0:
            continue
        ledger = tax_ledgers[slot]
        if ledger is None:
            logger.warning(
                "No %s ledger configured for company %s; %s of tax left unposted",
                TAX_LEDGER_NAMES[slot], company.pk, amount,
            )
            unposted += amount
            continue
        entries.append({"ledger": ledger, "amount": amount, "entry_type": account_side})
    return entries, unposted


def _narration(invoice_number, notes):
    return f"Invoice #{invoice_number} - {notes}" if notes else f"Invoice #{invoice_number}"


def _prepare(company, invoice_type, party_ledger_id, sales_ledger_id, items, discount_percent):
    if invoice_type not in InvoiceType.values:
        raise ValidationError(f"Unknown invoice type {invoice_type!r}")
    invoice_type = InvoiceType(invoice_type)
    party_ledger = _get_ledger(company, party_ledger_id, "Party ledger")
    account_ledger = _get_ledger(company, sales_ledger_id, "Sales/purchase ledger")

    inter_state = is_inter_state(company.state, party_ledger.state)
    totals = compute_invoice(company, items, discount_percent, inter_state)
    entries, unposted = build_voucher_entries(
        company, invoice_type, party_ledger, account_ledger, totals
    )
    return invoice_type, party_ledger, account_ledger, totals, entries, unposted > 0


def _write_header(invoice, *, invoice_type, invoice_number, date, party_ledger, account_ledger,
                  totals, due_date, notes, original_invoice_number, original_invoice_date):
    invoice.invoice_type = invoice_type
    invoice.invoice_number = invoice_number
    invoice.date = date
    invoice.due_date = due_date
    invoice.notes = notes or ""
    invoice.party_ledger = party_ledger
    invoice.sales_ledger = account_ledger
    invoice.original_invoice_number = original_invoice_number or ""
    invoice.original_invoice_date = original_invoice_date
    invoice.subtotal = totals.subtotal
    invoice.tax_total = totals.tax_total
    invoice.discount_percent = totals.discount_percent
    invoice.discount_amount = totals.discount_amount
    invoice.grand_total = totals.grand_total
    invoice.refresh_payment_state()
    invoice.full_clean()
    invoice.save()

    for line in totals.lines:
        line.invoice = invoice
    InvoiceItem.objects.bulk_create(totals.lines)


# ----------------------------
# Invoice workflows
# ----------------------------
def create_invoice(company, *, invoice_type, invoice_number, date, party_ledger_id,
                   sales_ledger_id, items, discount_percent=0, due_date=None, notes="",
                   original_invoice_number="", original_invoice_date=None, user=None):
    """
    Create an invoice, its backing voucher and its stock movements as one unit.
    """
    assert_period_open(company, date)

    with transaction.atomic():
        invoice_type, party_ledger, account_ledger, totals, entries, tax_skipped = _prepare(
            company, invoice_type, party_ledger_id, sales_ledger_id, items, discount_percent
        )
        voucher = post_voucher(
            company,
            voucher_type=get_or_create_voucher_type(company, VOUCHER_TYPE_NAMES[invoice_type]),
            voucher_number=invoice_number,
            date=date,
            narration=_narration(invoice_number, notes),
            entries=entries,
            user=user,
            allow_unbalanced=tax_skipped,
        )

        invoice = Invoice(company=company, voucher=voucher, paid_amount=ZERO,
                          payment_status=PaymentStatus.UNPAID)
        _write_header(
            invoice,
            invoice_type=invoice_type,
            invoice_number=invoice_number,
            date=date,
            party_ledger=party_ledger,
            account_ledger=account_ledger,
            totals=totals,
            due_date=due_date,
            notes=notes,
            original_invoice_number=original_invoice_number,
            original_invoice_date=original_invoice_date,
        )
        apply_invoice_stock(invoice)
        log_action(action="create", instance=invoice, user=user,
                   changes={"grand_total": str(invoice.grand_total),
                            "voucher_id": voucher.pk})

    logger.info("Created %s invoice %s grand_total=%s",
                invoice.invoice_type, invoice.invoice_number, invoice.grand_total)
    return invoice


def _get_invoice_for_change(company, invoice_id):
    try:
        invoice = Invoice.objects.for_company(company).select_for_update().get(pk=invoice_id)
    except (Invoice.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Invoice {invoice_id} not found")
    if invoice.has_payments():
        raise ConflictError("Cannot modify invoice with existing payments")
    return invoice


def update_invoice(company, invoice_id, *, invoice_type, invoice_number, date, party_ledger_id,
                   sales_ledger_id, items, discount_percent=0, due_date=None, notes="",
                   original_invoice_number="", original_invoice_date=None, user=None):
    """
    Reverse the old stock and entries, then rebuild from the new details.
    The invoice id and its voucher id both survive the edit.
    """
    with transaction.atomic():
        invoice = _get_invoice_for_change(company, invoice_id)
        # old date and new date must both be open
        assert_period_open(company, invoice.date, date)

        invoice_type, party_ledger, account_ledger, totals, entries, tax_skipped = _prepare(
            company, invoice_type, party_ledger_id, sales_ledger_id, items, discount_percent
        )
        before = {"grand_total": str(invoice.grand_total), "date": str(invoice.date),
                  "invoice_type": invoice.invoice_type}

        # undo under the pre-edit type and lines
        reverse_invoice_stock(invoice, list(invoice.items.all()))
        invoice.items.all().delete()

        replace_voucher(
            company,
            invoice.voucher_id,
            entries=entries,
            voucher_type=get_or_create_voucher_type(company, VOUCHER_TYPE_NAMES[invoice_type]),
            voucher_number=invoice_number,
            date=date,
            narration=_narration(invoice_number, notes),
            user=user,
            from_document=True,
            allow_unbalanced=tax_skipped,
        )
        _write_header(
            invoice,
            invoice_type=invoice_type,
            invoice_number=invoice_number,
            date=date,
            party_ledger=party_ledger,
            account_ledger=account_ledger,
            totals=totals,
            due_date=due_date,
            notes=notes,
            original_invoice_number=original_invoice_number,
            original_invoice_date=original_invoice_date,
        )
        apply_invoice_stock(invoice)
        log_action(action="update", instance=invoice, user=user,
                   changes={"before": before,
                            "after": {"grand_total": str(invoice.grand_total),
                                      "date": str(invoice.date),
                                      "invoice_type": invoice.invoice_type}})

    logger.info("Updated invoice %s grand_total=%s", invoice.invoice_number, invoice.grand_total)
    return invoice


def delete_invoice(company, invoice_id, user=None):
    with transaction.atomic():
        invoice = _get_invoice_for_change(company, invoice_id)
        assert_period_open(company, invoice.date)

        reverse_invoice_stock(invoice)
        voucher_id = invoice.voucher_id
        log_action(action="delete", instance=invoice, user=user,
                   changes={"invoice_number": invoice.invoice_number,
                            "grand_total": str(invoice.grand_total)})
        invoice.items.all().delete()
        invoice.delete()
        if voucher_id:
            void_voucher(company, voucher_id, user=user)

    logger.info("Deleted invoice %s (%s)", invoice.invoice_number, invoice_id)
