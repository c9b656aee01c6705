from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company
from .item import Item
from .ledger import Ledger
from .voucher import Voucher


class InvoiceType(models.TextChoices):
    SALES = "SALES", "Sales"
    PURCHASE = "PURCHASE", "Purchase"
    CREDIT_NOTE = "CREDIT_NOTE", "Credit Note"
    DEBIT_NOTE = "DEBIT_NOTE", "Debit Note"


class PaymentStatus(models.TextChoices):
    UNPAID = "UNPAID", "Unpaid"
    PARTIAL = "PARTIAL", "Partially paid"
    PAID = "PAID", "Paid"


def derive_payment_status(paid_amount, grand_total):
    """UNPAID (paid=0), PARTIAL (0<paid<grand), PAID (paid>=grand)"""
    if paid_amount >= grand_total and paid_amount > 0:
        return PaymentStatus.PAID
    if paid_amount > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


class Invoice(models.Model):  # Sales / purchase / credit-note / debit-note document

    # Invoice belongs to one company (multi-tenant)
    company = models.ForeignKey(Company, on_delete=models.CASCADE)

    # Backing voucher, 1:1. Null only while the invoice is being created.
    voucher = models.OneToOneField(
        Voucher,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="invoice",
    )
    party_ledger = models.ForeignKey(
        Ledger, on_delete=models.PROTECT, related_name="party_invoices"
    )
    # Sales / purchase / returns ledger
    sales_ledger = models.ForeignKey(
        Ledger, on_delete=models.PROTECT, related_name="account_invoices"
    )
    invoice_type = models.CharField(max_length=12, choices=InvoiceType.choices)

    # Identifiers and key dates
    # human-readable (e.g. "INV-2025-001"); uniqueness is the caller's job
    invoice_number = models.CharField(max_length=64)
    date = models.DateField()  # issue date
    due_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")

    # Credit / debit notes point back at the invoice they adjust
    original_invoice_number = models.CharField(max_length=64, blank=True, default="")
    original_invoice_date = models.DateField(null=True, blank=True)

    # Totals (subtotal is net of line discounts, before invoice discount)
    subtotal = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    tax_total = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    discount_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    grand_total = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    # Written by the payment service
    paid_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    outstanding_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    payment_status = models.CharField(
        max_length=8, choices=PaymentStatus.choices, default=PaymentStatus.UNPAID
    )

    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # Optimize for fast lookups by invoice number or party
        indexes = [
            models.Index(fields=["company", "invoice_number"], name="invoice_company_number_idx"),
            models.Index(fields=["company", "party_ledger"], name="invoice_company_party_idx"),
            models.Index(fields=["company", "invoice_type", "date"], name="invoice_company_type_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=0),
                name="inv_paid_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.get_invoice_type_display()} {self.invoice_number}"

    def refresh_payment_state(self):
        """Keep outstanding = grand - paid and the derived status in sync."""
        self.outstanding_amount = self.grand_total - self.paid_amount
        self.payment_status = derive_payment_status(self.paid_amount, self.grand_total)

    def has_payments(self):
        return self.payments.exists()

    def clean(self):
        # Ensure both ledgers belong to the same company
        for field in ("party_ledger", "sales_ledger"):
            ledger = getattr(self, field, None)
            if ledger is not None and ledger.company_id != self.company_id:
                raise ValidationError(f"{field} must belong to the same company.")
        if self.paid_amount > self.grand_total:
            raise ValidationError("Paid amount cannot exceed grand total")


class InvoiceItem(models.Model):  # Each line describes a product/service on the invoice

    invoice = models.ForeignKey(
        Invoice, on_delete=models.CASCADE, related_name="items")

    # Optional stock item; service lines leave it empty
    item = models.ForeignKey(
        Item,
        null=True,
        blank=True,
        # Prevent deleting item which has been invoiced
        on_delete=models.PROTECT,
    )
    description = models.TextField(blank=True, default="")

    quantity = models.DecimalField(max_digits=14, decimal_places=4)
    rate = models.DecimalField(max_digits=18, decimal_places=4)
    amount = models.DecimalField(max_digits=18, decimal_places=2)  # qty * rate
    discount_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    taxable_amount = models.DecimalField(max_digits=18, decimal_places=2)

    tax_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00"))
    cgst_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00"))
    cgst_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    sgst_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00"))
    sgst_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    igst_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00"))
    igst_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=18, decimal_places=2)

    class Meta:
        ordering = ("id",)
        # Ensure quantity & rate are never negative
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0) & models.Q(rate__gte=0),
                name="invitem_non_negative_amounts",
            ),
        ]

    def __str__(self):
        return f"Invoice: {self.invoice.invoice_number} - Item: {self.item or self.description} - Total: {self.total_amount}"


class Payment(models.Model):  # Settlement against an invoice, backed by its own voucher
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # An invoice with payments cannot be edited or deleted
    invoice = models.ForeignKey(
        Invoice, on_delete=models.PROTECT, related_name="payments"
    )
    voucher = models.OneToOneField(
        Voucher,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="payment",
    )
    payment_date = models.DateField()
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    payment_mode = models.CharField(max_length=30, default="Cash")
    reference_number = models.CharField(max_length=64, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "invoice"], name="payment_company_invoice_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="payment_positive_amount",
            ),
        ]

    def __str__(self):
        return f"Payment {self.amount} → Inv: {self.invoice.invoice_number}"
