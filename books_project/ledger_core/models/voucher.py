from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager, VoucherEntryManager
from .company import Company
from .ledger import EntrySide, Ledger


# ---------- Voucher type (Sales, Purchase, Payment, Receipt, Journal...) ----------
class VoucherType(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    name = models.CharField(max_length=50)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_vouchertype_name"
            )
        ]

    def __str__(self):
        return self.name


# ---------- Voucher (Header) & VoucherEntry ----------
class Voucher(models.Model):  # Represents one balanced accounting transaction
    # Multi-tenant: every voucher belongs to a company
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    voucher_type = models.ForeignKey(VoucherType, on_delete=models.PROTECT)

    # Business metadata
    voucher_number = models.CharField(max_length=64)
    date = models.DateField()
    narration = models.TextField(blank=True, default="")

    # Cached Dr-side sum, refreshed on every post/replace
    total_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    # Tie-break for same-day postings in the ledger statement;
    # replace keeps it, so a rewritten voucher keeps its place
    created_at = models.DateTimeField(auto_now_add=True)
    # Track user who created it
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # Speed up listing & filtering
        # (e.g. show all vouchers this month)
        indexes = [
            models.Index(fields=["company", "date"], name="voucher_company_date_idx"),
            models.Index(fields=["company", "voucher_type"], name="voucher_company_type_idx"),
        ]

    def __str__(self):
        return f"{self.voucher_type} {self.voucher_number} {self.date}"

    # Aggregate all debit and credit amounts across voucher’s entries
    def compute_totals(self):
        """Return debits, credits sums for entries"""
        debit = credit = Decimal("0.00")
        for side, total in self.entries.values_list("entry_type").annotate(
            total=models.Sum("amount")
        ):
            if side == EntrySide.DEBIT:
                debit = total or Decimal("0.00")
            else:
                credit = total or Decimal("0.00")
        return debit, credit

    # True if double-entry rule holds: total debits = total credits
    def is_balanced(self, tolerance=Decimal("0.01")):
        debit, credit = self.compute_totals()
        return abs(debit - credit) <= tolerance


class VoucherEntry(models.Model):  # Stores Dr / Cr lines
    """
    Each entry belongs to one voucher and one ledger.
    amount is always positive; entry_type carries the side.
    """

    voucher = models.ForeignKey(
        Voucher,
        on_delete=models.CASCADE,
        related_name="entries",
    )
    # denormalised for tenant scoping & fast per-company filters
    company = models.ForeignKey(Company, on_delete=models.CASCADE)

    # Must point to one Ledger (can’t delete ledger if entries exist → PROTECT)
    ledger = models.ForeignKey(
        Ledger, on_delete=models.PROTECT, related_name="entries"
    )
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    entry_type = models.CharField(max_length=2, choices=EntrySide.choices)

    objects = VoucherEntryManager()

    class Meta:
        # For fast queries like “all entries for this ledger”
        indexes = [
            models.Index(fields=["company", "ledger"], name="ventry_company_ledger_idx"),
            models.Index(fields=["voucher"], name="ventry_voucher_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="voucher_entry_positive_amount",
            ),
        ]
        verbose_name_plural = "voucher entries"

    def __str__(self):
        return f"{self.voucher_id} | {self.ledger.name} | {self.entry_type} {self.amount}"

    def clean(self):
        if self.amount is not None and self.amount <= 0:
            raise ValidationError("Entry amount must be > 0")
        # Prevent “cross-company” contamination
        if self.ledger_id and self.ledger.company_id != self.company_id:
            raise ValidationError(
                "VoucherEntry.ledger must belong to the same company.")
