from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company
from .ledger_group import LedgerGroup


class EntrySide(models.TextChoices):
    DEBIT = "Dr", "Debit"
    CREDIT = "Cr", "Credit"

    @property
    def opposite(self):
        return EntrySide.CREDIT if self == EntrySide.DEBIT else EntrySide.DEBIT


class Ledger(models.Model):
    """
    An account in the chart of accounts.
    - opening_balance is a magnitude; opening_balance_type gives its side
    - the group's type (not the ledger) decides the sign convention
    - current_balance is an informational cache; entries are the source of truth
    """

    company = models.ForeignKey(  # Each ledger belongs to one company
        Company,
        on_delete=models.CASCADE,
    )
    group = models.ForeignKey(
        LedgerGroup,
        on_delete=models.PROTECT,
        related_name="ledgers",
    )
    name = models.CharField(
        max_length=200
    )  # Human-readable name → "Cash", "Output CGST", "Acme Traders".

    opening_balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    opening_balance_type = models.CharField(
        max_length=2,
        choices=EntrySide.choices,
        default=EntrySide.DEBIT,
    )
    current_balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    # Party master data (customers / suppliers are ledgers too)
    state = models.CharField(max_length=100, blank=True, default="")
    gstin = models.CharField(max_length=15, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    created_at = models.DateTimeField(
        auto_now_add=True
    )

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "name"], name="ledger_company_name_idx"),
            models.Index(fields=["company", "group"], name="ledger_company_group_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_ledger_name"
            ),
            models.CheckConstraint(
                condition=models.Q(opening_balance__gte=0),
                name="ledger_opening_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.company.slug}:{self.name}"

    def clean(self):
        """Enforce company consistency (multi-tenancy)"""
        if self.group_id and self.group.company_id != self.company_id:
            raise ValidationError(
                "LedgerGroup must belong to the same company as Ledger."
            )
        if self.opening_balance is not None and self.opening_balance < 0:
            raise ValidationError(
                "Opening balance is a magnitude; use opening_balance_type for the side"
            )

    def save(self, *args, **kwargs):
        if not self.pk:
            # A fresh ledger's cache starts at its opening balance
            self.current_balance = self.opening_balance or Decimal("0.00")
        self.full_clean()
        return super().save(*args, **kwargs)
