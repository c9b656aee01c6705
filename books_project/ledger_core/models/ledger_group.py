from django.core.exceptions import ValidationError
from django.db import models  # ORM base classes to define database tables as Python classes

from ..managers import TenantManager
from .company import Company


class GroupType(models.TextChoices):
    # The group type, not the ledger, decides the sign convention
    ASSET = "Asset", "Asset"
    LIABILITY = "Liability", "Liability"
    INCOME = "Income", "Income"
    EXPENSE = "Expense", "Expense"


# Group types whose balance grows on the debit side
DEBIT_NORMAL_GROUPS = frozenset({GroupType.ASSET, GroupType.EXPENSE})


# ---------- Chart of Accounts ----------
class LedgerGroup(models.Model):  # For organizing ledgers into a tree of groups
    # each company has its own set of groups (multi-tenant safe)
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE
    )
    # group’s label (e.g. "Sundry Debtors", "Duties & Taxes")
    name = models.CharField(max_length=100)

    # Optional hierarchy, parent must live in the same company
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        # you can’t delete a parent if children exist
        related_name="children",
    )

    group_type = models.CharField(max_length=10, choices=GroupType.choices)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # Group names repeat across companies
        # but must be unique within one
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"],
                name="uq_company_ledgergroup_name"
            ),
        ]

    def __str__(self):
        return f"{self.company.slug} - {self.name}"  # Example: "acme - Sundry Debtors"

    @property
    def is_debit_normal(self):
        return self.group_type in DEBIT_NORMAL_GROUPS

    def clean(self):
        if self.parent_id and self.parent.company_id != self.company_id:
            raise ValidationError(
                "Parent group must belong to the same company"
            )

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
