from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Units of measure ----------
class Unit(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    name = models.CharField(max_length=50)  # "Numbers"
    symbol = models.CharField(max_length=10, blank=True, default="")  # "Nos"

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_unit_name"
            )
        ]

    def __str__(self):
        return self.symbol or self.name


# ---------- Items (stock-keeping units) ----------
class Item(models.Model):  # Represents something a company sells & purchases

    # Multi-tenant: each item belongs to a company
    company = models.ForeignKey(
        Company,
        # If the company is deleted, its items are deleted too (CASCADE)
        on_delete=models.CASCADE,
    )
    # Required human-readable name of the item
    name = models.CharField(max_length=200)
    hsn_code = models.CharField(max_length=20, blank=True, default="")
    unit = models.ForeignKey(
        Unit,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
    )

    # GST rate in percent, e.g. 18.00
    tax_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    # store standard prices per product
    sales_rate = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0.00")
    )
    purchase_rate = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0.00")
    )

    opening_quantity = models.DecimalField(
        max_digits=14, decimal_places=4, default=Decimal("0")
    )
    # Projection of opening_quantity + Σ StockMovement.quantity.
    # Only the inventory service writes it.
    current_quantity = models.DecimalField(
        max_digits=14,
        decimal_places=4,  # Allow precise tracking
        default=Decimal("0"),
    )

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # for fast lookups
        indexes = [models.Index(fields=["company", "name"], name="item_company_name_idx")]

    def __str__(self):
        return self.name

    def clean(self):
        if self.unit_id and self.unit.company_id != self.company_id:
            raise ValidationError(
                "Unit must belong to the same company as the item."
            )
        if self.tax_rate is not None and self.tax_rate < 0:
            raise ValidationError("Tax rate must be >= 0")

    def save(self, *args, **kwargs):
        if not self.pk:
            # a new item starts with its opening stock on hand
            self.current_quantity = self.opening_quantity or Decimal("0")
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)


class StockMovement(models.Model):
    """
    Append-only log of signed quantity changes.
    Never updated or deleted by the engine; reversals are new rows.
    """

    REASON_CHOICES = [
        ("apply", "Apply"),
        ("reverse", "Reverse"),
    ]

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    item = models.ForeignKey(
        Item, on_delete=models.CASCADE, related_name="movements"
    )
    # Source document; kept as text too so history survives invoice deletion
    invoice = models.ForeignKey(
        "Invoice",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="stock_movements",
    )
    document_type = models.CharField(max_length=20)
    document_number = models.CharField(max_length=64, blank=True, default="")
    quantity = models.DecimalField(max_digits=14, decimal_places=4)
    reason = models.CharField(max_length=10, choices=REASON_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "item"], name="stockmove_company_item_idx"),
        ]
        ordering = ("id",)

    def __str__(self):
        return f"{self.item} {self.quantity:+} ({self.reason} {self.document_type} {self.document_number})"
