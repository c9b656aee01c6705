from django.db import models        # ORM base classes to define database tables as Python classes
from .company import Company
from ..managers import TenantManager
from django.core.exceptions import ValidationError  # Built-in way to raise validation errors


# ---------- Financial year (lockable accounting period) ----------
class FinancialYear(models.Model): # Each year is a date range a company books into

    # Every company has its own independent calendar of years
    company = models.ForeignKey(Company,
                                on_delete=models.CASCADE,
                                related_name="financial_years",
                                )

    # Human-readable label for the year
    name = models.CharField(max_length=50)  # Example: "FY 2025-26"

    # Define the exact date range of the year, both ends inclusive
    start_date = models.DateField()
    end_date = models.DateField()

    # The year new documents default into (at most one per company)
    is_active = models.BooleanField(default=False)

    # Indicate whether the books for this year are closed
    is_closed = models.BooleanField(default=False)
    """
        When is_closed=True:
            No voucher or invoice dated inside [start_date, end_date] can be
            created, edited, moved in/out or deleted.
    """

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:

        # for range lookups by the period lock
        indexes = [
                    models.Index(fields=["company", "start_date"], name="fy_company_start_idx"),
                    models.Index(fields=["company", "is_closed"], name="fy_company_closed_idx"),
                ]

        # Prevent duplicate year names inside the same company
        constraints = [
          models.UniqueConstraint(fields=["company", "name"],
                                  name="uq_company_financial_year_name"),
      ]

        # Default query ordering: years are returned sorted by company, then chronologically
        ordering = ("company", "start_date")

    def __str__(self):
        return f"{self.company.slug} {self.name}" # Example: "acme FY 2025-26".

    def contains(self, date):
        return self.start_date <= date <= self.end_date

    def clean(self):
        if self.start_date >= self.end_date:
            raise ValidationError("start_date must be before end_date")

        # Years of one company must not overlap
        overlapping = FinancialYear.objects.filter(
            company_id=self.company_id,
            start_date__lte=self.end_date,
            end_date__gte=self.start_date,
        ).exclude(pk=self.pk)
        if overlapping.exists():
            raise ValidationError(
                "Financial year dates overlap with existing year")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
