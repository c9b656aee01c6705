from django.core.exceptions import ValidationError
from django.db import models
from django.utils.text import slugify


# ---------- Tenant / Company ----------
class Company(models.Model):

    """Tenant / Organization"""
    # Store company’s full display name
    name = models.CharField(max_length=200)

    slug = models.SlugField(  # A URL-friendly identifier
        max_length=80, unique=True  # no two companies can have the same slug
    )

    # Registered state, drives the CGST/SGST vs IGST decision
    state = models.CharField(max_length=100, blank=True, default="")
    gstin = models.CharField(max_length=15, blank=True, default="")

    # Store timestamp when the record is first created
    created_at = models.DateTimeField(auto_now_add=True)

    # Meta options
    class Meta:
        verbose_name_plural = "companies"

    # String Representation
    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        # Default slug from the name so tests & seeds can omit it
        if not self.slug:
            base = slugify(self.name) or "company"
            slug = base
            i = 1
            while Company.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f"{base}-{i}"
                i += 1
            self.slug = slug
        return super().save(*args, **kwargs)


# ---------- GST configuration ----------
class GSTSettings(models.Model):
    """
    Explicit tax ledgers a company posts GST into.
    One row per company; any slot may be empty.
    """

    company = models.OneToOneField(
        Company,
        on_delete=models.CASCADE,
        related_name="gst_settings",
    )
    igst_ledger = models.ForeignKey(
        "Ledger",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    cgst_ledger = models.ForeignKey(
        "Ledger",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    sgst_ledger = models.ForeignKey(
        "Ledger",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )

    class Meta:
        verbose_name = "GST settings"
        verbose_name_plural = "GST settings"

    def __str__(self):
        return f"GST settings: {self.company}"

    def clean(self):
        # Can't point company A's tax slot at company B's ledger
        for slot in ("igst_ledger", "cgst_ledger", "sgst_ledger"):
            ledger = getattr(self, slot)
            if ledger and ledger.company_id != self.company_id:
                raise ValidationError(
                    f"{slot} must belong to the same company."
                )

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
