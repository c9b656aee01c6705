from django.db import models

# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a company
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    def for_company(self, company):         # Add queryset helper
        return self.filter(company=company) # Apply filter

    def active(self, company):
        return self.filter(
                            company=company, # enforce tenant scoping
                            is_active=True   # only fetch active records
                        )
    # Enables query:
    # FinancialYear.objects.active(request.company)


# Attach TenantQuerySet to .objects
class TenantManager(models.Manager):

    def get_queryset(self): # ensure every model gets TenantQuerySet(so .for_company() is always available)
        return TenantQuerySet(self.model, using=self._db)

    def for_company(self, company): # can call for_company() directly on objects
        return self.get_queryset().for_company(company)

    def active(self, company):
        return self.get_queryset().active(company)


# Voucher entries in replay order: voucher date, then insertion order
class VoucherEntryQuerySet(TenantQuerySet):
    def for_ledger(self, ledger):
        return self.filter(ledger=ledger)

    def between(self, start_date=None, end_date=None):
        qs = self
        if start_date:
            qs = qs.filter(voucher__date__gte=start_date)
        if end_date:
            qs = qs.filter(voucher__date__lte=end_date)
        return qs

    def chronological(self):
        # same-day postings fall back to creation order
        return self.order_by("voucher__date", "voucher__created_at", "voucher_id", "id")


class VoucherEntryManager(TenantManager):
    def get_queryset(self):
        return VoucherEntryQuerySet(self.model, using=self._db)

