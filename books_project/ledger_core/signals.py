from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .exceptions import ConflictError
from .models import Company, FinancialYear, Voucher

"""
    Block deletion if any voucher is dated inside the year.
    Ledgers and invoices need no receiver: VoucherEntry.ledger and
    Payment.invoice are PROTECT, so the ORM refuses those deletes itself.
"""


# pre_delete signal auto-fires just before Django deletes a model instance
@receiver(pre_delete, sender=FinancialYear)
def prevent_delete_year_with_vouchers(sender, instance, origin=None, **kwargs):
    # deleting the whole company takes its years and vouchers together
    if isinstance(origin, Company):
        return
    if Voucher.objects.filter(
        company_id=instance.company_id,
        date__gte=instance.start_date,
        date__lte=instance.end_date,
    ).exists():
        raise ConflictError("Cannot delete a financial year with vouchers in its range.")
