import logging

from django.db import transaction

from ..exceptions import ConflictError, NotFoundError, PeriodLockedError
from ..models import FinancialYear, Voucher
from .audit_helper import log_action

logger = logging.getLogger(__name__)


def is_locked(company, date):
    """
    Document date determines the period.
    A date with no financial year covering it is not locked.
    """
    return FinancialYear.objects.filter(
        company=company,
        start_date__lte=date,
        end_date__gte=date,
        is_closed=True,
    ).exists()


def assert_period_open(company, *dates):
    """
    Raise PeriodLockedError if any of the given dates is locked.
    Edits pass both the old and the new date.
    """
    for date in dates:
        if date is not None and is_locked(company, date):
            raise PeriodLockedError(
                company,
                date,
                f"Cannot modify transactions in a closed financial year ({date})",
            )


def _get_year(company, year_id, lock=False):
    qs = FinancialYear.objects.for_company(company)
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=year_id)
    except FinancialYear.DoesNotExist:
        raise NotFoundError(f"Financial year {year_id} not found")


# ----------------------------
# Financial year lifecycle
# ----------------------------
def create_financial_year(company, name, start_date, end_date, is_active=False, user=None):
    with transaction.atomic():
        fy = FinancialYear(
            company=company,
            name=name,
            start_date=start_date,
            end_date=end_date,
        )
        fy.save()  # full_clean() rejects overlaps
        if is_active:
            fy = activate_financial_year(company, fy.pk, user=user)
        log_action(action="create", instance=fy, user=user,
                   changes={"start_date": str(start_date), "end_date": str(end_date)})
    return fy


def activate_financial_year(company, year_id, user=None):
    """Make one year the active one; every other year of the company is deactivated."""
    with transaction.atomic():
        fy = _get_year(company, year_id, lock=True)
        if fy.is_closed:
            raise ConflictError("Cannot activate a closed financial year")

        FinancialYear.objects.for_company(company).exclude(pk=fy.pk).update(is_active=False)
        fy.is_active = True
        fy.save(update_fields=["is_active"])
        log_action(action="activate", instance=fy, user=user)
    return fy


def close_financial_year(company, year_id, user=None):
    with transaction.atomic():
        fy = _get_year(company, year_id, lock=True)
        if fy.is_closed:
            raise ConflictError("Financial year is already closed")

        fy.is_closed = True
        fy.is_active = False  # a closed year can't stay the posting default
        fy.save(update_fields=["is_closed", "is_active"])
        log_action(action="close", instance=fy, user=user)
    logger.info("Closed financial year %s for company %s", fy.name, company.pk)
    return fy


def reopen_financial_year(company, year_id, user=None):
    with transaction.atomic():
        fy = _get_year(company, year_id, lock=True)
        if not fy.is_closed:
            raise ConflictError("Financial year is not closed")

        fy.is_closed = False
        fy.save(update_fields=["is_closed"])
        log_action(action="reopen", instance=fy, user=user)
    logger.info("Reopened financial year %s for company %s", fy.name, company.pk)
    return fy


def delete_financial_year(company, year_id, user=None):
    with transaction.atomic():
        fy = _get_year(company, year_id, lock=True)
        has_vouchers = Voucher.objects.for_company(company).filter(
            date__gte=fy.start_date,
            date__lte=fy.end_date,
        ).exists()
        if has_vouchers:
            raise ConflictError(
                "Cannot delete financial year with existing vouchers in its date range"
            )
        log_action(action="delete", instance=fy, user=user,
                   changes={"name": fy.name})
        fy.delete()
