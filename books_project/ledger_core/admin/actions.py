from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from ..exceptions import LedgerEngineError
from ..services.inventory import rebuild_item_quantity
from ..services.periods import close_financial_year, reopen_financial_year

# ---------- Admin actions ----------


def _run_for_each(modeladmin, request, queryset, label, func):
    """
    Call func(obj) per selected row; each call is its own atomic unit,
    so one failure doesn't stop the rest.
    """
    success = failures = 0
    for obj in queryset:
        try:
            func(obj)
            success += 1
        except (ValidationError, LedgerEngineError) as exc:
            failures += 1
            modeladmin.message_user(
                request,
                _("Could not %(label)s %(obj)s: %(err)s") % {"label": label, "obj": obj, "err": exc},
                level=messages.ERROR,
            )

    # Final summary message
    modeladmin.message_user(
        request,
        _("%(label)s: %(success)d done, %(failures)d failed.") % {
            "label": label.capitalize(),
            "success": success,
            "failures": failures,
        },
        level=messages.SUCCESS if not failures else messages.WARNING,
    )


@admin.action(description="Close selected financial years")
def close_years(modeladmin, request, queryset):
    user = request.user if request.user.is_authenticated else None
    _run_for_each(modeladmin, request, queryset, "close",
                  lambda fy: close_financial_year(fy.company, fy.pk, user=user))


@admin.action(description="Reopen selected financial years")
def reopen_years(modeladmin, request, queryset):
    user = request.user if request.user.is_authenticated else None
    _run_for_each(modeladmin, request, queryset, "reopen",
                  lambda fy: reopen_financial_year(fy.company, fy.pk, user=user))


@admin.action(description="Rebuild stock quantity from movements")
def rebuild_quantities(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, "rebuild", rebuild_item_quantity)
