from django.contrib import admin

from ledger_core.models import FinancialYear

from .actions import close_years, reopen_years
from .mixins import TenantAdminMixin


# Register `FinancialYear` model
@admin.register(FinancialYear)
class FinancialYearAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = (
        "id", "company", "name", "start_date", "end_date", "is_active", "is_closed")
    list_filter = ("company", "is_active", "is_closed")
    search_fields = ("name",)
    actions = [close_years, reopen_years]
    # closing / reopening goes through the actions so it's audited
    readonly_fields = ("is_closed",)
