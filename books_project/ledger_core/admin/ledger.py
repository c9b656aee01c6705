from django.contrib import admin

from ledger_core.models import Ledger, LedgerGroup

from .mixins import TenantAdminMixin


@admin.register(LedgerGroup)
class LedgerGroupAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "name", "parent", "group_type")
    list_filter = ("company", "group_type")
    search_fields = ("name",)


# Register `Ledger` model
@admin.register(Ledger)
class LedgerAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "company",
        "name",
        "group",
        "opening_balance",
        "opening_balance_type",
        "current_balance",
        "state",
    )
    list_filter = ("company", "group__group_type")
    search_fields = ("name", "gstin", "email")
    # refreshed by the refresh_ledger_balances task, never typed in
    readonly_fields = ("current_balance",)

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "group")
