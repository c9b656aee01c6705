from django.contrib import admin

from ledger_core.models import Company, GSTSettings

from .mixins import TenantAdminMixin


# Register `Company` model in admin with this custom config
@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    """a clean admin table for browsing companies"""

    # columns shown in company list view
    list_display = ("id", "name", "slug", "state", "gstin", "created_at")
    search_fields = ("name", "slug", "gstin")  # enable search by name, slug and GSTIN
    ordering = ("name",)  # sort companies alphabetically by default


@admin.register(GSTSettings)
class GSTSettingsAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "igst_ledger", "cgst_ledger", "sgst_ledger")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "igst_ledger", "cgst_ledger", "sgst_ledger")
