from django.contrib import admin

from ledger_core.models import Item, StockMovement, Unit

from .actions import rebuild_quantities
from .mixins import TenantAdminMixin
from .ReadOnly import ReadOnlyAdmin


@admin.register(Unit)
class UnitAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "name", "symbol")
    list_filter = ("company",)


# Register `Item` model
@admin.register(Item)
class ItemAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "name", "hsn_code", "tax_rate", "current_quantity")
    search_fields = ("name", "hsn_code")
    list_filter = ("company",)
    actions = [rebuild_quantities]
    # only the inventory service moves stock
    readonly_fields = ("current_quantity",)


@admin.register(StockMovement)
class StockMovementAdmin(TenantAdminMixin, ReadOnlyAdmin):
    list_display = (
        "id", "company", "item", "document_type", "document_number",
        "quantity", "reason", "created_at")
    list_filter = ("company", "document_type", "reason")
    search_fields = ("item__name", "document_number")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "item")
