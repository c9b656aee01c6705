from decimal import Decimal

from django.contrib import admin
from django.db.models import Prefetch
from django.utils.html import format_html

from ledger_core.models import Voucher, VoucherEntry, VoucherType

from .inlines import VoucherEntryInline
from .mixins import TenantAdminMixin
from .ReadOnly import ReadOnlyAdmin


@admin.register(VoucherType)
class VoucherTypeAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "name")
    list_filter = ("company",)
    search_fields = ("name",)


# Register `Voucher` model; vouchers change only through the posting services
@admin.register(Voucher)
class VoucherAdmin(TenantAdminMixin, ReadOnlyAdmin):
    list_display = (
        "id",
        "company",
        "date",
        "voucher_type",
        "voucher_number",
        "total_amount",
        "balanced",
    )
    list_filter = ("company", "voucher_type", "date")
    search_fields = ("voucher_number", "narration")
    inlines = [VoucherEntryInline]

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "voucher_type").prefetch_related(
            Prefetch("entries", queryset=VoucherEntry.objects.select_related("ledger"))
        )

    """ Computed column for balance check """
    # Show total debits / total credits for each voucher
    @admin.display(description="Debits / Credits")
    def balanced(self, obj):
        d, c = obj.compute_totals()
        # format: bold debits / small credits
        return format_html(
            "<b>{}</b> / <small>{}</small>",
            d or Decimal("0.00"),
            c or Decimal("0.00")
        )


@admin.register(VoucherEntry)
class VoucherEntryAdmin(TenantAdminMixin, ReadOnlyAdmin):
    list_display = ("id", "company", "voucher", "ledger", "entry_type", "amount")
    list_filter = ("company", "entry_type")
    search_fields = ("voucher__voucher_number", "ledger__name")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "voucher", "ledger")
