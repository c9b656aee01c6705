from django.contrib import admin

from ledger_core.models import InvoiceItem, Payment, VoucherEntry

# ---------- Read-only inline admin classes ----------


class ReadOnlyInline(admin.TabularInline):
    extra = 0  # don’t show “empty” rows
    can_delete = False
    show_change_link = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


class VoucherEntryInline(ReadOnlyInline):
    """Show Dr / Cr rows on the Voucher page"""

    model = VoucherEntry
    fields = ("ledger", "entry_type", "amount")
    ordering = ("id",)  # entries appear in creation order

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("ledger")


class InvoiceItemInline(ReadOnlyInline):
    """Shows invoice lines under an Invoice page"""

    model = InvoiceItem
    fields = (
        "item", "quantity", "rate", "taxable_amount",
        "cgst_amount", "sgst_amount", "igst_amount", "total_amount")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("item")


class PaymentInline(ReadOnlyInline):
    model = Payment
    fields = ("payment_date", "amount", "payment_mode", "reference_number", "voucher")
