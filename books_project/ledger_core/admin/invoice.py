from django.contrib import admin

from ledger_core.models import Invoice, Payment

from .inlines import InvoiceItemInline, PaymentInline
from .mixins import TenantAdminMixin
from .ReadOnly import ReadOnlyAdmin


# Register `Invoice` model
# Invoices are created, edited and deleted through the invoicing service
# (voucher + stock move together), so the admin only browses them.
@admin.register(Invoice)
class InvoiceAdmin(TenantAdminMixin, ReadOnlyAdmin):
    list_display = (
        "id",
        "company",
        "invoice_type",
        "invoice_number",
        "party_ledger",
        "date",
        "due_date",
        "grand_total",
        "outstanding_amount",
        "payment_status",
    )
    list_filter = ("company", "invoice_type", "payment_status", "date")
    search_fields = ("invoice_number", "party_ledger__name")
    inlines = [InvoiceItemInline, PaymentInline]

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        # Use a SQL join so it fetches company & party
        # in the same query as Invoice
        return qs.select_related("company", "party_ledger", "sales_ledger", "voucher")


@admin.register(Payment)
class PaymentAdmin(TenantAdminMixin, ReadOnlyAdmin):
    list_display = ("id", "company", "invoice", "payment_date", "amount", "payment_mode")
    list_filter = ("company", "payment_mode", "payment_date")
    search_fields = ("invoice__invoice_number", "reference_number")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "invoice")
