from django.urls import path

from . import views

app_name = "ledger_core"

urlpatterns = [
    path("vouchers/", views.voucher_create_view, name="voucher-create"),
    path("vouchers/<int:voucher_id>/", views.voucher_detail_view, name="voucher-detail"),
    path("invoices/", views.invoice_create_view, name="invoice-create"),
    path("invoices/<int:invoice_id>/", views.invoice_detail_view, name="invoice-detail"),
    path("ledgers/<int:ledger_id>/statement/", views.ledger_statement_view,
         name="ledger-statement"),
    path("financial-years/<int:year_id>/close/", views.financial_year_close_view,
         name="financial-year-close"),
    path("financial-years/<int:year_id>/reopen/", views.financial_year_reopen_view,
         name="financial-year-reopen"),
]
