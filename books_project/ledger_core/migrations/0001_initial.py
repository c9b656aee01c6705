from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Company",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=80, unique=True)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("gstin", models.CharField(blank=True, default="", max_length=15)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name_plural": "companies",
            },
        ),
        migrations.CreateModel(
            name="LedgerGroup",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("group_type", models.CharField(choices=[("Asset", "Asset"), ("Liability", "Liability"), ("Income", "Income"), ("Expense", "Expense")], max_length=10)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("parent", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="children", to="ledger_core.ledgergroup")),
            ],
            options={
                "constraints": [models.UniqueConstraint(fields=("company", "name"), name="uq_company_ledgergroup_name")],
            },
        ),
        migrations.CreateModel(
            name="Ledger",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("opening_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("opening_balance_type", models.CharField(choices=[("Dr", "Debit"), ("Cr", "Credit")], default="Dr", max_length=2)),
                ("current_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("gstin", models.CharField(blank=True, default="", max_length=15)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("group", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="ledgers", to="ledger_core.ledgergroup")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "name"], name="ledger_company_name_idx"),
                    models.Index(fields=["company", "group"], name="ledger_company_group_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "name"), name="uq_company_ledger_name"),
                    models.CheckConstraint(condition=models.Q(("opening_balance__gte", 0)), name="ledger_opening_balance_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="GSTSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("company", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="gst_settings", to="ledger_core.company")),
                ("igst_ledger", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="ledger_core.ledger")),
                ("cgst_ledger", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="ledger_core.ledger")),
                ("sgst_ledger", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="ledger_core.ledger")),
            ],
            options={
                "verbose_name": "GST settings",
                "verbose_name_plural": "GST settings",
            },
        ),
        migrations.CreateModel(
            name="FinancialYear",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("is_active", models.BooleanField(default=False)),
                ("is_closed", models.BooleanField(default=False)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="financial_years", to="ledger_core.company")),
            ],
            options={
                "ordering": ("company", "start_date"),
                "indexes": [
                    models.Index(fields=["company", "start_date"], name="fy_company_start_idx"),
                    models.Index(fields=["company", "is_closed"], name="fy_company_closed_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "name"), name="uq_company_financial_year_name"),
                ],
            },
        ),
        migrations.CreateModel(
            name="VoucherType",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
            ],
            options={
                "constraints": [models.UniqueConstraint(fields=("company", "name"), name="uq_company_vouchertype_name")],
            },
        ),
        migrations.CreateModel(
            name="Voucher",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("voucher_number", models.CharField(max_length=64)),
                ("date", models.DateField()),
                ("narration", models.TextField(blank=True, default="")),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ("voucher_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="ledger_core.vouchertype")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "date"], name="voucher_company_date_idx"),
                    models.Index(fields=["company", "voucher_type"], name="voucher_company_type_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="VoucherEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("entry_type", models.CharField(choices=[("Dr", "Debit"), ("Cr", "Credit")], max_length=2)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("ledger", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="entries", to="ledger_core.ledger")),
                ("voucher", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="entries", to="ledger_core.voucher")),
            ],
            options={
                "verbose_name_plural": "voucher entries",
                "indexes": [
                    models.Index(fields=["company", "ledger"], name="ventry_company_ledger_idx"),
                    models.Index(fields=["voucher"], name="ventry_voucher_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="voucher_entry_positive_amount"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Unit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50)),
                ("symbol", models.CharField(blank=True, default="", max_length=10)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
            ],
            options={
                "constraints": [models.UniqueConstraint(fields=("company", "name"), name="uq_company_unit_name")],
            },
        ),
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("hsn_code", models.CharField(blank=True, default="", max_length=20)),
                ("tax_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("sales_rate", models.DecimalField(decimal_places=4, default=Decimal("0.00"), max_digits=18)),
                ("purchase_rate", models.DecimalField(decimal_places=4, default=Decimal("0.00"), max_digits=18)),
                ("opening_quantity", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=14)),
                ("current_quantity", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=14)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("unit", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to="ledger_core.unit")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"], name="item_company_name_idx")],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("invoice_type", models.CharField(choices=[("SALES", "Sales"), ("PURCHASE", "Purchase"), ("CREDIT_NOTE", "Credit Note"), ("DEBIT_NOTE", "Debit Note")], max_length=12)),
                ("invoice_number", models.CharField(max_length=64)),
                ("date", models.DateField()),
                ("due_date", models.DateField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("original_invoice_number", models.CharField(blank=True, default="", max_length=64)),
                ("original_invoice_date", models.DateField(blank=True, null=True)),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("tax_total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("discount_percent", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("grand_total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("paid_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("outstanding_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("payment_status", models.CharField(choices=[("UNPAID", "Unpaid"), ("PARTIAL", "Partially paid"), ("PAID", "Paid")], default="UNPAID", max_length=8)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("party_ledger", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="party_invoices", to="ledger_core.ledger")),
                ("sales_ledger", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="account_invoices", to="ledger_core.ledger")),
                ("voucher", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="invoice", to="ledger_core.voucher")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "invoice_number"], name="invoice_company_number_idx"),
                    models.Index(fields=["company", "party_ledger"], name="invoice_company_party_idx"),
                    models.Index(fields=["company", "invoice_type", "date"], name="invoice_company_type_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("paid_amount__gte", 0)), name="inv_paid_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoiceItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("description", models.TextField(blank=True, default="")),
                ("quantity", models.DecimalField(decimal_places=4, max_digits=14)),
                ("rate", models.DecimalField(decimal_places=4, max_digits=18)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("discount_percent", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("taxable_amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("tax_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("cgst_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("cgst_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("sgst_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("sgst_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("igst_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("igst_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("invoice", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="ledger_core.invoice")),
                ("item", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to="ledger_core.item")),
            ],
            options={
                "ordering": ("id",),
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity__gte", 0), ("rate__gte", 0)), name="invitem_non_negative_amounts"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("payment_date", models.DateField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("payment_mode", models.CharField(default="Cash", max_length=30)),
                ("reference_number", models.CharField(blank=True, default="", max_length=64)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("invoice", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="ledger_core.invoice")),
                ("voucher", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="payment", to="ledger_core.voucher")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "invoice"], name="payment_company_invoice_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="payment_positive_amount"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("document_type", models.CharField(max_length=20)),
                ("document_number", models.CharField(blank=True, default="", max_length=64)),
                ("quantity", models.DecimalField(decimal_places=4, max_digits=14)),
                ("reason", models.CharField(choices=[("apply", "Apply"), ("reverse", "Reverse")], max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.company")),
                ("invoice", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="stock_movements", to="ledger_core.invoice")),
                ("item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="movements", to="ledger_core.item")),
            ],
            options={
                "ordering": ("id",),
                "indexes": [models.Index(fields=["company", "item"], name="stockmove_company_item_idx")],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=100)),
                ("changes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="ledger_core.company")),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [models.Index(fields=["company", "created_at"], name="auditlog_company_created_idx")],
            },
        ),
    ]
