import datetime
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from ledger_core.models import (Company, FinancialYear, GroupType, GSTSettings, Invoice,
                                InvoiceType, Item, Ledger, LedgerGroup, Unit)
from ledger_core.services import create_financial_year, create_invoice

# (name, type, parent)
GROUPS = [
    ("Current Assets", GroupType.ASSET, None),
    ("Cash-in-Hand", GroupType.ASSET, "Current Assets"),
    ("Bank Accounts", GroupType.ASSET, "Current Assets"),
    ("Sundry Debtors", GroupType.ASSET, "Current Assets"),
    ("Current Liabilities", GroupType.LIABILITY, None),
    ("Sundry Creditors", GroupType.LIABILITY, "Current Liabilities"),
    ("Duties & Taxes", GroupType.LIABILITY, "Current Liabilities"),
    ("Sales Accounts", GroupType.INCOME, None),
    ("Purchase Accounts", GroupType.EXPENSE, None),
]

# (name, group, extra fields)
LEDGERS = [
    ("Cash", "Cash-in-Hand", {"opening_balance": Decimal("50000.00")}),
    ("Bank", "Bank Accounts", {}),
    ("Local Customer", "Sundry Debtors", {"state": "same"}),
    ("Outstation Customer", "Sundry Debtors", {"state": "Delhi"}),
    ("Local Supplier", "Sundry Creditors", {"state": "same", "opening_balance_type": "Cr"}),
    ("Sales", "Sales Accounts", {"opening_balance_type": "Cr"}),
    ("Purchase", "Purchase Accounts", {}),
    ("IGST", "Duties & Taxes", {"opening_balance_type": "Cr"}),
    ("CGST", "Duties & Taxes", {"opening_balance_type": "Cr"}),
    ("SGST", "Duties & Taxes", {"opening_balance_type": "Cr"}),
]


def indian_financial_year(today):
    """April 1 to March 31 around today."""
    start_year = today.year if today.month >= 4 else today.year - 1
    return (
        f"FY {start_year}-{str(start_year + 1)[-2:]}",
        datetime.date(start_year, 4, 1),
        datetime.date(start_year + 1, 3, 31),
    )


class Command(BaseCommand):
    help = (
        "Create a demo GST company with a chart of accounts, GST settings, "
        "a stock item and an open financial year."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--company-name",  # Define flag
            default="Demo Traders",
            help="Name of the demo company to create.",
        )
        parser.add_argument(
            "--state", default="Maharashtra", help="Registered state of the company."
        )
        parser.add_argument(
            "--with-invoice",
            action="store_true",
            help="Also post a sample intra-state sales invoice.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        # Read arguments from add_arguments()
        company_name = options["company_name"]
        state = options["state"]

        # 1. Company
        company, created = Company.objects.get_or_create(
            name=company_name, defaults={"state": state}
        )
        if not created:
            self.stdout.write(self.style.WARNING(f"Company {company} already exists; reusing it"))
        self.stdout.write(self.style.SUCCESS(f"Company: {company} ({company.state})"))

        # 2. Ledger groups (parents first)
        groups = {}
        for name, group_type, parent in GROUPS:
            groups[name], _ = LedgerGroup.objects.get_or_create(
                company=company,
                name=name,
                defaults={"group_type": group_type, "parent": groups.get(parent)},
            )

        # 3. Ledgers
        ledgers = {}
        for name, group, extra in LEDGERS:
            fields = dict(extra)
            if fields.get("state") == "same":
                fields["state"] = company.state
            ledgers[name], _ = Ledger.objects.get_or_create(
                company=company, name=name, defaults={"group": groups[group], **fields}
            )
        self.stdout.write(self.style.SUCCESS(f"Created {len(ledgers)} ledgers"))

        # 4. GST settings point at the tax ledgers explicitly
        GSTSettings.objects.update_or_create(
            company=company,
            defaults={
                "igst_ledger": ledgers["IGST"],
                "cgst_ledger": ledgers["CGST"],
                "sgst_ledger": ledgers["SGST"],
            },
        )

        # 5. Unit & item
        unit, _ = Unit.objects.get_or_create(company=company, name="Numbers", defaults={"symbol": "Nos"})
        item, _ = Item.objects.get_or_create(
            company=company,
            name="Widget",
            defaults={
                "unit": unit,
                "hsn_code": "8479",
                "tax_rate": Decimal("18.00"),
                "sales_rate": Decimal("100.00"),
                "purchase_rate": Decimal("70.00"),
                "opening_quantity": Decimal("100"),
            },
        )
        self.stdout.write(self.style.SUCCESS(f"Item: {item} on hand {item.current_quantity}"))

        # 6. Open financial year around today
        fy_name, start, end = indian_financial_year(datetime.date.today())
        fy = FinancialYear.objects.for_company(company).filter(name=fy_name).first()
        if fy is None:
            fy = create_financial_year(company, fy_name, start, end, is_active=True)
        self.stdout.write(self.style.SUCCESS(f"Financial year: {fy.name}"))

        if options["with_invoice"]:
            invoice = create_invoice(
                company,
                invoice_type=InvoiceType.SALES,
                invoice_number=f"INV-{Invoice.objects.for_company(company).count() + 1:04d}",
                date=datetime.date.today(),
                party_ledger_id=ledgers["Local Customer"].pk,
                sales_ledger_id=ledgers["Sales"].pk,
                items=[{"item_id": item.pk, "quantity": "10", "rate": "100"}],
            )
            self.stdout.write(
                self.style.SUCCESS(
                    f"Posted invoice {invoice.invoice_number}: grand total {invoice.grand_total}"
                )
            )

        self.stdout.write(self.style.SUCCESS("GST demo company ready!"))
