from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from ..models import Company, FinancialYear, GSTSettings, Invoice, Item, Ledger


class SeedGstCompanyTests(TestCase):
    def test_seed_builds_a_postable_company(self):
        out = StringIO()
        call_command("seed_gst_company", "--company-name", "Seed Co", "--with-invoice", stdout=out)

        company = Company.objects.get(name="Seed Co")
        self.assertEqual(Ledger.objects.for_company(company).count(), 10)
        self.assertIsNotNone(GSTSettings.objects.get(company=company).cgst_ledger)
        self.assertEqual(FinancialYear.objects.active(company).count(), 1)

        invoice = Invoice.objects.for_company(company).get()
        self.assertEqual(invoice.grand_total, Decimal("1180.00"))
        self.assertEqual(Item.objects.for_company(company).get().current_quantity, Decimal("90"))
        self.assertIn("GST demo company ready!", out.getvalue())

    def test_seed_is_rerunnable(self):
        call_command("seed_gst_company", "--company-name", "Seed Co", stdout=StringIO())
        out = StringIO()
        call_command("seed_gst_company", "--company-name", "Seed Co", stdout=out)

        self.assertEqual(Company.objects.filter(name="Seed Co").count(), 1)
        self.assertIn("already exists", out.getvalue())
