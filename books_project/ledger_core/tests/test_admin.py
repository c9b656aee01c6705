from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from ..models import Item, StockMovement
from .base import LedgerFixtureMixin


class LedgerAdminTests(LedgerFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.admin_user = get_user_model().objects.create_superuser(
            username="admin", email="admin@example.com", password="pw"
        )
        self.client.force_login(self.admin_user)
        self.invoice = self.make_invoice()

    def test_changelists_render(self):
        for model in ("voucher", "voucherentry", "invoice", "ledger", "financialyear",
                      "stockmovement", "auditlog", "item"):
            response = self.client.get(reverse(f"admin:ledger_core_{model}_changelist"))
            self.assertEqual(response.status_code, 200, model)

    def test_voucher_is_read_only(self):
        url = reverse("admin:ledger_core_voucher_add")
        self.assertEqual(self.client.get(url).status_code, 403)

    def test_close_years_action(self):
        response = self.client.post(
            reverse("admin:ledger_core_financialyear_changelist"),
            {"action": "close_years", "_selected_action": [self.open_year.pk]},
        )
        self.assertEqual(response.status_code, 302)
        self.open_year.refresh_from_db()
        self.assertTrue(self.open_year.is_closed)

    def test_close_action_reports_failures(self):
        # already closed: the service refuses, the action keeps going
        response = self.client.post(
            reverse("admin:ledger_core_financialyear_changelist"),
            {"action": "close_years", "_selected_action": [self.closed_year.pk]},
            follow=True,
        )
        messages = [str(m) for m in response.context["messages"]]
        self.assertTrue(any("already closed" in m for m in messages))

    def test_rebuild_quantities_action(self):
        Item.objects.filter(pk=self.item.pk).update(current_quantity=Decimal("0"))

        self.client.post(
            reverse("admin:ledger_core_item_changelist"),
            {"action": "rebuild_quantities", "_selected_action": [self.item.pk]},
        )

        self.item.refresh_from_db()
        self.assertEqual(self.item.current_quantity, Decimal("40"))
        self.assertEqual(StockMovement.objects.filter(item=self.item).count(), 1)
