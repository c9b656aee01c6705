from django.conf import settings  # To access global project settings
from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Audit / Event log ----------
class AuditLog(
    models.Model
):  # Gives accountability and traceability across whole system
    # Associate log entry with a tenant (multi-company setup)
    company = models.ForeignKey(
        Company,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    # Which user performed the action
    # (Nullable in case the action was automated
    # (e.g., the recurring-invoice timer or a Celery task))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    # Type of event being logged
    action = models.CharField(
        max_length=50
    )  # Common choices: create, update, delete, close
    # What kind of object was affected
    object_type = models.CharField(
        max_length=100
    )  # (e.g., "Invoice", "Voucher", "FinancialYear")
    # The primary key (or identifier) of the object
    object_id = models.CharField(max_length=100)
    # Store actual before/after details of what changed, in JSON format
    changes = models.JSONField(null=True, blank=True)
    # Timestamp when the event was logged
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # Filter logs quickly
        indexes = [
            models.Index(fields=["company", "created_at"], name="auditlog_company_created_idx"),
        ]

    def __str__(self):
        time = self.created_at
        usr = self.user
        action = self.action
        objType = self.object_type
        objId = self.object_id
        return f"[{time:%Y-%m-%d %H:%M}] {usr} {action} {objType}({objId})"
