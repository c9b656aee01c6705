from typing import Optional
from ..models import AuditLog, Company

def log_action(
    *,
    action: str,
    instance,
    user=None,
    company: Optional[Company] = None,
    changes: dict | None = None,
):
    """
    Central audit logger.
    Runs inside the caller's transaction, so a rolled-back mutation leaves no audit row.
    """

    if not company:
        company = getattr(instance, "company", None)

    # anonymous users (no auth layer in tests / tasks) are recorded as NULL
    if user is not None and not getattr(user, "is_authenticated", False):
        user = None

    AuditLog.objects.create(
        company=company,
        user=user,
        action=action,
        object_type=instance.__class__.__name__,
        object_id=str(instance.pk),
        changes=changes,
    )
