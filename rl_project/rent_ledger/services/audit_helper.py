from typing import Iterable, Optional

from django.forms.models import model_to_dict

from ..models import AuditLog


def snapshot(instance, fields: Optional[Iterable[str]] = None) -> dict:
    """Structured before/after state of a model instance for the audit trail."""
    data = model_to_dict(instance, fields=fields)
    if fields is None or "id" in fields:
        data["id"] = instance.pk
    return data


def log_action(
    *,
    action: str,
    table_name: str,
    record_id,
    user=None,
    old_value: dict | None = None,
    new_value: dict | None = None,
) -> AuditLog:
    """
    Central audit logger.
    Pure append; serialization to JSON happens in the model field.
    """
    # Anonymous users (unauthenticated requests) are stored as NULL
    if user is not None and not getattr(user, "is_authenticated", False):
        user = None

    return AuditLog.objects.create(
        user=user,
        action=action,
        table_name=table_name,
        record_id=str(record_id),
        old_value=old_value,
        new_value=new_value,
    )
