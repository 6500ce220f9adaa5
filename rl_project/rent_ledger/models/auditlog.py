from django.conf import settings  # To access global project settings
from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


# ---------- Audit / Event log ----------
class AuditLog(models.Model):  # Append-only trail of every ledger mutation

    # Which user performed the action
    # (Nullable for automated runs, e.g. Celery beat or management commands)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    # e.g. "mark_payment", "reconstruct_history", "calculate_settlements"
    action = models.CharField(max_length=50)
    # Table the record lives in, e.g. "rent_invoices"
    table_name = models.CharField(max_length=100)
    record_id = models.CharField(max_length=100)

    # Before/after snapshots; structured until written, JSON in the database.
    # For display only, never replayed.
    old_value = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    new_value = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["table_name", "record_id"], name="audit_table_record_idx"),
            models.Index(fields=["created_at"], name="audit_created_idx"),
        ]

    def __str__(self):
        time = self.created_at
        return f"[{time:%Y-%m-%d %H:%M}] {self.user} {self.action} {self.table_name}({self.record_id})"

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            raise ValidationError("Audit log entries are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Audit log entries cannot be deleted")
