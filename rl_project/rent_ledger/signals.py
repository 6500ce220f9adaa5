import logging

from django.core.exceptions import ValidationError
from django.db.models.signals import post_delete, pre_delete
from django.dispatch import receiver

from .models import AuditLog, Tenant, Unit

logger = logging.getLogger(__name__)

""" Block audit log deletion, including bulk QuerySet.delete() """


# pre_delete also fires for queryset deletes, which skip Model.delete()
@receiver(pre_delete, sender=AuditLog)
def prevent_delete_audit_log(sender, instance, **kwargs):
    raise ValidationError("Audit log entries cannot be deleted.")


"""Record tenant and unit removals, since they cascade to invoices."""


@receiver(post_delete, sender=Tenant)
def tenant_deleted(sender, instance, **kwargs):
    from .services.audit_helper import log_action, snapshot

    log_action(
        action="delete_tenant",
        table_name="tenants",
        record_id=instance.pk,
        old_value=snapshot(instance),
    )
    logger.info("Tenant %s deleted with its invoices", instance.pk)


@receiver(post_delete, sender=Unit)
def unit_deleted(sender, instance, **kwargs):
    from .services.audit_helper import log_action, snapshot

    log_action(
        action="delete_unit",
        table_name="units",
        record_id=instance.pk,
        old_value=snapshot(instance),
    )
