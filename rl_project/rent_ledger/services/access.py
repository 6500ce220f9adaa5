import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import AccessDenied, NotFound
from ..models import Property, PropertyUser
from .audit_helper import log_action, snapshot
from .validation import parse_decimal

logger = logging.getLogger(__name__)


# ----------------------------
# Access checks
# ----------------------------
def user_can_access_property(user, property_id) -> bool:
    if getattr(user, "is_super_admin", False):
        return True
    return PropertyUser.objects.approved().filter(user=user, property_id=property_id).exists()


def user_is_property_owner(user, property_id) -> bool:
    if getattr(user, "is_super_admin", False):
        return True
    return PropertyUser.objects.approved().filter(
        user=user, property_id=property_id, role="property_owner"
    ).exists()


def require_property_access(user, property_id):
    if not user_can_access_property(user, property_id):
        raise AccessDenied("Access denied")


# ----------------------------
# Access request workflow
# ----------------------------
def request_access(user, property_id, role="co_owner", ownership_percent=None) -> PropertyUser:
    """Ask to join a property; the request stays pending until an owner decides."""
    if not Property.objects.filter(pk=property_id).exists():
        raise NotFound(f"Property {property_id} not found")
    if PropertyUser.objects.filter(user=user, property_id=property_id).exists():
        raise ValidationError("Access request already exists")

    percent = Decimal("0")
    if ownership_percent not in (None, ""):
        percent = parse_decimal(ownership_percent, "ownership_percent")

    return PropertyUser.objects.create(
        user=user,
        property_id=property_id,
        role=role or "co_owner",
        status="pending",
        ownership_percent=percent,
    )


def _decide(property_user_id, acting_user, status: str) -> PropertyUser:
    with transaction.atomic():
        try:
            pu = PropertyUser.objects.select_for_update().get(pk=property_user_id)
        except (PropertyUser.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Property user {property_user_id} not found")

        if not user_is_property_owner(acting_user, pu.property_id):
            logger.warning("User %s tried to %s access on property %s",
                           getattr(acting_user, "pk", None), status, pu.property_id)
            raise AccessDenied(f"Only the property owner can set access to {status}")

        pu.status = status
        pu.save(update_fields=["status"])
        return pu


def approve_access(property_user_id, acting_user) -> PropertyUser:
    pu = _decide(property_user_id, acting_user, "approved")
    log_action(
        action="approve_access",
        table_name="property_users",
        record_id=pu.pk,
        user=acting_user,
        new_value=snapshot(pu),
    )
    return pu


def reject_access(property_user_id, acting_user) -> PropertyUser:
    pu = _decide(property_user_id, acting_user, "rejected")
    log_action(
        action="reject_access",
        table_name="property_users",
        record_id=pu.pk,
        user=acting_user,
        new_value=snapshot(pu),
    )
    return pu
