import logging
from decimal import Decimal
from typing import List

from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce

from ..exceptions import InvalidAmount, NotFound
from ..models import OwnerSettlement, Property, PropertyUser, RentInvoice
from .audit_helper import log_action, snapshot
from .validation import parse_decimal, parse_period, to_money

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def collected_rent(property, month: int, year: int) -> Decimal:
    """Sum of paid_amount over the period's invoices for the property's units."""
    unit_ids = property.units.values_list("id", flat=True)
    return RentInvoice.objects.for_period(month, year).for_units(unit_ids).aggregate(
        total=Coalesce(Sum("paid_amount"), ZERO)
    )["total"]


def ownership_total(property) -> Decimal:
    """Sum of ownership_percent over approved owners; should not exceed 100."""
    return PropertyUser.objects.owners(property).aggregate(
        total=Coalesce(Sum("ownership_percent"), ZERO)
    )["total"]


# ----------------------------
# Settlement workflows
# ----------------------------
def calculate_settlements(property_id, month, year, user=None) -> List[OwnerSettlement]:
    """
    Split the rent collected for a property in (month, year) between its
    approved owners by ownership percentage.

    One row per (property, owner, period): recalculating refreshes
    total_rent and owner_share and keeps whatever was already distributed.
    Percentages summing below 100 leave the remainder unallocated.
    """
    month, year = parse_period(month, year)

    with transaction.atomic():
        try:
            # one authoritative run per property at a time
            prop = Property.objects.select_for_update().get(pk=property_id)
        except (Property.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Property {property_id} not found")

        total_rent = to_money(collected_rent(prop, month, year))
        owners = list(PropertyUser.objects.owners(prop).select_related("user").order_by("id"))

        settlements = []
        for owner in owners:
            share = to_money(total_rent * (owner.ownership_percent or ZERO) / 100)
            settlement = OwnerSettlement.objects.select_for_update().filter(
                property=prop, user=owner.user, month=month, year=year
            ).first()
            if settlement is None:
                settlement = OwnerSettlement(
                    property=prop, user=owner.user, month=month, year=year,
                    amount_distributed=ZERO,
                )
            settlement.total_rent = total_rent
            settlement.owner_share = share
            settlement.recompute_balance()
            settlement.save()
            settlements.append(settlement)

        allocated = sum((s.owner_share for s in settlements), ZERO)
        residual = total_rent - allocated
        if residual > 0:
            logger.info("Property %s %s-%02d: %s collected rent left unallocated",
                        prop.pk, year, month, residual)

        log_action(
            action="calculate_settlements",
            table_name="owner_settlements",
            record_id=prop.pk,
            user=user,
            new_value={
                "month": month,
                "year": year,
                "total_rent": total_rent,
                "owners": len(settlements),
                "unallocated": residual,
            },
        )

    logger.info("Settled %s for property %s %s-%02d across %d owners",
                total_rent, prop.pk, year, month, len(settlements))
    return settlements


def record_distribution(settlement_id, amount, user=None) -> OwnerSettlement:
    """Record money paid out to an owner against a settlement row."""
    amount = parse_decimal(amount, "amount", error_class=InvalidAmount)

    with transaction.atomic():
        try:
            settlement = OwnerSettlement.objects.select_for_update().get(pk=settlement_id)
        except (OwnerSettlement.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Settlement {settlement_id} not found")

        if amount <= 0:
            raise InvalidAmount("Distribution amount must be positive")
        if amount > settlement.balance:
            raise InvalidAmount("Distribution exceeds the settlement balance")

        old = snapshot(settlement, fields=["amount_distributed", "balance"])
        settlement.amount_distributed = to_money(settlement.amount_distributed + amount)
        settlement.recompute_balance()
        settlement.save(update_fields=["amount_distributed", "balance", "updated_at"])

        log_action(
            action="record_distribution",
            table_name="owner_settlements",
            record_id=settlement.pk,
            user=user,
            old_value=old,
            new_value=snapshot(settlement, fields=["amount_distributed", "balance"]),
        )

    return settlement


def owner_settlement_summary(user) -> dict:
    totals = OwnerSettlement.objects.filter(user=user).aggregate(
        earned=Coalesce(Sum("owner_share"), ZERO),
        distributed=Coalesce(Sum("amount_distributed"), ZERO),
    )
    return {
        "total_earned": totals["earned"],
        "total_distributed": totals["distributed"],
        "pending_settlement": totals["earned"] - totals["distributed"],
    }
