import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from django.db import IntegrityError, transaction

from ..models import RentInvoice, Tenant, Unit
from .audit_helper import log_action
from .validation import parse_period

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    generated_count: int
    invoices: List[RentInvoice] = field(default_factory=list)


def receipt_number(month: int, year: int, tenant_id: int) -> str:
    return f"INV-{year}{month:02d}-{tenant_id}"


# ----------------------------
# Monthly invoice generation
# ----------------------------
def generate_invoices(month, year, user=None) -> GenerationResult:
    """
    Bill every active tenant once for (month, year) at their unit's rent.

    Dedup is per tenant, not per unit: two active tenants sharing a unit
    both get an invoice. Tenants already billed for the period are skipped,
    so calling this twice is safe.
    """
    month, year = parse_period(month, year)

    with transaction.atomic():
        active_tenants = list(Tenant.objects.active().order_by("id"))
        already_billed = set(
            RentInvoice.objects.for_period(month, year).values_list("tenant_id", flat=True)
        )
        units = Unit.objects.in_bulk({t.unit_id for t in active_tenants})

        created = []
        for tenant in active_tenants:
            if tenant.id in already_billed:
                continue
            unit = units.get(tenant.unit_id)
            if unit is None:
                logger.warning("Tenant %s has no unit; not billed for %s-%02d",
                               tenant.id, year, month)
                continue
            try:
                # savepoint: a concurrent run may have billed this tenant
                with transaction.atomic():
                    invoice = RentInvoice.objects.create(
                        tenant=tenant,
                        unit=unit,
                        month=month,
                        year=year,
                        amount=unit.monthly_rent,
                        status="unpaid",
                        paid_amount=Decimal("0.00"),
                        receipt_number=receipt_number(month, year, tenant.id),
                    )
            except IntegrityError:
                logger.info("Tenant %s already billed for %s-%02d", tenant.id, year, month)
                continue
            created.append(invoice)

        log_action(
            action="generate_invoices",
            table_name="rent_invoices",
            record_id=f"{year}-{month:02d}",
            user=user,
            new_value={
                "month": month,
                "year": year,
                "generated": len(created),
                "invoice_ids": [inv.pk for inv in created],
            },
        )

    logger.info("Generated %d invoices for %s-%02d", len(created), year, month)
    return GenerationResult(generated_count=len(created), invoices=created)
