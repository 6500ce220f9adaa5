import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from ..conf import ledger_setting
from ..exceptions import NotFound
from ..models import RentInvoice, Unit
from .audit_helper import log_action
from .validation import MAX_AMOUNT, Clock, parse_decimal, parse_int, today

logger = logging.getLogger(__name__)


@dataclass
class YearlyRent:
    year: int
    rent: Decimal


@dataclass
class ReconstructionResult:
    generated_count: int
    yearly_rents: List[YearlyRent] = field(default_factory=list)
    invoices: List[RentInvoice] = field(default_factory=list)


def compute_yearly_rents(current_rent: Decimal, yearly_increase_percent: Decimal,
                         start_year: int, current_year: int) -> List[YearlyRent]:
    """
    Back-compute the rent for every year in [start_year, current_year].

    Walks backwards from current_rent, dividing by (1 + rate) for each
    earlier year, and rounds each year to a whole currency unit. Read
    forwards, the result is the start-year rent compounded by the rate.
    Raises ValidationError when an earlier year's rent cannot be stored.
    """
    rate = Decimal(yearly_increase_percent) / Decimal(100)
    rent = Decimal(current_rent)
    rents = []
    for year in range(current_year, start_year - 1, -1):
        try:
            rounded = rent.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            rounded = None
        if rounded is None or rounded >= MAX_AMOUNT:
            raise ValidationError(f"Reconstructed rent for {year} is too large to store")
        rents.append(YearlyRent(year, rounded))
        if year > start_year:
            rent = rent / (1 + rate)
    rents.reverse()
    return rents


def receipt_number(month: int, year: int, unit_id: int) -> str:
    return f"HIST-{year}{month:02d}-{unit_id}"


# ----------------------------
# Historical rent backfill
# ----------------------------
def reconstruct_history(unit_id, current_rent, yearly_increase_percent,
                        start_year=None, start_month=None, user=None,
                        clock: Optional[Clock] = None) -> ReconstructionResult:
    """
    Backfill unpaid historical invoices for a unit, from (start_year,
    start_month) up to the current month, at the reconstructed yearly rent.

    Months that already have any invoice for the unit are skipped, whoever
    the tenant was. New invoices go to the unit's active tenant, or else to
    its oldest tenant record; a unit with no tenants gets nothing.
    """
    rent = parse_decimal(current_rent, "current_rent")
    percent = parse_decimal(yearly_increase_percent, "yearly_increase_percent")
    if rent <= 0:
        raise ValidationError("current_rent must be positive")
    if percent <= -100:
        raise ValidationError("yearly_increase_percent must be greater than -100")

    s_year = parse_int(start_year, "start_year") if start_year not in (None, "") \
        else int(ledger_setting("HISTORY_START_YEAR"))
    s_month = parse_int(start_month, "start_month") if start_month not in (None, "") else 1
    if not 1 <= s_month <= 12:
        raise ValidationError("start_month must be between 1 and 12")

    now = today(clock)
    currency = ledger_setting("CURRENCY")

    with transaction.atomic():
        try:
            # Lock the unit so two backfills of it cannot interleave
            unit = Unit.objects.select_for_update().get(pk=unit_id)
        except (Unit.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Unit {unit_id} not found")

        yearly_rents = compute_yearly_rents(rent, percent, s_year, now.year)

        tenants = list(unit.tenants.order_by("id"))
        tenant = next((t for t in tenants if t.is_active), tenants[0] if tenants else None)
        if tenant is None:
            logger.warning("Unit %s has no tenant records; nothing to reconstruct", unit.pk)

        existing = set(
            RentInvoice.objects.filter(unit=unit).values_list("year", "month")
        )
        if tenant is not None:
            # the tenant may already be billed for a period on another unit
            existing |= set(tenant.invoices.values_list("year", "month"))
        notes = (f"Reconstructed: {yearly_increase_percent}% annual increase "
                 f"from {currency} {current_rent}")

        created = []
        for yr in yearly_rents if tenant else []:
            begin = s_month if yr.year == s_year else 1
            end = now.month if yr.year == now.year else 12
            for month in range(begin, end + 1):
                if (yr.year, month) in existing:
                    continue
                created.append(RentInvoice.objects.create(
                    tenant=tenant,
                    unit=unit,
                    month=month,
                    year=yr.year,
                    amount=yr.rent,
                    status="unpaid",
                    paid_amount=Decimal("0.00"),
                    receipt_number=receipt_number(month, yr.year, unit.pk),
                    is_historical=True,
                    notes=notes,
                ))

        # One entry for the whole backfill, not per invoice
        log_action(
            action="reconstruct_history",
            table_name="rent_invoices",
            record_id=unit.pk,
            user=user,
            new_value={
                "current_rent": rent,
                "yearly_increase_percent": percent,
                "start_year": s_year,
                "start_month": s_month,
                "records": len(created),
            },
        )

    logger.info("Reconstructed %d historical invoices for unit %s", len(created), unit.pk)
    return ReconstructionResult(
        generated_count=len(created), yearly_rents=yearly_rents, invoices=created
    )
