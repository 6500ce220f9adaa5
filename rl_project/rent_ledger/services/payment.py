import calendar
import datetime
import logging
from decimal import Decimal
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.dateparse import parse_date

from ..conf import ledger_setting
from ..exceptions import InvalidAmount, NotFound
from ..models import Payment, RentInvoice, Tenant
from .audit_helper import log_action, snapshot
from .validation import Clock, parse_decimal, to_money, today

logger = logging.getLogger(__name__)

PAYMENT_FIELDS = ("amount", "date", "reference_number", "source", "tenant_name", "notes")


def due_date_for(invoice: RentInvoice, tenant: Optional[Tenant]) -> datetime.date:
    """The tenant's due day in the invoice's month (day 1 without a tenant)."""
    due_day = tenant.rent_due_day if tenant and tenant.rent_due_day else 1
    last_day = calendar.monthrange(invoice.year, invoice.month)[1]
    return datetime.date(invoice.year, invoice.month, min(due_day, last_day))


def payment_status(invoice: RentInvoice, paid: Decimal, tenant: Optional[Tenant],
                   on: datetime.date) -> str:
    if paid >= invoice.amount:
        return "late" if on > due_date_for(invoice, tenant) else "paid"
    return "partial"


# ----------------------------
# Invoice payment workflow
# ----------------------------
def pay_invoice(invoice_id, paid_amount=None, payment_method=None, user=None,
                clock: Optional[Clock] = None) -> RentInvoice:
    """
    Record a payment against one invoice and derive its status.
    Omitting paid_amount pays the invoice in full.
    Locks the invoice row during the operation.
    """
    with transaction.atomic():
        try:
            inv = RentInvoice.objects.select_for_update().get(pk=invoice_id)
        except (RentInvoice.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Invoice {invoice_id} not found")

        if paid_amount is None or paid_amount == "":
            paid = inv.amount
        else:
            paid = parse_decimal(paid_amount, "paid_amount", error_class=InvalidAmount)

        if paid < 0:
            raise InvalidAmount("Payment amount cannot be negative")
        if paid > inv.amount:
            raise InvalidAmount("Payment amount cannot exceed invoice total")

        paid = to_money(paid)
        paid_on = today(clock)
        tenant = Tenant.objects.filter(pk=inv.tenant_id).first()

        old = {"status": inv.status, "paid_amount": inv.paid_amount}

        inv.status = payment_status(inv, paid, tenant, paid_on)
        inv.paid_amount = paid
        inv.paid_date = paid_on
        inv.payment_method = payment_method or ledger_setting("DEFAULT_PAYMENT_METHOD")
        inv.save(update_fields=["status", "paid_amount", "paid_date", "payment_method"])

        log_action(
            action="mark_payment",
            table_name="rent_invoices",
            record_id=inv.pk,
            user=user,
            old_value=old,
            new_value={"status": inv.status, "paid_amount": inv.paid_amount},
        )

    logger.info("Invoice %s marked %s (%s of %s)", inv.pk, inv.status, inv.paid_amount, inv.amount)
    return inv


# ----------------------------
# Incoming payments & auto-matching
# ----------------------------
def find_matching_invoice(amount: Decimal, tolerance=None, lock: bool = False) -> Optional[RentInvoice]:
    """
    First outstanding invoice (newest period first) whose amount is within
    the tolerance of the payment. Tenant identity is not compared.
    """
    tol = Decimal(str(tolerance if tolerance is not None else ledger_setting("AUTO_MATCH_TOLERANCE")))
    # abs(invoice.amount - amount) < tol
    qs = RentInvoice.objects.outstanding().filter(
        amount__gt=amount - tol, amount__lt=amount + tol
    ).order_by("-year", "-month", "-id")
    if lock:
        qs = qs.select_for_update()
    return qs.first()


def auto_match_payment(payment: Payment, user=None) -> Optional[RentInvoice]:
    """Try to settle one outstanding invoice with an unattributed payment."""
    if not (payment.tenant_name or "").strip():
        return None
    if payment.status == "matched":
        return payment.matched_invoice

    with transaction.atomic():
        inv = find_matching_invoice(payment.amount, lock=True)
        if inv is None:
            logger.info("Payment %s (%s) left unmatched", payment.pk, payment.amount)
            return None

        old = snapshot(inv, fields=["status", "paid_amount", "paid_date"])

        # No late/partial distinction for matched payments
        inv.status = "paid"
        inv.paid_amount = payment.amount
        inv.paid_date = payment.date
        inv.save(update_fields=["status", "paid_amount", "paid_date"])

        payment.status = "matched"
        payment.matched_invoice = inv
        payment.save(update_fields=["status", "matched_invoice"])

        log_action(
            action="auto_match_invoice",
            table_name="rent_invoices",
            record_id=inv.pk,
            user=user,
            old_value=old,
            new_value={
                "status": inv.status,
                "paid_amount": inv.paid_amount,
                "paid_date": inv.paid_date,
                "payment_id": payment.pk,
            },
        )

    logger.info("Payment %s matched to invoice %s", payment.pk, inv.pk)
    return inv


def record_payment(data: dict, user=None) -> Payment:
    """
    Store an incoming payment, then try to auto-match it.
    data keys: amount, date, reference_number, source, tenant_name, notes.
    """
    unknown = set(data) - set(PAYMENT_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown payment fields: {', '.join(sorted(unknown))}")

    amount = to_money(parse_decimal(data.get("amount"), "amount"))

    paid_on = data.get("date")
    if isinstance(paid_on, str):
        try:
            paid_on = parse_date(paid_on.strip())
        except ValueError:
            raise ValidationError(f"Invalid payment date: {paid_on}")
    if not isinstance(paid_on, datetime.date):
        raise ValidationError("date is required (YYYY-MM-DD)")

    with transaction.atomic():
        payment = Payment.objects.create(
            amount=amount,
            date=paid_on,
            reference_number=data.get("reference_number") or None,
            source=data.get("source") or "manual",
            tenant_name=data.get("tenant_name") or None,
            notes=data.get("notes") or None,
        )

        auto_match_payment(payment, user=user)

        log_action(
            action="add_payment",
            table_name="payments",
            record_id=payment.pk,
            user=user,
            new_value=snapshot(payment),
        )

    return payment
