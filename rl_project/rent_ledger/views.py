import json
import logging
from functools import wraps

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from .exceptions import AccessDenied, NotFound
from .models import AuditLog, OwnerSettlement
from .services import (approve_access, calculate_settlements,
                       generate_invoices, owner_settlement_summary,
                       pay_invoice, reconstruct_history, record_distribution,
                       record_payment, reject_access, request_access,
                       require_property_access)

logger = logging.getLogger(__name__)


# ---------- JSON helpers ----------
def _money(value):
    return None if value is None else f"{value:.2f}"


def _date(value):
    return value.isoformat() if value else None


def invoice_to_dict(inv):
    return {
        "id": inv.pk,
        "tenant_id": inv.tenant_id,
        "unit_id": inv.unit_id,
        "month": inv.month,
        "year": inv.year,
        "amount": _money(inv.amount),
        "status": inv.status,
        "paid_amount": _money(inv.paid_amount),
        "paid_date": _date(inv.paid_date),
        "payment_method": inv.payment_method,
        "receipt_number": inv.receipt_number,
        "is_historical": inv.is_historical,
        "notes": inv.notes,
    }


def payment_to_dict(p):
    return {
        "id": p.pk,
        "amount": _money(p.amount),
        "date": _date(p.date),
        "reference_number": p.reference_number,
        "source": p.source,
        "tenant_name": p.tenant_name,
        "status": p.status,
        "matched_invoice_id": p.matched_invoice_id,
    }


def settlement_to_dict(s):
    return {
        "id": s.pk,
        "property_id": s.property_id,
        "user_id": s.user_id,
        "month": s.month,
        "year": s.year,
        "total_rent": _money(s.total_rent),
        "owner_share": _money(s.owner_share),
        "amount_distributed": _money(s.amount_distributed),
        "balance": _money(s.balance),
    }


def property_user_to_dict(pu):
    return {
        "id": pu.pk,
        "user_id": pu.user_id,
        "property_id": pu.property_id,
        "role": pu.role,
        "status": pu.status,
        "ownership_percent": _money(pu.ownership_percent),
    }


def _body(request):
    if request.content_type == "application/json":
        try:
            data = json.loads(request.body or b"{}")
        except json.JSONDecodeError:
            raise ValidationError("Malformed JSON body")
        if not isinstance(data, dict):
            raise ValidationError("JSON body must be an object")
        return data
    data = request.POST.dict()
    data.pop("csrfmiddlewaretoken", None)
    return data


def json_endpoint(view):
    """Translate service errors into JSON error responses."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except NotFound as e:
            return JsonResponse({"error": str(e)}, status=404)
        except AccessDenied as e:
            logger.warning("Access denied for user %s on %s", request.user.pk, request.path)
            return JsonResponse({"error": str(e) or "Access denied"}, status=403)
        except ValidationError as e:
            logger.warning("Rejected %s %s: %s", request.method, request.path, e.messages)
            return JsonResponse({"error": "; ".join(e.messages)}, status=400)
    return wrapper


# ---------- Invoices ----------
@login_required
@require_POST
@json_endpoint
def generate_invoices_view(request):
    data = _body(request)
    result = generate_invoices(data.get("month"), data.get("year"), user=request.user)
    return JsonResponse(
        {
            "generated": result.generated_count,
            "invoices": [invoice_to_dict(i) for i in result.invoices],
        },
        status=201,
    )


@login_required
@require_POST
@json_endpoint
def pay_invoice_view(request, invoice_id):
    data = _body(request)
    inv = pay_invoice(
        invoice_id,
        paid_amount=data.get("paid_amount"),
        payment_method=data.get("payment_method"),
        user=request.user,
    )
    return JsonResponse(invoice_to_dict(inv))


# ---------- Payments ----------
@login_required
@require_POST
@json_endpoint
def record_payment_view(request):
    payment = record_payment(_body(request), user=request.user)
    return JsonResponse(payment_to_dict(payment), status=201)


# ---------- History ----------
@login_required
@require_POST
@json_endpoint
def reconstruct_history_view(request, unit_id):
    data = _body(request)
    result = reconstruct_history(
        unit_id,
        data.get("current_rent"),
        data.get("yearly_increase_percent"),
        start_year=data.get("start_year"),
        start_month=data.get("start_month"),
        user=request.user,
    )
    return JsonResponse(
        {
            "generated": result.generated_count,
            "yearly_rents": [
                {"year": yr.year, "rent": _money(yr.rent)} for yr in result.yearly_rents
            ],
            "invoices": [invoice_to_dict(i) for i in result.invoices],
        },
        status=201,
    )


# ---------- Settlements ----------
@login_required
@require_POST
@json_endpoint
def calculate_settlements_view(request, property_id):
    require_property_access(request.user, property_id)
    data = _body(request)
    settlements = calculate_settlements(
        property_id, data.get("month"), data.get("year"), user=request.user
    )
    return JsonResponse([settlement_to_dict(s) for s in settlements], safe=False, status=201)


@login_required
@require_GET
@json_endpoint
def property_settlements_view(request, property_id):
    require_property_access(request.user, property_id)
    rows = OwnerSettlement.objects.filter(property_id=property_id)
    return JsonResponse([settlement_to_dict(s) for s in rows], safe=False)


@login_required
@require_GET
def my_settlements_view(request):
    rows = OwnerSettlement.objects.filter(user=request.user)
    summary = owner_settlement_summary(request.user)
    return JsonResponse({
        "settlements": [settlement_to_dict(s) for s in rows],
        "summary": {k: _money(v) for k, v in summary.items()},
    })


@login_required
@require_POST
@json_endpoint
def record_distribution_view(request, settlement_id):
    settlement = OwnerSettlement.objects.filter(pk=settlement_id).first()
    if settlement is None:
        raise NotFound(f"Settlement {settlement_id} not found")
    require_property_access(request.user, settlement.property_id)
    data = _body(request)
    settlement = record_distribution(settlement_id, data.get("amount"), user=request.user)
    return JsonResponse(settlement_to_dict(settlement))


# ---------- Property access ----------
@login_required
@require_POST
@json_endpoint
def request_access_view(request, property_id):
    data = _body(request)
    pu = request_access(
        request.user,
        property_id,
        role=data.get("role") or "co_owner",
        ownership_percent=data.get("ownership_percent"),
    )
    return JsonResponse(property_user_to_dict(pu), status=201)


@login_required
@require_POST
@json_endpoint
def approve_access_view(request, property_user_id):
    pu = approve_access(property_user_id, request.user)
    return JsonResponse(property_user_to_dict(pu))


@login_required
@require_POST
@json_endpoint
def reject_access_view(request, property_user_id):
    pu = reject_access(property_user_id, request.user)
    return JsonResponse(property_user_to_dict(pu))


# ---------- Audit ----------
@login_required
@require_GET
@json_endpoint
def audit_log_view(request):
    if not request.user.is_super_admin:
        raise AccessDenied("Only super admins can view audit logs")
    rows = AuditLog.objects.select_related("user")[:200]
    return JsonResponse(
        [
            {
                "id": log.pk,
                "user_id": log.user_id,
                "action": log.action,
                "table_name": log.table_name,
                "record_id": log.record_id,
                "old_value": log.old_value,
                "new_value": log.new_value,
                "created_at": log.created_at.isoformat(),
            }
            for log in rows
        ],
        safe=False,
    )
