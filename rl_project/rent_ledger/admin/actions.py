from django.contrib import admin, messages
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.utils.translation import gettext_lazy as _

from rent_ledger.services import (approve_access, auto_match_payment,
                                  pay_invoice, reject_access)

# ---------- Admin actions ----------
# Every action goes through the service layer so the audit trail
# sees admin changes the same way it sees API changes.


def _report(modeladmin, request, done, total, noun):
    modeladmin.message_user(
        request,
        _("%(done)d of %(total)d %(noun)s updated.") % {
            "done": done, "total": total, "noun": noun,
        },
        level=messages.SUCCESS if done == total else messages.WARNING,
    )


@admin.action(description="Approve selected access requests")
def approve_access_requests(modeladmin, request, queryset):
    done = 0
    for pu in queryset.filter(status="pending"):
        try:
            approve_access(pu.pk, request.user)
            done += 1
        except (PermissionDenied, ObjectDoesNotExist) as e:
            modeladmin.message_user(request, f"{pu}: {e}", level=messages.ERROR)
    _report(modeladmin, request, done, queryset.count(), "access requests")


@admin.action(description="Reject selected access requests")
def reject_access_requests(modeladmin, request, queryset):
    done = 0
    for pu in queryset.filter(status="pending"):
        try:
            reject_access(pu.pk, request.user)
            done += 1
        except (PermissionDenied, ObjectDoesNotExist) as e:
            modeladmin.message_user(request, f"{pu}: {e}", level=messages.ERROR)
    _report(modeladmin, request, done, queryset.count(), "access requests")


""" Pays the full amount; status becomes paid or late by the due day """


@admin.action(description="Mark selected invoices as paid in full")
def mark_invoices_paid(modeladmin, request, queryset):
    done = 0
    for inv in queryset.exclude(status__in=["paid", "late"]):
        try:
            pay_invoice(inv.pk, user=request.user)
            done += 1
        except (ValidationError, ObjectDoesNotExist) as e:
            modeladmin.message_user(request, f"{inv}: {e}", level=messages.ERROR)
    _report(modeladmin, request, done, queryset.count(), "invoices")


@admin.action(description="Retry auto-matching for selected payments")
def rematch_payments(modeladmin, request, queryset):
    done = 0
    for payment in queryset.filter(status="unmatched"):
        if auto_match_payment(payment, user=request.user) is not None:
            done += 1
    _report(modeladmin, request, done, queryset.count(), "payments")
