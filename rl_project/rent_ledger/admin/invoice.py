from django.contrib import admin

from rent_ledger.models import Payment, RentInvoice

from .actions import mark_invoices_paid, rematch_payments
from .mixins import PropertyScopedAdminMixin


@admin.register(RentInvoice)
class RentInvoiceAdmin(PropertyScopedAdminMixin, admin.ModelAdmin):
    property_lookup = "unit__property"

    list_display = (
        "receipt_number",
        "tenant",
        "unit",
        "year",
        "month",
        "amount",
        "status",
        "paid_amount",
        "paid_date",
        "is_historical",
    )
    list_filter = ("status", "is_historical", "year", "unit__property")
    search_fields = ("receipt_number", "tenant__name", "unit__unit_name")
    # Amounts change only through pay/match workflows
    readonly_fields = (
        "tenant", "unit", "month", "year", "amount", "status", "paid_amount",
        "paid_date", "payment_method", "receipt_number", "is_historical", "created_at",
    )
    actions = [mark_invoices_paid]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("tenant", "unit__property")

    def has_add_permission(self, request):
        return False

    # RentInvoice.delete() refuses anyway
    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "amount", "tenant_name", "source", "status", "matched_invoice")
    list_filter = ("status", "source")
    search_fields = ("reference_number", "tenant_name")
    readonly_fields = ("status", "matched_invoice", "created_at")
    actions = [rematch_payments]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("matched_invoice")
