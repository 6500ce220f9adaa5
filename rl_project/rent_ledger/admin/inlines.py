from django.contrib import admin

from rent_ledger.models import PropertyUser, RentInvoice, Tenant, Unit

from .forms import TenantAdminForm

# ---------- Helpful inline admin classes ----------


class UnitInline(admin.TabularInline):
    """Show units on the Property page"""

    model = Unit
    extra = 0  # don’t show “empty” rows by default (prevents clutter)
    fields = ("unit_name", "monthly_rent")
    show_change_link = True
    ordering = ("id",)


class PropertyUserInline(admin.TabularInline):
    """Owners and pending requests on the Property page"""

    model = PropertyUser
    extra = 0
    fields = ("user", "role", "status", "ownership_percent", "created_at")
    readonly_fields = ("created_at",)
    ordering = ("-ownership_percent", "id")

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("user")


class TenantInline(admin.TabularInline):
    """Current and past tenants on the Unit page"""

    model = Tenant
    form = TenantAdminForm
    extra = 0
    fields = ("name", "phone", "lease_start", "lease_end", "rent_due_day", "is_active")
    show_change_link = True
    ordering = ("-is_active", "-lease_start")


class RentInvoiceInline(admin.TabularInline):
    """Invoices under a Tenant page; billing happens through the services"""

    model = RentInvoice
    extra = 0
    fields = ("year", "month", "amount", "status", "paid_amount", "paid_date", "receipt_number")
    readonly_fields = fields
    show_change_link = True

    # Generated by the invoicing run, never typed in
    def has_add_permission(self, request, obj=None):
        return False

    # Invoices refuse direct deletion
    def has_delete_permission(self, request, obj=None):
        return False
