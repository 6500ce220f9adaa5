from django.contrib import admin
from django.db.models import Count

from rent_ledger.models import Property, Tenant, Unit

from .forms import TenantAdminForm
from .inlines import PropertyUserInline, RentInvoiceInline, TenantInline, UnitInline
from .mixins import PropertyScopedAdminMixin


@admin.register(Property)
class PropertyAdmin(PropertyScopedAdminMixin, admin.ModelAdmin):
    property_lookup = "pk"

    list_display = ("id", "name", "type", "ownership_type", "total_units", "unit_count", "created_at")
    list_filter = ("type", "ownership_type")
    search_fields = ("name", "address")
    readonly_fields = ("created_at",)
    inlines = [UnitInline, PropertyUserInline]

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.annotate(_unit_count=Count("units", distinct=True))

    @admin.display(description="Units on file", ordering="_unit_count")
    def unit_count(self, obj):
        return obj._unit_count


@admin.register(Unit)
class UnitAdmin(PropertyScopedAdminMixin, admin.ModelAdmin):
    list_display = ("id", "unit_name", "property", "monthly_rent")
    list_filter = ("property",)
    search_fields = ("unit_name", "property__name")
    inlines = [TenantInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("property")


@admin.register(Tenant)
class TenantAdmin(PropertyScopedAdminMixin, admin.ModelAdmin):
    property_lookup = "unit__property"

    form = TenantAdminForm
    list_display = ("name", "unit", "lease_start", "lease_end", "rent_due_day", "is_active")
    list_filter = ("is_active", "unit__property")
    search_fields = ("name", "phone", "email", "unit__unit_name")
    inlines = [RentInvoiceInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("unit__property")
