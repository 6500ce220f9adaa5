from django.contrib import admin

from rent_ledger.models import OwnerSettlement

from .mixins import PropertyScopedAdminMixin


@admin.register(OwnerSettlement)
class OwnerSettlementAdmin(PropertyScopedAdminMixin, admin.ModelAdmin):
    list_display = (
        "property",
        "user",
        "year",
        "month",
        "total_rent",
        "owner_share",
        "amount_distributed",
        "balance",
        "updated_at",
    )
    list_filter = ("property", "year", "month")
    search_fields = ("property__name", "user__username")
    # Figures come from calculate_settlements / record_distribution
    readonly_fields = (
        "property", "user", "month", "year", "total_rent", "owner_share",
        "amount_distributed", "balance", "created_at", "updated_at",
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("property", "user")

    def has_add_permission(self, request):
        return False
