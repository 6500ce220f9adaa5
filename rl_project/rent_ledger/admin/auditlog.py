from rent_ledger.models import AuditLog

from django.contrib import admin


# Register `AuditLog` model; entries are append-only, so the admin only views them
@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "action",
        "table_name",
        "record_id",
        "created_at",
    )
    list_filter = ("action", "table_name", "created_at")
    search_fields = ("table_name", "record_id", "action", "user__username")
    date_hierarchy = "created_at"
    list_per_page = 50

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    # View permission alone renders the change form read-only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("user")
