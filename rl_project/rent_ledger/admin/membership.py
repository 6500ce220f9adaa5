from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.translation import gettext_lazy as _

from rent_ledger.models import PropertyUser, User

from .actions import approve_access_requests, reject_access_requests
from .forms import UserAdminChangeForm, UserAdminCreationForm
from .mixins import PropertyScopedAdminMixin


# Extend stock `DjangoUserAdmin`
@admin.register(User)  # Hook custom `User` model into Django Admin
class UserAdmin(DjangoUserAdmin):
    # Use custom forms you defined to create/edit views
    add_form = UserAdminCreationForm
    form = UserAdminChangeForm
    model = User

    list_display = ("username", "email", "full_name", "role", "is_staff")
    list_filter = ("role", "is_staff", "is_superuser", "is_active")
    search_fields = ("username", "email", "full_name")
    ordering = ("username",)

    # Group fields logically on edit user page
    fieldsets = (
        (None, {"fields": ("username", "password")}),
        (_("Personal info"), {"fields":
                              ("full_name", "first_name", "last_name", "email", "phone")}),
        (_("Ledger role"), {"fields": ("role",)}),
        (
            _("Permissions"),
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                ),
            },
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "username",
                    "email",
                    "full_name",
                    "role",
                    "password1",
                    "password2",
                ),
            },
        ),
    )

    # Non-admins only see users sharing one of their properties
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if request.user.is_superuser or request.user.is_super_admin:
            return qs
        property_ids = request.user.property_memberships.approved().values_list(
            "property_id", flat=True
        )
        return qs.filter(property_memberships__property_id__in=property_ids).distinct()


# Register PropertyUser model
@admin.register(PropertyUser)
class PropertyUserAdmin(PropertyScopedAdminMixin, admin.ModelAdmin):
    list_display = ("user", "property", "role", "status", "ownership_percent", "created_at")
    list_filter = ("status", "role", "property")
    search_fields = ("user__username", "user__email", "property__name")
    readonly_fields = ("created_at",)  # prevent tampering with creation date
    ordering = ("property__name", "user__username")
    actions = [approve_access_requests, reject_access_requests]

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        # Fetch everything in one SQL join
        return qs.select_related("property", "user")

    # Only property owners may edit memberships of their property
    def has_change_permission(self, request, obj=None):
        if request.user.is_superuser or request.user.is_super_admin:
            return True
        owned = request.user.property_memberships.approved().filter(role="property_owner")
        if obj is None:
            return owned.exists()
        return owned.filter(property_id=obj.property_id).exists()

    def has_delete_permission(self, request, obj=None):
        return self.has_change_permission(request, obj)
