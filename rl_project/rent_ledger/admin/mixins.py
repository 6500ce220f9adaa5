from ..models import PropertyUser


class PropertyScopedAdminMixin:
    """
    Limit admin rows to properties the user has approved access to.
    `property_lookup` is the ORM path from the model to its Property,
    e.g. "property" for Unit, "unit__property" for Tenant.
    """

    property_lookup = "property"

    def _allowed_property_ids(self, request):
        return PropertyUser.objects.approved().filter(
            user=request.user
        ).values_list("property_id", flat=True)

    def _sees_everything(self, request):
        user = request.user
        return user.is_superuser or getattr(user, "is_super_admin", False)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if self._sees_everything(request):
            return qs
        return qs.filter(
            **{f"{self.property_lookup}__in": self._allowed_property_ids(request)}
        ).distinct()

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        # Restrict property dropdowns the same way as the change list
        if db_field.name == "property" and not self._sees_everything(request):
            kwargs["queryset"] = db_field.related_model.objects.filter(
                pk__in=self._allowed_property_ids(request)
            )
        return super().formfield_for_foreignkey(db_field, request, **kwargs)
