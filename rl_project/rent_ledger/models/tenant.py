from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from ..managers import TenantManager
from .property import Unit


# ---------- Tenant ----------
class Tenant(models.Model):
    # A unit keeps older tenant records after lease succession
    unit = models.ForeignKey(Unit, on_delete=models.CASCADE, related_name="tenants")

    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)

    lease_start = models.DateField()
    lease_end = models.DateField(null=True, blank=True)

    security_deposit = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    # Day of month rent falls due; capped at 28 so it exists in every month
    rent_due_day = models.PositiveSmallIntegerField(
        default=1, validators=[MinValueValidator(1), MaxValueValidator(28)]
    )

    # At most one active tenant per unit is expected, not enforced
    is_active = models.BooleanField(default=True)

    objects = TenantManager()

    class Meta:
        indexes = [models.Index(fields=["unit", "is_active"], name="tenant_unit_active_idx")]

    def __str__(self):
        return self.name

    def clean(self):
        if self.lease_end and self.lease_start and self.lease_end < self.lease_start:
            raise ValidationError("lease_end cannot be before lease_start")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
