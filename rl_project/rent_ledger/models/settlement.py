from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .property import Property


# ---------- Owner settlement ----------
class OwnerSettlement(models.Model):  # One owner's share of one property's rent for one period
    property = models.ForeignKey(
        Property, on_delete=models.CASCADE, related_name="settlements"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="settlements"
    )
    month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    year = models.PositiveSmallIntegerField()

    # Rent actually collected for the property in the period (not billed)
    total_rent = models.DecimalField(max_digits=14, decimal_places=2)
    # total_rent * ownership_percent / 100
    owner_share = models.DecimalField(max_digits=14, decimal_places=2)
    # Paid out to the owner so far
    amount_distributed = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    # owner_share - amount_distributed
    balance = models.DecimalField(max_digits=14, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-year", "-month", "property", "user")

        constraints = [
            # A recalculation updates the period's row instead of adding one
            models.UniqueConstraint(
                fields=["property", "user", "month", "year"],
                name="uq_settlement_owner_period",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "year", "month"], name="settle_prop_period_idx"),
            models.Index(fields=["user"], name="settle_user_idx"),
        ]

    def __str__(self):
        return f"{self.property} {self.year}-{self.month:02d} → {self.user}: {self.owner_share}"

    def recompute_balance(self):
        self.balance = self.owner_share - self.amount_distributed

    def clean(self):
        if self.amount_distributed is not None and self.amount_distributed < 0:
            raise ValidationError("amount_distributed cannot be negative")

    def save(self, *args, **kwargs):
        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)
