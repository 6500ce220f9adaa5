from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

PROPERTY_TYPE_CHOICES = [
    ("residential", "Residential"),
    ("commercial", "Commercial"),
]

OWNERSHIP_TYPE_CHOICES = [
    ("single", "Single owner"),
    ("multi", "Multiple owners"),
]


# ---------- Property ----------
class Property(models.Model):
    name = models.CharField(max_length=200)
    address = models.TextField()
    type = models.CharField(
        max_length=20, choices=PROPERTY_TYPE_CHOICES, default="residential"
    )
    ownership_type = models.CharField(
        max_length=10, choices=OWNERSHIP_TYPE_CHOICES, default="single"
    )
    total_units = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "properties"
        ordering = ("-created_at",)

    def __str__(self):
        return self.name


# ---------- Unit ----------
class Unit(models.Model):  # A rentable unit inside a property
    property = models.ForeignKey(
        Property, on_delete=models.CASCADE, related_name="units"
    )
    unit_name = models.CharField(max_length=100)

    # Current asking rent; changing it never rewrites past invoices
    monthly_rent = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )

    class Meta:
        indexes = [models.Index(fields=["property"], name="unit_property_idx")]

    def __str__(self):
        return f"{self.property.name} / {self.unit_name}"
