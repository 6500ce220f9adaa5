from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from ..managers import PropertyUserManager, UserManager

ROLE_CHOICES = [
    ("property_owner", "Property owner"),
    ("co_owner", "Co-owner"),
    ("accountant", "Accountant"),
    ("tenant", "Tenant"),
    ("super_admin", "Super admin"),
]

ACCESS_STATUS_CHOICES = [
    ("pending", "Pending"),
    ("approved", "Approved"),
    ("rejected", "Rejected"),
]


# ---------- Custom User ----------
class User(AbstractUser):
    """
    Before the very first migrate,
    'AUTH_USER_MODEL = "rent_ledger.User"' must be in settings.py
    """
    full_name = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=32, blank=True)

    # Global role; only "super_admin" bypasses per-property access checks
    role = models.CharField(
        max_length=20, choices=ROLE_CHOICES, default="property_owner"
    )

    objects = UserManager()

    @property
    def is_super_admin(self):
        return self.role == "super_admin"

    def __str__(self):
        return self.full_name or self.get_full_name() or self.username


# ---------- PropertyUser ----------
class PropertyUser(models.Model):  # Join model between User and Property

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="property_memberships",
    )
    property = models.ForeignKey(
        "Property", on_delete=models.CASCADE, related_name="memberships"
    )

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="co_owner")

    # Access requests start pending until a property owner decides
    status = models.CharField(
        max_length=10, choices=ACCESS_STATUS_CHOICES, default="pending"
    )

    # Share of collected rent this user receives at settlement
    ownership_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    """
        The sum of ownership_percent over approved owners of one property
        should not exceed 100. It is not enforced here: anything below 100
        is left unallocated at settlement time (see ownership_total()).
    """

    created_at = models.DateTimeField(auto_now_add=True)

    objects = PropertyUserManager()

    class Meta:
        # one access row per user per property
        constraints = [
            models.UniqueConstraint(
                fields=["user", "property"], name="uq_user_property_membership"
            ),
        ]
        indexes = [
            models.Index(fields=["property", "status"], name="pu_property_status_idx"),
        ]

    def __str__(self):
        return f"{self.user} @ {self.property} ({self.role}, {self.status})"

    def clean(self):
        if self.ownership_percent is not None and not (
            Decimal("0") <= self.ownership_percent <= Decimal("100")
        ):
            raise ValidationError("ownership_percent must be between 0 and 100")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
