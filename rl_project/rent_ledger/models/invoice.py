from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from ..managers import RentInvoiceManager
from .property import Unit
from .tenant import Tenant

INV_STATUS_CHOICES = [
    ("unpaid", "Unpaid"),
    ("partial", "Partially paid"),
    ("paid", "Paid"),
    ("late", "Paid late"),
]


class RentInvoice(models.Model):  # One month of rent billed to one tenant

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name="invoices")
    # Denormalized from tenant.unit so unit/period scans need no join
    unit = models.ForeignKey(Unit, on_delete=models.CASCADE, related_name="invoices")

    # Billing period
    month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    year = models.PositiveSmallIntegerField()

    # Billed amount, copied from the unit's rent at generation time
    amount = models.DecimalField(max_digits=12, decimal_places=2)

    status = models.CharField(max_length=10, choices=INV_STATUS_CHOICES, default="unpaid")
    """ Workflow:
        unpaid  = billed, nothing received.
        partial = something received, less than amount.
        paid    = settled on or before the due day.
        late    = settled after the due day. """

    paid_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    paid_date = models.DateField(null=True, blank=True)
    payment_method = models.CharField(max_length=30, null=True, blank=True)

    # "INV-YYYYMM-<tenant>" or "HIST-YYYYMM-<unit>", unique by convention only
    receipt_number = models.CharField(max_length=64, null=True, blank=True)

    # True for invoices backfilled by history reconstruction
    is_historical = models.BooleanField(default=False)
    notes = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    objects = RentInvoiceManager()

    class Meta:
        # Newest period first; the auto-matcher relies on this order
        ordering = ("-year", "-month", "-id")

        indexes = [
            models.Index(fields=["year", "month"], name="inv_period_idx"),
            models.Index(fields=["unit", "year", "month"], name="inv_unit_period_idx"),
            models.Index(fields=["status"], name="inv_status_idx"),
        ]

        constraints = [
            # A tenant is billed at most once per period
            models.UniqueConstraint(
                fields=["tenant", "month", "year"],
                name="uq_invoice_tenant_period",
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gte=0) & models.Q(paid_amount__gte=0),
                name="rent_invoice_non_negative_amounts",
            ),
        ]

    def __str__(self):
        return self.receipt_number or f"Invoice {self.pk}"

    @property
    def outstanding_amount(self):
        return max(self.amount - (self.paid_amount or Decimal("0.00")), Decimal("0.00"))

    def clean(self):
        if self.unit_id and self.tenant_id and self.tenant.unit_id != self.unit_id:
            raise ValidationError("Invoice unit must match the tenant's unit")
        if self.paid_amount is not None and self.amount is not None:
            if self.status == "unpaid" and self.paid_amount > 0:
                raise ValidationError("An unpaid invoice cannot carry a paid amount")

    def save(self, *args, **kwargs):
        # Period uniqueness is left to the database constraint so that
        # concurrent generators see an IntegrityError they can skip
        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)

    """ Invoices only go away with their tenant or unit (cascade) """

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "Rent invoices cannot be deleted directly; delete the tenant or unit instead."
        )
