from django.core.exceptions import ValidationError
from django.db import models

from .invoice import RentInvoice

PAYMENT_SOURCE_CHOICES = [
    ("manual", "Manual entry"),
    ("bank", "Bank statement"),
    ("online", "Online transfer"),
]

PAYMENT_STATUS_CHOICES = [
    ("unmatched", "Unmatched"),
    ("matched", "Matched"),
]


# ---------- Incoming payment ----------
class Payment(models.Model):  # Money received, not yet tied to an invoice
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateField()
    reference_number = models.CharField(max_length=100, null=True, blank=True)
    source = models.CharField(
        max_length=10, choices=PAYMENT_SOURCE_CHOICES, default="manual"
    )
    # Free text as it appeared on the deposit slip / statement
    tenant_name = models.CharField(max_length=200, null=True, blank=True)

    status = models.CharField(
        max_length=10, choices=PAYMENT_STATUS_CHOICES, default="unmatched"
    )
    matched_invoice = models.ForeignKey(
        RentInvoice,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="matched_payments",
    )
    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [models.Index(fields=["status"], name="payment_status_idx")]

    def __str__(self):
        return f"Payment {self.reference_number or self.pk} ({self.amount})"

    def clean(self):
        if self.amount is not None and self.amount <= 0:
            raise ValidationError("Payment amount must be positive")
        if self.status == "matched" and not self.matched_invoice_id:
            raise ValidationError("A matched payment must point to an invoice")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
