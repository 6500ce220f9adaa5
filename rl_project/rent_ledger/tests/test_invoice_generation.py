from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.test import TestCase, TransactionTestCase

from ..models import AuditLog, RentInvoice
from ..services import generate_invoices
from .factories import make_invoice, make_property, make_tenant, make_unit


class InvoiceGenerationTests(TestCase):
    def setUp(self):
        self.prop = make_property()
        self.unit_a = make_unit(self.prop, "Apt 101", "45000.00")
        self.unit_b = make_unit(self.prop, "Apt 102", "50000.00")
        self.tenant_a = make_tenant(self.unit_a, "Ahmed Khan", due_day=5)
        self.tenant_b = make_tenant(self.unit_b, "Sara Malik")

    def test_bills_each_active_tenant_at_unit_rent(self):
        result = generate_invoices(3, 2025)

        self.assertEqual(result.generated_count, 2)
        by_tenant = {inv.tenant_id: inv for inv in result.invoices}
        inv = by_tenant[self.tenant_a.pk]
        self.assertEqual(inv.amount, Decimal("45000.00"))
        self.assertEqual(inv.status, "unpaid")
        self.assertEqual(inv.paid_amount, Decimal("0.00"))
        self.assertEqual(inv.unit_id, self.unit_a.pk)
        self.assertEqual(inv.receipt_number, f"INV-202503-{self.tenant_a.pk}")
        self.assertFalse(inv.is_historical)

    def test_second_run_for_same_period_creates_nothing(self):
        first = generate_invoices(3, 2025)
        second = generate_invoices(3, 2025)

        self.assertEqual(first.generated_count, 2)
        self.assertEqual(second.generated_count, 0)
        self.assertEqual(RentInvoice.objects.for_period(3, 2025).count(), 2)

    def test_only_missing_tenants_are_billed(self):
        make_invoice(self.tenant_a, 3, 2025)

        result = generate_invoices(3, 2025)

        self.assertEqual([inv.tenant_id for inv in result.invoices], [self.tenant_b.pk])

    def test_inactive_tenants_are_skipped(self):
        self.tenant_b.is_active = False
        self.tenant_b.save()

        result = generate_invoices(4, 2025)

        self.assertEqual(result.generated_count, 1)
        self.assertEqual(result.invoices[0].tenant_id, self.tenant_a.pk)

    def test_two_active_tenants_sharing_a_unit_are_both_billed(self):
        make_tenant(self.unit_a, "Bilal Hussain")

        result = generate_invoices(5, 2025)

        self.assertEqual(RentInvoice.objects.for_period(5, 2025).filter(unit=self.unit_a).count(), 2)
        self.assertEqual(result.generated_count, 3)

    def test_other_periods_do_not_count_as_billed(self):
        make_invoice(self.tenant_a, 2, 2025)

        result = generate_invoices(3, 2025)

        self.assertEqual(result.generated_count, 2)

    def test_rejects_invalid_month(self):
        for bad in (0, 13, None, "march"):
            with self.assertRaises(ValidationError):
                generate_invoices(bad, 2025)
        self.assertFalse(RentInvoice.objects.exists())

    def test_writes_one_audit_entry_per_run(self):
        generate_invoices(3, 2025)

        logs = AuditLog.objects.filter(action="generate_invoices")
        self.assertEqual(logs.count(), 1)
        log = logs.get()
        self.assertEqual(log.record_id, "2025-03")
        self.assertEqual(log.new_value["generated"], 2)

    def test_database_rejects_duplicate_period_for_tenant(self):
        make_invoice(self.tenant_a, 3, 2025)

        # concurrent generators rely on this constraint
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                make_invoice(self.tenant_a, 3, 2025)

    def test_invoices_cannot_be_deleted_directly(self):
        inv = make_invoice(self.tenant_a, 3, 2025)

        with self.assertRaises(ValidationError):
            inv.delete()
        self.assertTrue(RentInvoice.objects.filter(pk=inv.pk).exists())

    def test_deleting_tenant_cascades_and_is_audited(self):
        make_invoice(self.tenant_a, 3, 2025)
        tenant_pk = self.tenant_a.pk

        self.tenant_a.delete()

        self.assertFalse(RentInvoice.objects.filter(tenant_id=tenant_pk).exists())
        self.assertTrue(
            AuditLog.objects.filter(action="delete_tenant", record_id=str(tenant_pk)).exists()
        )


class ConcurrentGenerationTests(TransactionTestCase):
    """Real commits, so the per-invoice savepoint is exercised as in production."""

    def setUp(self):
        prop = make_property()
        self.tenant_a = make_tenant(make_unit(prop, "Apt 101"), "Ahmed Khan")
        self.tenant_b = make_tenant(make_unit(prop, "Apt 102"), "Sara Malik")

    def test_invoice_committed_by_another_run_is_skipped(self):
        # Another generator billed tenant A after this run read the period
        make_invoice(self.tenant_a, 3, 2025)
        with mock.patch.object(RentInvoice.objects, "for_period",
                               return_value=RentInvoice.objects.none()):
            result = generate_invoices(3, 2025)

        self.assertEqual([inv.tenant_id for inv in result.invoices], [self.tenant_b.pk])
        self.assertEqual(RentInvoice.objects.filter(month=3, year=2025).count(), 2)
