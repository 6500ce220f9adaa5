import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from ..exceptions import InvalidAmount, NotFound
from ..models import AuditLog, Payment, RentInvoice
from ..services import pay_invoice, record_payment
from .factories import fixed_clock, make_invoice, make_property, make_tenant, make_unit


class PayInvoiceTests(TestCase):
    def setUp(self):
        prop = make_property()
        unit = make_unit(prop, rent="1000.00")
        self.tenant = make_tenant(unit, due_day=5)
        self.invoice = make_invoice(self.tenant, 3, 2025, amount="1000.00")

    def test_full_payment_on_due_day_is_paid(self):
        inv = pay_invoice(self.invoice.pk, "1000", clock=fixed_clock(2025, 3, 5))

        self.assertEqual(inv.status, "paid")
        self.assertEqual(inv.paid_amount, Decimal("1000.00"))
        self.assertEqual(inv.paid_date, datetime.date(2025, 3, 5))

    def test_full_payment_after_due_day_is_late(self):
        inv = pay_invoice(self.invoice.pk, "1000", clock=fixed_clock(2025, 3, 6))
        self.assertEqual(inv.status, "late")

    def test_partial_payment_is_partial_regardless_of_date(self):
        for day in (1, 5, 28):
            inv = pay_invoice(self.invoice.pk, "500", clock=fixed_clock(2025, 3, day))
            self.assertEqual(inv.status, "partial")
            self.assertEqual(inv.paid_amount, Decimal("500.00"))

    def test_zero_payment_is_accepted_as_partial(self):
        inv = pay_invoice(self.invoice.pk, "0", clock=fixed_clock(2025, 3, 1))
        self.assertEqual(inv.status, "partial")
        self.assertEqual(inv.paid_amount, Decimal("0.00"))

    def test_omitted_amount_pays_in_full_with_default_method(self):
        inv = pay_invoice(self.invoice.pk, clock=fixed_clock(2025, 3, 2))

        self.assertEqual(inv.paid_amount, Decimal("1000.00"))
        self.assertEqual(inv.status, "paid")
        self.assertEqual(inv.payment_method, "cash")

    @override_settings(RENT_LEDGER={"DEFAULT_PAYMENT_METHOD": "bank_transfer"})
    def test_default_method_comes_from_settings(self):
        inv = pay_invoice(self.invoice.pk, clock=fixed_clock(2025, 3, 2))
        self.assertEqual(inv.payment_method, "bank_transfer")

    def test_explicit_method_is_kept(self):
        inv = pay_invoice(self.invoice.pk, "1000", "cheque", clock=fixed_clock(2025, 3, 2))
        self.assertEqual(inv.payment_method, "cheque")

    def test_amount_out_of_bounds_is_rejected(self):
        for bad in ("-1", "1001", "abc"):
            with self.assertRaises(InvalidAmount):
                pay_invoice(self.invoice.pk, bad, clock=fixed_clock(2025, 3, 1))

        # InvalidAmount is still a ValidationError for generic handlers
        with self.assertRaises(ValidationError):
            pay_invoice(self.invoice.pk, "-1")

        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, "unpaid")
        self.assertEqual(self.invoice.paid_amount, Decimal("0.00"))

    def test_missing_invoice_raises_not_found(self):
        with self.assertRaises(NotFound):
            pay_invoice(999999, "10")

    def test_due_day_28_holds_in_february(self):
        self.tenant.rent_due_day = 28
        self.tenant.save()
        feb = make_invoice(self.tenant, 2, 2025, amount="1000.00")

        inv = pay_invoice(feb.pk, clock=fixed_clock(2025, 2, 28))
        self.assertEqual(inv.status, "paid")

    def test_audit_entry_records_before_and_after(self):
        pay_invoice(self.invoice.pk, "500", clock=fixed_clock(2025, 3, 1))

        log = AuditLog.objects.get(action="mark_payment")
        self.assertEqual(log.table_name, "rent_invoices")
        self.assertEqual(log.record_id, str(self.invoice.pk))
        self.assertEqual(log.old_value["status"], "unpaid")
        self.assertEqual(log.new_value["status"], "partial")
        self.assertEqual(Decimal(log.new_value["paid_amount"]), Decimal("500.00"))


class AutoMatchTests(TestCase):
    def setUp(self):
        prop = make_property()
        unit = make_unit(prop, rent="80000.00")
        self.tenant = make_tenant(unit, "Usman Ali")
        self.invoice = make_invoice(self.tenant, 3, 2025, amount="80000.00")

    def record(self, amount, tenant_name="Usman Ali", date="2025-03-04"):
        return record_payment({"amount": amount, "date": date, "tenant_name": tenant_name})

    def test_payment_within_tolerance_matches(self):
        payment = self.record("79999.50")

        self.assertEqual(payment.status, "matched")
        self.assertEqual(payment.matched_invoice_id, self.invoice.pk)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, "paid")
        self.assertEqual(self.invoice.paid_amount, Decimal("79999.50"))
        self.assertEqual(self.invoice.paid_date, datetime.date(2025, 3, 4))

    def test_payment_outside_tolerance_stays_unmatched(self):
        payment = self.record("78000")

        self.assertEqual(payment.status, "unmatched")
        self.assertIsNone(payment.matched_invoice_id)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, "unpaid")

    def test_difference_of_exactly_one_does_not_match(self):
        payment = self.record("79999.00")
        self.assertEqual(payment.status, "unmatched")

    def test_tenant_name_is_not_compared(self):
        payment = self.record("80000", tenant_name="Someone Else")
        self.assertEqual(payment.status, "matched")

    def test_empty_tenant_name_skips_matching(self):
        payment = self.record("80000", tenant_name="")

        self.assertEqual(payment.status, "unmatched")
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, "unpaid")

    def test_paid_invoices_are_not_candidates(self):
        self.invoice.status = "paid"
        self.invoice.paid_amount = Decimal("80000.00")
        self.invoice.save()

        payment = self.record("80000")
        self.assertEqual(payment.status, "unmatched")

    def test_newest_period_wins(self):
        newer = make_invoice(self.tenant, 4, 2025, amount="80000.00")

        payment = self.record("80000")

        self.assertEqual(payment.matched_invoice_id, newer.pk)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, "unpaid")

    def test_match_is_audited(self):
        payment = self.record("80000")

        self.assertTrue(AuditLog.objects.filter(action="add_payment", record_id=str(payment.pk)).exists())
        log = AuditLog.objects.get(action="auto_match_invoice")
        self.assertEqual(log.record_id, str(self.invoice.pk))
        self.assertEqual(log.new_value["payment_id"], payment.pk)

    def test_invalid_payment_data_is_rejected(self):
        for data in (
            {"date": "2025-03-04"},
            {"amount": "-5", "date": "2025-03-04"},
            {"amount": "0", "date": "2025-03-04", "tenant_name": "Usman Ali"},
            {"amount": "1e30", "date": "2025-03-04"},
            {"amount": "10000000000", "date": "2025-03-04"},
            {"amount": "100"},
            {"amount": "100", "date": "2025-02-30"},
            {"amount": "100", "date": "2025-03-04", "invoice_id": 1},
        ):
            with self.assertRaises(ValidationError):
                record_payment(data)
        self.assertFalse(Payment.objects.exists())
        self.assertEqual(RentInvoice.objects.get(pk=self.invoice.pk).status, "unpaid")
