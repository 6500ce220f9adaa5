from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from ..exceptions import NotFound
from ..models import AuditLog, RentInvoice
from ..services import compute_yearly_rents, reconstruct_history
from .factories import fixed_clock, make_invoice, make_property, make_tenant, make_unit


class YearlyRentTests(SimpleTestCase):
    def test_sequence_is_non_decreasing_and_ends_at_current_rent(self):
        rents = compute_yearly_rents(Decimal("45000"), Decimal("10"), 2015, 2025)

        self.assertEqual([r.year for r in rents], list(range(2015, 2026)))
        self.assertEqual(rents[-1].rent, Decimal("45000"))
        amounts = [r.rent for r in rents]
        self.assertEqual(amounts, sorted(amounts))

    def test_each_year_is_rounded_to_whole_units(self):
        rents = compute_yearly_rents(Decimal("45000"), Decimal("10"), 2023, 2025)

        # 45000 / 1.1 = 40909.09..., / 1.1 again = 37190.08...
        self.assertEqual([r.rent for r in rents], [Decimal("37190"), Decimal("40909"), Decimal("45000")])

    def test_zero_increase_keeps_rent_flat(self):
        rents = compute_yearly_rents(Decimal("30000"), Decimal("0"), 2020, 2022)
        self.assertEqual({r.rent for r in rents}, {Decimal("30000")})

    def test_start_after_current_year_yields_nothing(self):
        self.assertEqual(compute_yearly_rents(Decimal("30000"), Decimal("5"), 2026, 2025), [])

    def test_rent_too_large_to_store_is_rejected(self):
        # near -100% the earlier years grow past what an invoice can hold
        with self.assertRaises(ValidationError):
            compute_yearly_rents(Decimal("45000"), Decimal("-99.9999"), 2015, 2025)


class ReconstructHistoryTests(TestCase):
    clock = staticmethod(fixed_clock(2025, 3, 15))

    def setUp(self):
        self.prop = make_property()
        self.unit = make_unit(self.prop, rent="45000.00")
        self.tenant = make_tenant(self.unit)

    def reconstruct(self, **kwargs):
        kwargs.setdefault("start_year", 2024)
        kwargs.setdefault("start_month", 1)
        return reconstruct_history(self.unit.pk, "45000", "10", clock=self.clock, **kwargs)

    def test_backfills_every_month_up_to_the_current_one(self):
        result = self.reconstruct()

        # 12 months of 2024 plus January to March 2025
        self.assertEqual(result.generated_count, 15)
        periods = sorted((inv.year, inv.month) for inv in result.invoices)
        self.assertEqual(periods[0], (2024, 1))
        self.assertEqual(periods[-1], (2025, 3))

        inv_2024 = RentInvoice.objects.get(unit=self.unit, year=2024, month=6)
        self.assertEqual(inv_2024.amount, Decimal("40909.00"))
        self.assertEqual(inv_2024.status, "unpaid")
        self.assertEqual(inv_2024.paid_amount, Decimal("0.00"))
        self.assertTrue(inv_2024.is_historical)
        self.assertEqual(inv_2024.tenant_id, self.tenant.pk)
        self.assertEqual(inv_2024.receipt_number, f"HIST-202406-{self.unit.pk}")
        self.assertIn("10% annual increase", inv_2024.notes)

    def test_start_month_limits_first_year(self):
        result = self.reconstruct(start_year=2024, start_month=11)
        self.assertEqual(result.generated_count, 5)

    def test_second_run_generates_nothing(self):
        self.reconstruct()
        again = self.reconstruct()

        self.assertEqual(again.generated_count, 0)
        self.assertEqual(RentInvoice.objects.filter(unit=self.unit).count(), 15)

    def test_existing_months_for_unit_are_skipped(self):
        other = make_tenant(self.unit, "Former Tenant", is_active=False)
        make_invoice(other, 5, 2024)

        result = self.reconstruct()

        self.assertEqual(result.generated_count, 14)
        self.assertFalse(any(inv.year == 2024 and inv.month == 5 for inv in result.invoices))

    def test_falls_back_to_oldest_tenant_when_none_active(self):
        self.tenant.is_active = False
        self.tenant.save()
        make_tenant(self.unit, "Later Tenant", is_active=False)

        result = self.reconstruct(start_year=2025)

        self.assertEqual({inv.tenant_id for inv in result.invoices}, {self.tenant.pk})

    def test_unit_without_tenants_gets_nothing(self):
        empty = make_unit(self.prop, "Apt 999")

        result = reconstruct_history(empty.pk, "45000", "10", start_year=2024, clock=self.clock)

        self.assertEqual(result.generated_count, 0)
        self.assertEqual(len(result.yearly_rents), 2)

    def test_default_start_year_comes_from_settings(self):
        result = reconstruct_history(self.unit.pk, "45000", "10", clock=self.clock)
        self.assertEqual(result.yearly_rents[0].year, 2015)

    def test_invalid_input(self):
        for rent, pct in ((None, "10"), ("abc", "10"), ("45000", ""), ("0", "10"), ("45000", "-100"),
                         ("1e40", "10"), ("45000", "-99.9999")):
            with self.assertRaises(ValidationError):
                reconstruct_history(self.unit.pk, rent, pct, clock=self.clock)
        with self.assertRaises(ValidationError):
            self.reconstruct(start_month=13)
        self.assertFalse(RentInvoice.objects.exists())

    def test_missing_unit_raises_not_found(self):
        with self.assertRaises(NotFound):
            reconstruct_history(999999, "45000", "10", clock=self.clock)

    def test_single_audit_entry_for_the_whole_run(self):
        self.reconstruct()

        logs = AuditLog.objects.filter(action="reconstruct_history")
        self.assertEqual(logs.count(), 1)
        self.assertEqual(logs.get().new_value["records"], 15)
