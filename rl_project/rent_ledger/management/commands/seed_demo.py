import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from rent_ledger.models import Property, PropertyUser, Tenant, Unit
from rent_ledger.services import generate_invoices

User = get_user_model()

# (name, address, type, ownership, [(unit, rent), ...])
DEMO_PROPERTIES = [
    ("Sunset Heights", "45 Main Boulevard, Gulberg III, Lahore", "residential", "single",
     [("Apt 101", "45000"), ("Apt 102", "50000"), ("Apt 201", "55000"), ("Apt 202", "48000")]),
    ("Blue Horizon Plaza", "12 Shahrah-e-Faisal, Karachi", "commercial", "single",
     [("Office A", "120000"), ("Office B", "95000"), ("Office C", "110000")]),
    ("Green Valley Residences", "78 F-7/2, Islamabad", "residential", "multi",
     [("Villa 1", "85000"), ("Villa 2", "90000"), ("Villa 3", "80000")]),
]

# (property index, unit index, name, lease start, due day)
DEMO_TENANTS = [
    (0, 0, "Ahmed Khan", datetime.date(2025, 1, 1), 5),
    (0, 1, "Sara Malik", datetime.date(2025, 3, 1), 1),
    (0, 2, "Bilal Hussain", datetime.date(2024, 6, 15), 10),
    (1, 0, "TechCorp Solutions", datetime.date(2025, 1, 1), 1),
    (1, 1, "Global Trading LLC", datetime.date(2025, 2, 1), 5),
    (2, 0, "Fatima Noor", datetime.date(2025, 4, 1), 1),
    (2, 1, "Usman Ali", datetime.date(2024, 9, 1), 3),
]


class Command(BaseCommand):
    help = "Seed the database with demo properties, units, tenants, owners and invoices."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password", default="demo123", help="Password for the demo users."
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if Property.objects.exists():
            self.stdout.write(self.style.WARNING("Properties already exist; skipping seed."))
            return

        password = options["password"]
        admin, _ = User.objects.get_or_create(
            username="admin", defaults={"full_name": "System Admin", "role": "super_admin"}
        )
        admin.set_password(password)
        admin.save()

        owner, _ = User.objects.get_or_create(
            username="owner", defaults={"full_name": "Imran Qureshi"}
        )
        co_owner, _ = User.objects.get_or_create(
            username="coowner", defaults={"full_name": "Ayesha Siddiqui", "role": "co_owner"}
        )
        for u in (owner, co_owner):
            u.set_password(password)
            u.save()

        properties = []
        for name, address, ptype, ownership, units in DEMO_PROPERTIES:
            prop = Property.objects.create(
                name=name, address=address, type=ptype,
                ownership_type=ownership, total_units=len(units),
            )
            prop.demo_units = [
                Unit.objects.create(property=prop, unit_name=u, monthly_rent=Decimal(rent))
                for u, rent in units
            ]
            properties.append(prop)

            if ownership == "multi":
                PropertyUser.objects.create(user=owner, property=prop, role="property_owner",
                                            status="approved", ownership_percent=Decimal("60"))
                PropertyUser.objects.create(user=co_owner, property=prop, role="co_owner",
                                            status="approved", ownership_percent=Decimal("40"))
            else:
                PropertyUser.objects.create(user=owner, property=prop, role="property_owner",
                                            status="approved", ownership_percent=Decimal("100"))

        for p_idx, u_idx, name, lease_start, due_day in DEMO_TENANTS:
            Tenant.objects.create(
                unit=properties[p_idx].demo_units[u_idx],
                name=name,
                lease_start=lease_start,
                lease_end=lease_start.replace(year=lease_start.year + 2) - datetime.timedelta(days=1),
                rent_due_day=due_day,
                is_active=True,
            )

        today = timezone.localdate()
        result = generate_invoices(today.month, today.year)

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(properties)} properties, {len(DEMO_TENANTS)} tenants "
            f"and {result.generated_count} invoices."
        ))
