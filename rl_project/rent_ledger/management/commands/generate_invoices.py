from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from rent_ledger.services import generate_invoices


class Command(BaseCommand):
    help = "Generate one unpaid rent invoice per active tenant for a billing period."

    def add_arguments(self, parser):
        today = timezone.localdate()
        parser.add_argument("--month", type=int, default=today.month,
                            help="Billing month 1-12 (default: current month)")
        parser.add_argument("--year", type=int, default=today.year,
                            help="Billing year (default: current year)")

    def handle(self, *args, **options):
        month, year = options["month"], options["year"]
        try:
            result = generate_invoices(month, year)
        except ValidationError as e:
            raise CommandError("; ".join(e.messages))

        self.stdout.write(self.style.SUCCESS(
            f"Generated {result.generated_count} invoices for {year}-{month:02d}."
        ))
