from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from rent_ledger.exceptions import NotFound
from rent_ledger.services import calculate_settlements


class Command(BaseCommand):
    help = "Split a property's collected rent for a period between its approved owners."

    def add_arguments(self, parser):
        parser.add_argument("--property", type=int, required=True, help="Property id")
        parser.add_argument("--month", type=int, required=True)
        parser.add_argument("--year", type=int, required=True)

    def handle(self, *args, **options):
        try:
            settlements = calculate_settlements(
                options["property"], options["month"], options["year"]
            )
        except NotFound as e:
            raise CommandError(str(e))
        except ValidationError as e:
            raise CommandError("; ".join(e.messages))

        for s in settlements:
            self.stdout.write(f"{s.user}: share {s.owner_share} balance {s.balance}")
        self.stdout.write(self.style.SUCCESS(
            f"Settled {len(settlements)} owners for property {options['property']}."
        ))
