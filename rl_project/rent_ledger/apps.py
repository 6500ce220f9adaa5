from django.apps import AppConfig


class RentLedgerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "rent_ledger"
    verbose_name = "Rent ledger"

    # ensure receivers are registered
    def ready(self):
        import rent_ledger.signals  # noqa: F401
