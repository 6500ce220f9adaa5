from django.conf import settings

# Fallbacks for keys missing from settings.RENT_LEDGER
DEFAULTS = {
    "HISTORY_START_YEAR": 2015,
    "AUTO_MATCH_TOLERANCE": "1.00",
    "DEFAULT_PAYMENT_METHOD": "cash",
    "CURRENCY": "PKR",
}


def ledger_setting(name):
    """Look up a rent ledger setting, falling back to DEFAULTS."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown rent ledger setting: {name}")
    overrides = getattr(settings, "RENT_LEDGER", None) or {}
    return overrides.get(name, DEFAULTS[name])
