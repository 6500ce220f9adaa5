from celery import shared_task
from django.utils import timezone


@shared_task  # register this function as a Celery task
def generate_monthly_invoices(month=None, year=None):
    """Bill all active tenants; defaults to the current month (beat schedule)."""
    # import services lazily to avoid circular imports at module import time
    from .services import generate_invoices

    today = timezone.localdate()
    result = generate_invoices(month or today.month, year or today.year)
    return result.generated_count


@shared_task
def calculate_period_settlements(property_id, month, year):
    from .services import calculate_settlements

    settlements = calculate_settlements(property_id, month, year)
    # Return ids only; Celery results must be serializable
    return [s.pk for s in settlements]
