from datetime import timedelta

from django.conf import settings
from django.db.models import F, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from clinic.models import Medication


def expiring_medications(days: int | None = None):
    """Medications whose expiry date falls between today and ``days`` from now."""
    if days is None:
        days = settings.EXPIRING_MEDICATION_DEFAULT_DAYS
    today = timezone.localdate()
    return Medication.objects.filter(
        expiry_date__isnull=False,
        expiry_date__gte=today,
        expiry_date__lte=today + timedelta(days=days),
    ).order_by('expiry_date')


def low_stock_medications():
    """Medications at or below their reorder level.

    Items without a reorder level use ``LOW_STOCK_DEFAULT_REORDER_LEVEL``.
    """
    threshold = Coalesce(F('reorder_level'), Value(settings.LOW_STOCK_DEFAULT_REORDER_LEVEL))
    return (
        Medication.objects.annotate(threshold=threshold)
        .filter(stock_quantity__lte=F('threshold'))
        .order_by('stock_quantity', 'name')
    )
