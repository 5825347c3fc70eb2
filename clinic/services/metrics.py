"""
Dashboard aggregates for administrators.

Every figure is computed from the current rows: revenue from recorded
payments, occupancy from bed status and the department split from
appointments.
"""
from __future__ import annotations

import calendar
from datetime import date, datetime, time
from decimal import Decimal

from django.db.models import Count, Sum
from django.utils import timezone

from clinic.models import Appointment, Bed, Department, Patient, Payment

REVENUE_MONTHS = 6


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _month_start(year: int, month: int) -> datetime:
    return timezone.make_aware(datetime.combine(date(year, month, 1), time.min))


def _revenue(qs) -> Decimal:
    return qs.aggregate(total=Sum('amount'))['total'] or Decimal('0')


def revenue_by_month(months: int = REVENUE_MONTHS, today: date | None = None) -> list[dict]:
    """Payments per calendar month, oldest first, ending with the current month."""
    today = today or timezone.localdate()
    rows = []
    for offset in range(months - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -offset)
        next_year, next_month = _shift_month(year, month, 1)
        total = _revenue(Payment.objects.filter(
            payment_date__gte=_month_start(year, month),
            payment_date__lt=_month_start(next_year, next_month),
        ))
        rows.append({'month': calendar.month_abbr[month], 'revenue': float(total)})
    return rows


def patients_by_department() -> list[dict]:
    qs = Department.objects.annotate(
        patients=Count('doctors__appointments__patient', distinct=True),
    ).order_by('name')
    return [{'name': d.name, 'patients': d.patients} for d in qs]


def bed_occupancy() -> int:
    total = Bed.objects.count()
    if not total:
        return 0
    occupied = Bed.objects.filter(status=Bed.Status.OCCUPIED).count()
    return round(occupied / total * 100)


def dashboard_metrics() -> dict:
    occupancy = bed_occupancy()
    return {
        'totalRevenue': float(_revenue(Payment.objects.all())),
        'activePatients': Patient.objects.count(),
        'bedOccupancy': occupancy,
        'pendingAppointments': Appointment.objects.filter(status=Appointment.Status.SCHEDULED).count(),
        'revenueData': revenue_by_month(),
        'departmentData': patients_by_department(),
        'occupancyData': [
            {'name': 'Occupied', 'value': occupancy},
            {'name': 'Available', 'value': 100 - occupancy},
        ],
    }
