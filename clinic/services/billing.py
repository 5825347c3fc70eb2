"""
Billing operations.

The amount paid on a bill is never stored; it is always the sum of the
bill's payments.  :func:`create_payment` keeps that sum at or below the
bill total: it locks the bill row, re-reads the current sum and inserts
the payment only if the new total still fits, all inside one
transaction.  Concurrent payments against the same bill are therefore
serialised on databases that honour ``SELECT ... FOR UPDATE``.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

import structlog
from django.db import transaction
from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce
from rest_framework.exceptions import NotFound

from clinic.exceptions import BillCancelled, PaymentExceedsBalance
from clinic.models import Bill, Payment
from clinic.services import events

logger = structlog.get_logger(__name__)

_ZERO = Value(Decimal('0.00'), output_field=DecimalField(max_digits=12, decimal_places=2))


def bills_with_totals():
    """Bills annotated with ``paid_total`` so that a listing needs a single query."""
    return (
        Bill.objects.select_related('patient')
        .annotate(paid_total=Coalesce(Sum('payments__amount'), _ZERO))
        .order_by('-bill_date')
    )


def payments_for_bill(bill_id):
    if not Bill.objects.filter(pk=bill_id).exists():
        raise NotFound('Bill not found')
    return Payment.objects.filter(bill_id=bill_id).order_by('payment_date')


@transaction.atomic
def create_bill(patient, total_amount: Decimal, due_date=None, description: Optional[str] = None,
                actor=None) -> Bill:
    bill = Bill.objects.create(
        patient=patient, total_amount=total_amount, due_date=due_date, description=description,
    )
    events.bill_generated(bill, actor=actor)
    logger.info('bill_created', bill_id=str(bill.id), patient_id=str(patient.id), total=str(total_amount))
    return bill


@transaction.atomic
def cancel_bill(bill_id, actor=None) -> Bill:
    bill = Bill.objects.select_for_update().filter(pk=bill_id).first()
    if bill is None:
        raise NotFound('Bill not found')
    if not bill.is_cancelled:
        bill.is_cancelled = True
        bill.save(update_fields=['is_cancelled'])
        logger.info('bill_cancelled', bill_id=str(bill.id))
    return bill


def paid_total(bill_id) -> Decimal:
    total = Payment.objects.filter(bill_id=bill_id).aggregate(total=Sum('amount'))['total']
    return total if total is not None else Decimal('0.00')


def create_payment(bill_id, amount: Decimal, payment_method: str, transaction_id: Optional[str] = None,
                   notes: Optional[str] = None, actor=None) -> Payment:
    """Record a payment against a bill.

    Raises ``NotFound`` for an unknown bill, :class:`BillCancelled` for a
    cancelled one and :class:`PaymentExceedsBalance` when the payment would
    take the paid total above the bill total.  Nothing is written when any
    of these is raised.
    """
    amount = Decimal(amount)
    with transaction.atomic():
        bill = Bill.objects.select_for_update().select_related('patient').filter(pk=bill_id).first()
        if bill is None:
            raise NotFound('Bill not found')
        if bill.is_cancelled:
            logger.warning('payment_rejected', bill_id=str(bill_id), reason='cancelled')
            raise BillCancelled()

        already_paid = paid_total(bill.pk)
        if already_paid + amount > bill.total_amount:
            logger.warning(
                'payment_rejected', bill_id=str(bill_id), reason='exceeds_total',
                amount=str(amount), paid=str(already_paid), total=str(bill.total_amount),
            )
            raise PaymentExceedsBalance()

        payment = Payment.objects.create(
            bill=bill,
            amount=amount,
            payment_method=payment_method,
            transaction_id=transaction_id or None,
            notes=notes,
        )
        events.payment_received(payment, actor=actor)

    logger.info('payment_accepted', bill_id=str(bill_id), payment_id=str(payment.id), amount=str(amount))
    return payment
