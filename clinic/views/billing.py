"""
Bills and payments (administrators only).

Payments go through :func:`clinic.services.billing.create_payment`, which
refuses any payment that would take the amount paid on a bill above its
total.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from clinic.serializers.billing import (
    BillSerializer,
    PaymentCreateSerializer,
    PaymentQuerySerializer,
    PaymentSerializer,
)
from clinic.services import billing


@api_view(['GET', 'POST'])
def bill_list(request):
    if request.method == 'GET':
        return Response(BillSerializer(billing.bills_with_totals(), many=True).data)

    s = BillSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    bill = billing.create_bill(
        vd['patient'],
        vd['total_amount'],
        due_date=vd.get('due_date'),
        description=vd.get('description'),
        actor=request.user,
    )
    return Response(BillSerializer(bill).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
def bill_cancel(request, bill_id):
    bill = billing.cancel_bill(bill_id, actor=request.user)
    return Response(BillSerializer(bill).data)


@api_view(['GET', 'POST'])
def payment_list(request):
    if request.method == 'GET':
        q = PaymentQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = billing.payments_for_bill(q.validated_data['bill_id'])
        return Response(PaymentSerializer(qs, many=True).data)

    s = PaymentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    payment = billing.create_payment(
        vd['bill_id'],
        vd['amount'],
        vd['payment_method'],
        transaction_id=vd.get('transaction_id'),
        notes=vd.get('notes'),
        actor=request.user,
    )
    return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)
