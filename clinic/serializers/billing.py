from decimal import Decimal

from rest_framework import serializers

from clinic.models import Bill, Payment
from clinic.serializers.base import CamelModelSerializer, CamelSerializer

MONEY = {'max_digits': 10, 'decimal_places': 2}


class BillSerializer(CamelModelSerializer):
    """Bill with its derived payment figures.

    ``paidAmount``, ``balance`` and ``status`` are read-only: they are
    computed from the bill's payments and are never accepted as input.
    """
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    paid_amount = serializers.DecimalField(read_only=True, **MONEY)
    balance = serializers.DecimalField(read_only=True, **MONEY)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = Bill
        fields = (
            'id', 'patient', 'patient_name', 'bill_date', 'total_amount', 'paid_amount', 'balance',
            'status', 'due_date', 'description', 'is_cancelled',
        )
        read_only_fields = ('id', 'bill_date', 'is_cancelled')
        extra_kwargs = {'total_amount': {'min_value': Decimal('0.00')}}


class PaymentSerializer(CamelModelSerializer):
    class Meta:
        model = Payment
        fields = ('id', 'bill', 'payment_date', 'amount', 'payment_method', 'transaction_id', 'notes')
        read_only_fields = fields


class PaymentCreateSerializer(CamelSerializer):
    # a plain UUID so that an unknown bill is reported as 404 by the billing service
    bill_id = serializers.UUIDField()
    amount = serializers.DecimalField(min_value=Decimal('0.01'), **MONEY)
    payment_method = serializers.CharField(max_length=50)
    transaction_id = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PaymentQuerySerializer(CamelSerializer):
    bill_id = serializers.UUIDField()
