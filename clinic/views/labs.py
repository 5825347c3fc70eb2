from django.db import transaction
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from clinic.models import LabTest, TestOrder
from clinic.serializers.clinical import LabTestSerializer, TestOrderSerializer
from clinic.services import events


def _orders():
    return TestOrder.objects.select_related('patient', 'doctor__user', 'lab_test')


@api_view(['GET', 'POST'])
def lab_test_list(request):
    if request.method == 'GET':
        return Response(LabTestSerializer(LabTest.objects.order_by('test_name'), many=True).data)

    s = LabTestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    lab_test = s.save()
    return Response(LabTestSerializer(lab_test).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
def test_order_list(request):
    if request.method == 'GET':
        return Response(TestOrderSerializer(_orders().order_by('-order_date'), many=True).data)

    s = TestOrderSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    with transaction.atomic():
        order = s.save()
        events.lab_test_ordered(order, actor=request.user)
    return Response(TestOrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
def test_order_detail(request, order_id):
    order = _orders().filter(pk=order_id).first()
    if order is None:
        raise NotFound('Test order not found')
    previous_status = order.status
    s = TestOrderSerializer(order, data=request.data, partial=True)
    s.is_valid(raise_exception=True)

    new_status = s.validated_data.get('status', previous_status)
    extra = {}
    if new_status != previous_status:
        if new_status == TestOrder.Status.COLLECTED and 'collected_date' not in s.validated_data:
            extra['collected_date'] = timezone.now()
        if new_status == TestOrder.Status.REPORTED and 'reported_date' not in s.validated_data:
            extra['reported_date'] = timezone.now()

    with transaction.atomic():
        order = s.save(**extra)
        if new_status == TestOrder.Status.REPORTED and previous_status != TestOrder.Status.REPORTED:
            events.lab_results_reported(order, actor=request.user)
    return Response(TestOrderSerializer(order).data)
