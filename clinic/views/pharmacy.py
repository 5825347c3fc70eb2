"""
Medication catalogue, prescriptions, prescription templates and stock
alerts.
"""
from __future__ import annotations

from django.db import transaction
from rest_framework import serializers, status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from clinic.models import Medication, Prescription, PrescriptionTemplate
from clinic.serializers.clinical import (
    MedicationSerializer,
    PrescriptionCreateSerializer,
    PrescriptionDetailSerializer,
    PrescriptionSerializer,
    PrescriptionTemplateSerializer,
)
from clinic.services import events, inventory
from clinic.services.profiles import doctor_for


@api_view(['GET', 'POST'])
def medication_list(request):
    if request.method == 'GET':
        return Response(MedicationSerializer(Medication.objects.order_by('name'), many=True).data)

    s = MedicationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    medication = s.save()
    return Response(MedicationSerializer(medication).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
def prescription_list(request):
    if request.method == 'GET':
        qs = (
            Prescription.objects.select_related('patient', 'doctor__user')
            .order_by('-prescription_date', '-created_at')
        )
        return Response(PrescriptionSerializer(qs, many=True).data)

    s = PrescriptionCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    extra = {}
    if 'doctor' not in s.validated_data:
        extra['doctor'] = doctor_for(request.user)
    with transaction.atomic():
        prescription = s.save(**extra)
        events.prescription_issued(prescription, actor=request.user)
    return Response(PrescriptionDetailSerializer(prescription).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def prescription_detail(request, prescription_id):
    prescription = (
        Prescription.objects.select_related('patient', 'doctor__user')
        .prefetch_related('medications__medication')
        .filter(pk=prescription_id)
        .first()
    )
    if prescription is None:
        raise NotFound('Prescription not found')
    return Response(PrescriptionDetailSerializer(prescription).data)


@api_view(['GET', 'POST'])
def prescription_template_list(request):
    doctor = doctor_for(request.user)
    if request.method == 'GET':
        qs = PrescriptionTemplate.objects.filter(doctor=doctor).order_by('template_name')
        return Response(PrescriptionTemplateSerializer(qs, many=True).data)

    s = PrescriptionTemplateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    template = s.save(doctor=doctor)
    return Response(PrescriptionTemplateSerializer(template).data, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
def prescription_template_detail(request, template_id):
    doctor = doctor_for(request.user)
    deleted, _ = PrescriptionTemplate.objects.filter(pk=template_id, doctor=doctor).delete()
    if not deleted:
        raise NotFound('Prescription template not found')
    return Response(status=status.HTTP_204_NO_CONTENT)


class ExpiringQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, min_value=0, max_value=3650)


@api_view(['GET'])
def inventory_expiring(request):
    q = ExpiringQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = inventory.expiring_medications(q.validated_data.get('days'))
    return Response(MedicationSerializer(qs, many=True).data)


@api_view(['GET'])
def inventory_low_stock(request):
    return Response(MedicationSerializer(inventory.low_stock_medications(), many=True).data)
