"""
Patient portal.

Every endpoint resolves the caller's own patient record first, so a
patient can only ever see (or, for vitals, add to) their own chart.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from clinic.models import Appointment, HealthVital, Prescription, TestOrder, Vaccination
from clinic.serializers.billing import BillSerializer
from clinic.serializers.clinical import AppointmentSerializer, PrescriptionDetailSerializer, TestOrderSerializer
from clinic.serializers.patients import (
    HealthVitalSerializer,
    PatientEventSerializer,
    PatientSerializer,
    VaccinationSerializer,
)
from clinic.services import billing, events
from clinic.services.profiles import patient_for


@api_view(['GET'])
def portal_patient(request):
    return Response(PatientSerializer(patient_for(request.user)).data)


@api_view(['GET'])
def portal_appointments(request):
    patient = patient_for(request.user)
    qs = (
        Appointment.objects.filter(patient=patient)
        .select_related('patient', 'doctor__user')
        .order_by('-appointment_date', '-start_time')
    )
    return Response(AppointmentSerializer(qs, many=True).data)


@api_view(['GET'])
def portal_prescriptions(request):
    patient = patient_for(request.user)
    qs = (
        Prescription.objects.filter(patient=patient)
        .select_related('patient', 'doctor__user')
        .prefetch_related('medications__medication')
        .order_by('-prescription_date', '-created_at')
    )
    return Response(PrescriptionDetailSerializer(qs, many=True).data)


@api_view(['GET'])
def portal_lab_results(request):
    patient = patient_for(request.user)
    qs = (
        TestOrder.objects.filter(patient=patient)
        .select_related('patient', 'doctor__user', 'lab_test')
        .order_by('-order_date')
    )
    return Response(TestOrderSerializer(qs, many=True).data)


@api_view(['GET'])
def portal_bills(request):
    patient = patient_for(request.user)
    return Response(BillSerializer(billing.bills_with_totals().filter(patient=patient), many=True).data)


@api_view(['GET', 'POST'])
def portal_vitals(request):
    patient = patient_for(request.user)
    if request.method == 'GET':
        qs = HealthVital.objects.filter(patient=patient).order_by('-recorded_date')
        return Response(HealthVitalSerializer(qs, many=True).data)

    s = HealthVitalSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vital = s.save(patient=patient)
    return Response(HealthVitalSerializer(vital).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def portal_vaccinations(request):
    patient = patient_for(request.user)
    qs = (
        Vaccination.objects.filter(patient=patient)
        .select_related('administered_by__user')
        .order_by('-administered_date')
    )
    return Response(VaccinationSerializer(qs, many=True).data)


@api_view(['GET'])
def portal_timeline(request):
    patient = patient_for(request.user)
    return Response(PatientEventSerializer(events.timeline(patient.id), many=True).data)
