"""
Patient records and the per-patient chart: alerts, timeline, vitals and
vaccinations.  Staff only; patients read their own chart through the
portal endpoints.
"""
from __future__ import annotations

from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from clinic.models import HealthVital, Patient, PatientAlert, Vaccination
from clinic.serializers.patients import (
    HealthVitalSerializer,
    PatientAlertSerializer,
    PatientEventSerializer,
    PatientSerializer,
    VaccinationSerializer,
)
from clinic.services import events
from clinic.services.profiles import get_patient


@api_view(['GET', 'POST'])
def patient_list(request):
    if request.method == 'GET':
        qs = Patient.objects.order_by('-created_at')
        return Response(PatientSerializer(qs, many=True).data)

    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = s.save()
    return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
def patient_detail(request, patient_id):
    patient = get_patient(patient_id)
    if request.method == 'GET':
        return Response(PatientSerializer(patient).data)

    if request.method == 'PATCH':
        s = PatientSerializer(patient, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        patient = s.save()
        return Response(PatientSerializer(patient).data)

    # rows that own clinical history are protected and make this fail
    patient.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
def patient_alerts(request, patient_id):
    patient = get_patient(patient_id)
    if request.method == 'GET':
        qs = PatientAlert.objects.filter(patient=patient).order_by('-created_at')
        return Response(PatientAlertSerializer(qs, many=True).data)

    s = PatientAlertSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    with transaction.atomic():
        alert = s.save(patient=patient)
        events.alert_created(alert, actor=request.user)
    return Response(PatientAlertSerializer(alert).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def patient_events(request, patient_id):
    patient = get_patient(patient_id)
    return Response(PatientEventSerializer(events.timeline(patient.id), many=True).data)


@api_view(['GET'])
def health_vitals(request, patient_id):
    patient = get_patient(patient_id)
    qs = HealthVital.objects.filter(patient=patient).order_by('-recorded_date')
    return Response(HealthVitalSerializer(qs, many=True).data)


@api_view(['GET', 'POST'])
def vaccinations(request, patient_id):
    patient = get_patient(patient_id)
    if request.method == 'GET':
        qs = (
            Vaccination.objects.filter(patient=patient)
            .select_related('administered_by__user')
            .order_by('-administered_date')
        )
        return Response(VaccinationSerializer(qs, many=True).data)

    s = VaccinationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    with transaction.atomic():
        vaccination = s.save(patient=patient)
        events.vaccination_administered(vaccination, actor=request.user)
    return Response(VaccinationSerializer(vaccination).data, status=status.HTTP_201_CREATED)
