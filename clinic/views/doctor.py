"""
Doctor workspace: own profile, schedule and patients, SOAP notes and
referrals between doctors.
"""
from __future__ import annotations

from django.db import transaction
from django.utils import timezone
from rest_framework import serializers, status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from clinic.models import Appointment, Referral, SoapNote
from clinic.serializers.clinical import (
    AppointmentSerializer,
    ReferralSerializer,
    SoapNoteSerializer,
    StatusUpdateSerializer,
)
from clinic.serializers.patients import PatientSerializer
from clinic.serializers.staff import DoctorSerializer
from clinic.services import events
from clinic.services.profiles import doctor_for, doctor_patients


class ScheduleQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


@api_view(['GET'])
def doctor_profile(request):
    return Response(DoctorSerializer(doctor_for(request.user)).data)


@api_view(['GET'])
def doctor_appointments(request):
    doctor = doctor_for(request.user)
    q = ScheduleQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = Appointment.objects.filter(doctor=doctor).select_related('patient', 'doctor__user')
    if q.validated_data.get('date'):
        qs = qs.filter(appointment_date=q.validated_data['date'])
    return Response(AppointmentSerializer(qs.order_by('appointment_date', 'start_time'), many=True).data)


@api_view(['GET'])
def doctor_patient_list(request):
    doctor = doctor_for(request.user)
    return Response(PatientSerializer(doctor_patients(doctor), many=True).data)


@api_view(['GET'])
def soap_note_by_appointment(request, appointment_id):
    note = SoapNote.objects.filter(appointment_id=appointment_id).order_by('-created_at').first()
    # an appointment without a note yet answers an empty object
    return Response(SoapNoteSerializer(note).data if note else {})


@api_view(['POST'])
def soap_note_list(request):
    s = SoapNoteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    note = s.save()
    return Response(SoapNoteSerializer(note).data, status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
def soap_note_detail(request, note_id):
    note = SoapNote.objects.filter(pk=note_id).first()
    if note is None:
        raise NotFound('SOAP note not found')
    s = SoapNoteSerializer(note, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    return Response(SoapNoteSerializer(s.save()).data)


def _referrals():
    return Referral.objects.select_related('patient', 'from_doctor__user', 'to_doctor__user')


@api_view(['GET'])
def referral_sent(request):
    doctor = doctor_for(request.user)
    qs = _referrals().filter(from_doctor=doctor).order_by('-referral_date')
    return Response(ReferralSerializer(qs, many=True).data)


@api_view(['GET'])
def referral_received(request):
    doctor = doctor_for(request.user)
    qs = _referrals().filter(to_doctor=doctor).order_by('-referral_date')
    return Response(ReferralSerializer(qs, many=True).data)


@api_view(['POST'])
def referral_list(request):
    doctor = doctor_for(request.user)
    s = ReferralSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    with transaction.atomic():
        referral = s.save(from_doctor=doctor)
        events.referral_created(referral, actor=request.user)
    return Response(ReferralSerializer(referral).data, status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
def referral_status(request, referral_id):
    referral = _referrals().filter(pk=referral_id).first()
    if referral is None:
        raise NotFound('Referral not found')
    s = StatusUpdateSerializer(data=request.data, choices=Referral.Status.choices)
    s.is_valid(raise_exception=True)
    referral.status = s.validated_data['status']
    if referral.status == Referral.Status.COMPLETED and referral.completed_date is None:
        referral.completed_date = timezone.now()
    referral.save(update_fields=['status', 'completed_date'])
    return Response(ReferralSerializer(referral).data)
