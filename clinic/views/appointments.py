from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from clinic.models import Appointment, RecurringAppointment
from clinic.serializers.clinical import (
    AppointmentSerializer,
    RecurringAppointmentQuerySerializer,
    RecurringAppointmentSerializer,
)
from clinic.services import events


def _appointments():
    return Appointment.objects.select_related('patient', 'doctor__user')


@api_view(['GET', 'POST'])
def appointment_list(request):
    if request.method == 'GET':
        qs = _appointments().order_by('-appointment_date', '-start_time')
        return Response(AppointmentSerializer(qs, many=True).data)

    s = AppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    with transaction.atomic():
        appointment = s.save()
        events.appointment_scheduled(appointment, actor=request.user)
    return Response(AppointmentSerializer(appointment).data, status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
def appointment_detail(request, appointment_id):
    appointment = _appointments().filter(pk=appointment_id).first()
    if appointment is None:
        raise NotFound('Appointment not found')
    previous_status = appointment.status
    s = AppointmentSerializer(appointment, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    with transaction.atomic():
        appointment = s.save()
        if appointment.status == Appointment.Status.COMPLETED and previous_status != Appointment.Status.COMPLETED:
            events.appointment_completed(appointment, actor=request.user)
    return Response(AppointmentSerializer(appointment).data)


@api_view(['GET', 'POST'])
def recurring_appointment_list(request):
    if request.method == 'GET':
        q = RecurringAppointmentQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        patient_id = q.validated_data.get('patient_id')
        doctor_id = q.validated_data.get('doctor_id')
        qs = RecurringAppointment.objects.order_by('-created_at')
        if patient_id:
            qs = qs.filter(patient_id=patient_id)
        if doctor_id:
            qs = qs.filter(doctor_id=doctor_id)
        return Response(RecurringAppointmentSerializer(qs, many=True).data)

    s = RecurringAppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    series = s.save()
    return Response(RecurringAppointmentSerializer(series).data, status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
def recurring_appointment_detail(request, series_id):
    series = RecurringAppointment.objects.filter(pk=series_id).first()
    if series is None:
        raise NotFound('Recurring appointment not found')
    s = RecurringAppointmentSerializer(series, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    return Response(RecurringAppointmentSerializer(s.save()).data)
