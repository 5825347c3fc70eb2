"""
Doctors, departments and ward management (rooms and beds).
"""
from __future__ import annotations

from django.db import transaction
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from clinic.models import Bed, Department, Doctor, Room
from clinic.serializers.staff import (
    BedSerializer,
    DepartmentSerializer,
    DoctorCreateSerializer,
    DoctorSerializer,
    RoomSerializer,
)
from clinic.services import accounts, events


@api_view(['GET', 'POST'])
def doctor_list(request):
    if request.method == 'GET':
        qs = Doctor.objects.select_related('user', 'department').order_by('user__name')
        return Response(DoctorSerializer(qs, many=True).data)

    s = DoctorCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    doctor = accounts.create_doctor(s.validated_data)
    return Response(DoctorSerializer(doctor).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
def department_list(request):
    if request.method == 'GET':
        return Response(DepartmentSerializer(Department.objects.order_by('name'), many=True).data)

    s = DepartmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    department = s.save()
    return Response(DepartmentSerializer(department).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
def room_list(request):
    if request.method == 'GET':
        return Response(RoomSerializer(Room.objects.order_by('room_number'), many=True).data)

    s = RoomSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    room = s.save()
    return Response(RoomSerializer(room).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
def bed_list(request):
    if request.method == 'GET':
        qs = Bed.objects.select_related('room', 'patient').order_by('room__room_number', 'bed_number')
        return Response(BedSerializer(qs, many=True).data)

    s = BedSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    bed = _save_bed(s, None, request.user)
    return Response(BedSerializer(bed).data, status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
def bed_detail(request, bed_id):
    bed = Bed.objects.select_related('room', 'patient').filter(pk=bed_id).first()
    if bed is None:
        raise NotFound('Bed not found')
    s = BedSerializer(bed, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    bed = _save_bed(s, bed.patient_id, request.user)
    return Response(BedSerializer(bed).data)


@transaction.atomic
def _save_bed(serializer, previous_patient_id, actor) -> Bed:
    """Save a bed, keeping its status in step with its occupant.

    Putting a patient in a bed marks it occupied and records the
    assignment on the patient's timeline; clearing the patient frees it.
    """
    data = serializer.validated_data
    extra = {}
    if 'patient' in data:
        patient = data['patient']
        if patient is not None and patient.pk != previous_patient_id:
            extra = {'status': Bed.Status.OCCUPIED, 'assigned_date': timezone.now()}
        elif patient is None and previous_patient_id is not None:
            extra = {'assigned_date': None}
            if 'status' not in data:
                extra['status'] = Bed.Status.AVAILABLE
    bed = serializer.save(**extra)
    if bed.patient_id is not None and bed.patient_id != previous_patient_id:
        events.bed_assigned(bed, actor=actor)
    return bed
