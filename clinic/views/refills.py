"""
Prescription refill requests and doctor feedback.
"""
from __future__ import annotations

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from clinic.models import DoctorFeedback, RefillRequest
from clinic.serializers.clinical import DoctorFeedbackSerializer, RefillRequestSerializer, RefillStatusSerializer
from clinic.services.notifications import notify
from clinic.services.profiles import doctor_for, patient_for


def _requests():
    return RefillRequest.objects.select_related('patient', 'doctor__user')


@api_view(['POST'])
def refill_request_list(request):
    patient = patient_for(request.user)
    s = RefillRequestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    prescription = s.validated_data['prescription']
    if prescription.patient_id != patient.id:
        raise NotFound('Prescription not found')
    refill = s.save(patient=patient)
    notify(
        refill.doctor.user, 'refill_request', 'Refill requested',
        f"{patient.full_name} requested a prescription refill", related_id=refill.id,
    )
    return Response(RefillRequestSerializer(refill).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def refill_request_patient(request):
    patient = patient_for(request.user)
    qs = _requests().filter(patient=patient).order_by('-request_date')
    return Response(RefillRequestSerializer(qs, many=True).data)


@api_view(['GET'])
def refill_request_doctor(request):
    doctor = doctor_for(request.user)
    qs = _requests().filter(doctor=doctor).order_by('-request_date')
    return Response(RefillRequestSerializer(qs, many=True).data)


@api_view(['PATCH'])
def refill_request_status(request, request_id):
    refill = _requests().filter(pk=request_id).first()
    if refill is None:
        raise NotFound('Refill request not found')
    s = RefillStatusSerializer(data=request.data, choices=RefillRequest.Status.choices)
    s.is_valid(raise_exception=True)
    refill.status = s.validated_data['status']
    if 'new_prescription' in s.validated_data:
        refill.new_prescription = s.validated_data['new_prescription']
    if refill.status == RefillRequest.Status.APPROVED and refill.approved_date is None:
        refill.approved_date = timezone.now()
    refill.save(update_fields=['status', 'new_prescription', 'approved_date'])
    if refill.patient.user_id:
        notify(
            refill.patient.user, 'refill_status', 'Refill request updated',
            f"Your refill request is now {refill.status}", related_id=refill.id,
        )
    return Response(RefillRequestSerializer(refill).data)


@api_view(['GET'])
def feedback_doctor(request, doctor_id):
    qs = DoctorFeedback.objects.filter(doctor_id=doctor_id).select_related('patient').order_by('-created_at')
    return Response(DoctorFeedbackSerializer(qs, many=True).data)


@api_view(['POST'])
def feedback_list(request):
    patient = patient_for(request.user)
    s = DoctorFeedbackSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    feedback = s.save(patient=patient)
    return Response(DoctorFeedbackSerializer(feedback).data, status=status.HTTP_201_CREATED)
