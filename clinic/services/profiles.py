from rest_framework.exceptions import NotFound

from clinic.models import Doctor, Patient


def patient_for(principal) -> Patient:
    """Patient record linked to the caller's account."""
    patient = Patient.objects.filter(user_id=principal.user_id).first()
    if patient is None:
        raise NotFound('Patient not found')
    return patient


def doctor_for(principal) -> Doctor:
    doctor = Doctor.objects.select_related('user', 'department').filter(user_id=principal.user_id).first()
    if doctor is None:
        raise NotFound('Doctor profile not found')
    return doctor


def get_patient(patient_id) -> Patient:
    patient = Patient.objects.filter(pk=patient_id).first()
    if patient is None:
        raise NotFound('Patient not found')
    return patient


def doctor_patients(doctor):
    """Patients the doctor has at least one appointment with, newest first."""
    return Patient.objects.filter(appointments__doctor=doctor).distinct().order_by('-created_at')
