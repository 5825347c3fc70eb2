"""
Patient timeline recorder.

Write endpoints call one of the recorder helpers below once they have
stored a clinical record, so the patient's timeline gets one row per
action.  Rows are only ever appended.  The acting user and the doctor
concerned are kept as references; their display names are joined in by
the timeline readers and never written into the row text.
"""
from __future__ import annotations

from typing import Any, Optional

import structlog

from clinic.models import PatientEvent, User

logger = structlog.get_logger(__name__)

APPOINTMENT_SCHEDULED = 'appointment_scheduled'
APPOINTMENT_COMPLETED = 'appointment_completed'
PRESCRIPTION_ISSUED = 'prescription_issued'
LAB_TEST_ORDERED = 'lab_test_ordered'
LAB_RESULTS_REPORTED = 'lab_results_reported'
VACCINATION_ADMINISTERED = 'vaccination_administered'
ALERT_CREATED = 'alert_created'
REFERRAL_CREATED = 'referral_created'
BED_ASSIGNED = 'bed_assigned'
BILL_GENERATED = 'bill_generated'
PAYMENT_RECEIVED = 'payment_received'


def _actor(actor) -> Optional[User]:
    """Accept a user, a request principal or a user id."""
    if actor is None or isinstance(actor, User):
        return actor
    user_id = getattr(actor, 'user_id', actor)
    return User.objects.filter(pk=user_id).first()


def record(event_type: str, patient, related_id, title: str, description: Optional[str] = None,
           actor=None, doctor=None, metadata: Optional[dict[str, Any]] = None) -> PatientEvent:
    event = PatientEvent.objects.create(
        patient=patient,
        event_type=event_type,
        title=title,
        description=description,
        related_id=str(related_id) if related_id is not None else None,
        actor=_actor(actor),
        doctor=doctor,
        metadata=metadata or {},
    )
    logger.debug('patient_event_recorded', event_type=event_type, patient_id=str(event.patient_id))
    return event


def timeline(patient_id):
    return (
        PatientEvent.objects.filter(patient_id=patient_id)
        .select_related('actor', 'doctor__user')
        .order_by('-event_date', '-created_at')
    )


def appointment_scheduled(appointment, actor=None) -> PatientEvent:
    return record(
        APPOINTMENT_SCHEDULED, appointment.patient, appointment.id,
        'Appointment scheduled',
        f"On {appointment.appointment_date} at {appointment.start_time}",
        actor=actor,
        doctor=appointment.doctor,
        metadata={'isEmergency': appointment.is_emergency},
    )


def appointment_completed(appointment, actor=None) -> PatientEvent:
    return record(
        APPOINTMENT_COMPLETED, appointment.patient, appointment.id,
        'Appointment completed',
        appointment.post_visit_notes,
        actor=actor,
        doctor=appointment.doctor,
    )


def prescription_issued(prescription, actor=None) -> PatientEvent:
    lines = prescription.medications.count()
    return record(
        PRESCRIPTION_ISSUED, prescription.patient, prescription.id,
        'Prescription issued',
        prescription.diagnosis,
        actor=actor,
        doctor=prescription.doctor,
        metadata={'medicationCount': lines},
    )


def lab_test_ordered(order, actor=None) -> PatientEvent:
    return record(
        LAB_TEST_ORDERED, order.patient, order.id,
        f"Lab test ordered: {order.lab_test.test_name}",
        order.notes,
        actor=actor,
        doctor=order.doctor,
        metadata={'labTestId': str(order.lab_test_id)},
    )


def lab_results_reported(order, actor=None) -> PatientEvent:
    return record(
        LAB_RESULTS_REPORTED, order.patient, order.id,
        f"Lab results reported: {order.lab_test.test_name}",
        order.results,
        actor=actor,
        doctor=order.doctor,
        metadata={'labTestId': str(order.lab_test_id)},
    )


def vaccination_administered(vaccination, actor=None) -> PatientEvent:
    return record(
        VACCINATION_ADMINISTERED, vaccination.patient, vaccination.id,
        f"Vaccination: {vaccination.vaccine_name}",
        vaccination.notes,
        actor=actor,
        doctor=vaccination.administered_by,
        metadata={'batchNumber': vaccination.batch_number},
    )


def alert_created(alert, actor=None) -> PatientEvent:
    return record(
        ALERT_CREATED, alert.patient, alert.id,
        f"Alert: {alert.alert_type}",
        alert.message,
        actor=actor,
        metadata={'severity': alert.severity},
    )


def referral_created(referral, actor=None) -> PatientEvent:
    return record(
        REFERRAL_CREATED, referral.patient, referral.id,
        'Referral created',
        referral.reason,
        actor=actor,
        doctor=referral.to_doctor,
        metadata={'fromDoctorId': str(referral.from_doctor_id)},
    )


def bed_assigned(bed, actor=None) -> PatientEvent:
    return record(
        BED_ASSIGNED, bed.patient, bed.id,
        f"Assigned to bed {bed.bed_number}",
        f"Room {bed.room.room_number}",
        actor=actor,
        metadata={'roomId': str(bed.room_id)},
    )


def bill_generated(bill, actor=None) -> PatientEvent:
    return record(
        BILL_GENERATED, bill.patient, bill.id,
        'Bill generated',
        bill.description,
        actor=actor,
        metadata={'totalAmount': str(bill.total_amount)},
    )


def payment_received(payment, actor=None) -> PatientEvent:
    return record(
        PAYMENT_RECEIVED, payment.bill.patient, payment.id,
        'Payment received',
        f"{payment.amount} via {payment.payment_method}",
        actor=actor,
        metadata={'billId': str(payment.bill_id), 'amount': str(payment.amount)},
    )
