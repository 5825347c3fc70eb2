"""
URL mappings for the hospital management API.

The ``name`` of each pattern is the key :mod:`clinic.permissions` uses to
look up which roles may call it, so renaming a route means updating
``ROUTE_ROLES`` as well.  Trailing slashes are deliberately omitted.
"""
from django.urls import path

from .views import (
    appointments,
    auth,
    billing,
    doctor,
    health,
    labs,
    messages,
    metrics,
    patients,
    pharmacy,
    portal,
    refills,
    staff,
)

urlpatterns = [
    path('healthz', health.healthz, name='healthz'),

    # auth
    path('api/auth/register', auth.register, name='auth-register'),
    path('api/auth/login', auth.login, name='auth-login'),
    path('api/auth/me', auth.me, name='auth-me'),

    # patients and their chart
    path('api/patients', patients.patient_list, name='patient-list'),
    path('api/patients/<uuid:patient_id>', patients.patient_detail, name='patient-detail'),
    path('api/patient-alerts/<uuid:patient_id>', patients.patient_alerts, name='patient-alerts'),
    path('api/patient-events/<uuid:patient_id>', patients.patient_events, name='patient-events'),
    path('api/health-vitals/<uuid:patient_id>', patients.health_vitals, name='health-vitals'),
    path('api/vaccinations/<uuid:patient_id>', patients.vaccinations, name='vaccinations'),

    # staff and wards
    path('api/doctors', staff.doctor_list, name='doctor-list'),
    path('api/departments', staff.department_list, name='department-list'),
    path('api/rooms', staff.room_list, name='room-list'),
    path('api/beds', staff.bed_list, name='bed-list'),
    path('api/beds/<uuid:bed_id>', staff.bed_detail, name='bed-detail'),

    # scheduling
    path('api/appointments', appointments.appointment_list, name='appointment-list'),
    path('api/appointments/<uuid:appointment_id>', appointments.appointment_detail, name='appointment-detail'),
    path('api/recurring-appointments', appointments.recurring_appointment_list, name='recurring-appointment-list'),
    path('api/recurring-appointments/<uuid:series_id>', appointments.recurring_appointment_detail,
         name='recurring-appointment-detail'),

    # pharmacy
    path('api/medications', pharmacy.medication_list, name='medication-list'),
    path('api/prescriptions', pharmacy.prescription_list, name='prescription-list'),
    path('api/prescriptions/<uuid:prescription_id>', pharmacy.prescription_detail, name='prescription-detail'),
    path('api/prescription-templates', pharmacy.prescription_template_list, name='prescription-template-list'),
    path('api/prescription-templates/<uuid:template_id>', pharmacy.prescription_template_detail,
         name='prescription-template-detail'),
    path('api/inventory/expiring', pharmacy.inventory_expiring, name='inventory-expiring'),
    path('api/inventory/low-stock', pharmacy.inventory_low_stock, name='inventory-low-stock'),

    # laboratory
    path('api/lab-tests', labs.lab_test_list, name='lab-test-list'),
    path('api/test-orders', labs.test_order_list, name='test-order-list'),
    path('api/test-orders/<uuid:order_id>', labs.test_order_detail, name='test-order-detail'),

    # billing
    path('api/bills', billing.bill_list, name='bill-list'),
    path('api/bills/<uuid:bill_id>/cancel', billing.bill_cancel, name='bill-cancel'),
    path('api/payments', billing.payment_list, name='payment-list'),
    path('api/metrics', metrics.dashboard_metrics, name='dashboard-metrics'),

    # patient portal
    path('api/portal/patient', portal.portal_patient, name='portal-patient'),
    path('api/portal/appointments', portal.portal_appointments, name='portal-appointments'),
    path('api/portal/prescriptions', portal.portal_prescriptions, name='portal-prescriptions'),
    path('api/portal/lab-results', portal.portal_lab_results, name='portal-lab-results'),
    path('api/portal/bills', portal.portal_bills, name='portal-bills'),
    path('api/portal/vitals', portal.portal_vitals, name='portal-vitals'),
    path('api/portal/vaccinations', portal.portal_vaccinations, name='portal-vaccinations'),
    path('api/portal/timeline', portal.portal_timeline, name='portal-timeline'),

    # doctor workspace
    path('api/doctor/profile', doctor.doctor_profile, name='doctor-profile'),
    path('api/doctor/appointments', doctor.doctor_appointments, name='doctor-appointments'),
    path('api/doctor/patients', doctor.doctor_patient_list, name='doctor-patients'),
    path('api/soap-notes', doctor.soap_note_list, name='soap-note-list'),
    path('api/soap-notes/appointment/<uuid:appointment_id>', doctor.soap_note_by_appointment,
         name='soap-note-by-appointment'),
    path('api/soap-notes/<uuid:note_id>', doctor.soap_note_detail, name='soap-note-detail'),
    path('api/referrals', doctor.referral_list, name='referral-list'),
    path('api/referrals/sent', doctor.referral_sent, name='referral-sent'),
    path('api/referrals/received', doctor.referral_received, name='referral-received'),
    path('api/referrals/<uuid:referral_id>/status', doctor.referral_status, name='referral-status'),

    # messaging
    path('api/messages', messages.message_list, name='message-list'),
    path('api/messages/conversation/<uuid:other_user_id>', messages.message_conversation,
         name='message-conversation'),
    path('api/messages/<uuid:message_id>/read', messages.message_read, name='message-read'),
    path('api/notifications', messages.notification_list, name='notification-list'),
    path('api/notifications/unread', messages.notification_unread, name='notification-unread'),
    path('api/notifications/read-all', messages.notification_read_all, name='notification-read-all'),
    path('api/notifications/<uuid:notification_id>/read', messages.notification_read, name='notification-read'),

    # refills and feedback
    path('api/refill-requests', refills.refill_request_list, name='refill-request-list'),
    path('api/refill-requests/patient', refills.refill_request_patient, name='refill-request-patient'),
    path('api/refill-requests/doctor', refills.refill_request_doctor, name='refill-request-doctor'),
    path('api/refill-requests/<uuid:request_id>/status', refills.refill_request_status,
         name='refill-request-status'),
    path('api/feedback', refills.feedback_list, name='feedback-list'),
    path('api/feedback/doctor/<uuid:doctor_id>', refills.feedback_doctor, name='feedback-doctor'),
]
