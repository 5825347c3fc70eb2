"""
Database models for the hospital management backend.

The schema covers accounts and staff, patients and their clinical
records, wards, pharmacy and laboratory catalogues, billing, messaging
and notifications.  Every table uses a UUID primary key.

Two rules shape the billing tables: a bill never stores how much has
been paid (the figure is always aggregated from its payments), and its
status is derived from that aggregate instead of being written by hand.
"""
from __future__ import annotations

import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import Q, Sum
from django.utils import timezone


class User(AbstractUser):
    """Account with one of the three roles the API recognises.

    The role set is closed; route access rules are declared against it in
    :mod:`clinic.permissions`.
    """

    class Role(models.TextChoices):
        ADMIN = 'admin', 'Administrator'
        DOCTOR = 'doctor', 'Doctor'
        PATIENT = 'patient', 'Patient'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.PATIENT, db_index=True)
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    REQUIRED_FIELDS = ['email', 'name']

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Department(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, null=True)
    floor = models.IntegerField(null=True, blank=True)
    head_doctor = models.ForeignKey(
        'Doctor', null=True, blank=True, on_delete=models.SET_NULL, related_name='headed_departments'
    )

    def __str__(self) -> str:
        return self.name


class Doctor(models.Model):
    """Clinical profile attached to a doctor-role user."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='doctor_profile')
    department = models.ForeignKey(
        Department, null=True, blank=True, on_delete=models.SET_NULL, related_name='doctors'
    )
    specialization = models.CharField(max_length=255)
    license_number = models.CharField(max_length=50, unique=True)
    years_of_experience = models.PositiveIntegerField(null=True, blank=True)

    def __str__(self) -> str:
        return f"Dr. {self.user.name} ({self.specialization})"


class Patient(models.Model):
    """Patient record.

    A record created through public registration is linked to the
    patient's own login; records created by staff may have no account.
    """

    class Gender(models.TextChoices):
        MALE = 'male', 'Male'
        FEMALE = 'female', 'Female'
        OTHER = 'other', 'Other'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        User, null=True, blank=True, on_delete=models.CASCADE, related_name='patient_profile'
    )
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=Gender.choices)
    phone = models.CharField(max_length=20)
    email = models.EmailField(blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    blood_group = models.CharField(max_length=5, blank=True, null=True)
    emergency_contact_name = models.CharField(max_length=255, blank=True, null=True)
    emergency_contact_phone = models.CharField(max_length=20, blank=True, null=True)
    medical_history = models.TextField(blank=True, null=True)
    allergies = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return self.full_name


class Room(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room_number = models.CharField(max_length=20, unique=True)
    department = models.ForeignKey(
        Department, null=True, blank=True, on_delete=models.SET_NULL, related_name='rooms'
    )
    room_type = models.CharField(max_length=100)
    floor = models.IntegerField()
    capacity = models.PositiveIntegerField(default=1)

    def __str__(self) -> str:
        return f"Room {self.room_number}"


class Bed(models.Model):
    class Status(models.TextChoices):
        AVAILABLE = 'available', 'Available'
        OCCUPIED = 'occupied', 'Occupied'
        MAINTENANCE = 'maintenance', 'Maintenance'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name='beds')
    bed_number = models.CharField(max_length=20)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.AVAILABLE, db_index=True)
    patient = models.ForeignKey(Patient, null=True, blank=True, on_delete=models.SET_NULL, related_name='beds')
    assigned_date = models.DateTimeField(null=True, blank=True)

    def __str__(self) -> str:
        return f"Bed {self.bed_number} in {self.room}"


class RecurringAppointment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='recurring_appointments')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='recurring_appointments')
    frequency_days = models.PositiveIntegerField()
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    start_time = models.TimeField()
    end_time = models.TimeField()
    reason = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)


class Appointment(models.Model):
    class Status(models.TextChoices):
        SCHEDULED = 'scheduled', 'Scheduled'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'
        NO_SHOW = 'no_show', 'No show'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='appointments')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='appointments')
    appointment_date = models.DateField(db_index=True)
    start_time = models.TimeField()
    end_time = models.TimeField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.SCHEDULED, db_index=True)
    reason = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    pre_visit_notes = models.TextField(blank=True, null=True)
    post_visit_notes = models.TextField(blank=True, null=True)
    is_emergency = models.BooleanField(default=False)
    recurring_appointment = models.ForeignKey(
        RecurringAppointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments'
    )
    follow_up_for = models.ForeignKey(
        'self', null=True, blank=True, on_delete=models.SET_NULL, related_name='follow_ups'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.appointment_date} {self.start_time} ({self.status})"


class Medication(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True)
    generic_name = models.CharField(max_length=255, blank=True, null=True)
    dosage_form = models.CharField(max_length=100, blank=True, null=True)
    strength = models.CharField(max_length=100, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    manufacturer = models.CharField(max_length=255, blank=True, null=True)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    stock_quantity = models.IntegerField(default=0)
    reorder_level = models.IntegerField(null=True, blank=True)
    expiry_date = models.DateField(null=True, blank=True)

    def __str__(self) -> str:
        return self.name


class Prescription(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='prescriptions')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='prescriptions')
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='prescriptions'
    )
    prescription_date = models.DateField()
    diagnosis = models.TextField()
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)


class PrescriptionMedication(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    prescription = models.ForeignKey(Prescription, on_delete=models.CASCADE, related_name='medications')
    medication = models.ForeignKey(Medication, on_delete=models.PROTECT, related_name='prescription_lines')
    dosage = models.CharField(max_length=100)
    frequency = models.CharField(max_length=100)
    duration = models.CharField(max_length=100)
    instructions = models.TextField(blank=True, null=True)


class PrescriptionTemplate(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='prescription_templates')
    template_name = models.CharField(max_length=255)
    condition = models.CharField(max_length=255)
    diagnosis = models.TextField()
    notes = models.TextField(blank=True, null=True)
    is_public = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)


class LabTest(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    test_name = models.CharField(max_length=255, unique=True)
    test_code = models.CharField(max_length=20, unique=True, null=True, blank=True)
    category = models.CharField(max_length=100, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    normal_range = models.CharField(max_length=255, blank=True, null=True)
    preparation_instructions = models.TextField(blank=True, null=True)

    def __str__(self) -> str:
        return self.test_name


class TestOrder(models.Model):
    class Status(models.TextChoices):
        ORDERED = 'ordered', 'Ordered'
        COLLECTED = 'collected', 'Collected'
        REPORTED = 'reported', 'Reported'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='test_orders')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='test_orders')
    lab_test = models.ForeignKey(LabTest, on_delete=models.PROTECT, related_name='orders')
    order_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ORDERED, db_index=True)
    collected_date = models.DateTimeField(null=True, blank=True)
    reported_date = models.DateTimeField(null=True, blank=True)
    results = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    # keep pytest from collecting this model as a test class
    __test__ = False


class Bill(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        PAID = 'paid', 'Paid'
        OVERDUE = 'overdue', 'Overdue'
        CANCELLED = 'cancelled', 'Cancelled'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='bills')
    bill_date = models.DateTimeField(default=timezone.now)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    due_date = models.DateField(null=True, blank=True)
    description = models.TextField(blank=True, null=True)
    is_cancelled = models.BooleanField(default=False)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=Q(total_amount__gte=0), name='bill_total_amount_non_negative'),
        ]

    @property
    def paid_amount(self) -> Decimal:
        """Sum of this bill's payments.

        List queries annotate ``paid_total`` so that a page of bills costs
        one query; otherwise the sum is aggregated on demand.
        """
        total = getattr(self, 'paid_total', None)
        if total is None:
            total = self.payments.aggregate(total=Sum('amount'))['total']
        return total if total is not None else Decimal('0.00')

    @property
    def balance(self) -> Decimal:
        return self.total_amount - self.paid_amount

    @property
    def status(self) -> str:
        if self.is_cancelled:
            return self.Status.CANCELLED
        if self.paid_amount >= self.total_amount:
            return self.Status.PAID
        if self.due_date and self.due_date < timezone.localdate():
            return self.Status.OVERDUE
        return self.Status.PENDING

    def __str__(self) -> str:
        return f"Bill {self.id} ({self.total_amount})"


class Payment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name='payments')
    payment_date = models.DateTimeField(default=timezone.now)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_method = models.CharField(max_length=50)
    transaction_id = models.CharField(max_length=100, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name='payment_amount_positive'),
        ]

    def __str__(self) -> str:
        return f"Payment {self.amount} on {self.bill_id}"


class PatientAlert(models.Model):
    class Severity(models.TextChoices):
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'
        CRITICAL = 'critical', 'Critical'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='alerts')
    alert_type = models.CharField(max_length=100)
    severity = models.CharField(max_length=10, choices=Severity.choices, default=Severity.MEDIUM)
    message = models.TextField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)


class PatientEvent(models.Model):
    """Append-only timeline row.

    ``actor`` points at the user behind the event and ``doctor`` at the
    clinician it concerns; display names are joined in when the timeline
    is read instead of being copied here.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='events')
    event_type = models.CharField(max_length=64, db_index=True)
    event_date = models.DateTimeField(default=timezone.now, db_index=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    related_id = models.CharField(max_length=64, blank=True, null=True)
    actor = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    doctor = models.ForeignKey(Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['patient', 'event_date']),
        ]


class HealthVital(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='vitals')
    recorded_date = models.DateTimeField(default=timezone.now, db_index=True)
    blood_pressure_systolic = models.PositiveIntegerField(null=True, blank=True)
    blood_pressure_diastolic = models.PositiveIntegerField(null=True, blank=True)
    heart_rate = models.PositiveIntegerField(null=True, blank=True)
    temperature = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    blood_sugar = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    weight = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    height = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    oxygen_saturation = models.PositiveIntegerField(null=True, blank=True)
    notes = models.TextField(blank=True, null=True)


class Vaccination(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='vaccinations')
    vaccine_name = models.CharField(max_length=255)
    administered_date = models.DateField(db_index=True)
    administered_by = models.ForeignKey(
        Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='vaccinations'
    )
    batch_number = models.CharField(max_length=50, blank=True, null=True)
    next_dose_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)


class SoapNote(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    appointment = models.ForeignKey(Appointment, on_delete=models.CASCADE, related_name='soap_notes')
    subjective = models.TextField(blank=True, null=True)
    objective = models.TextField(blank=True, null=True)
    assessment = models.TextField(blank=True, null=True)
    plan = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)


class Referral(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        ACCEPTED = 'accepted', 'Accepted'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='referrals')
    from_doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='referrals_sent')
    to_doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='referrals_received')
    reason = models.TextField()
    notes = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    referral_date = models.DateTimeField(default=timezone.now)
    completed_date = models.DateTimeField(null=True, blank=True)


class Message(models.Model):
    class Status(models.TextChoices):
        SENT = 'sent', 'Sent'
        DELIVERED = 'delivered', 'Delivered'
        READ = 'read', 'Read'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sender = models.ForeignKey(User, on_delete=models.CASCADE, related_name='messages_sent')
    receiver = models.ForeignKey(User, on_delete=models.CASCADE, related_name='messages_received')
    subject = models.CharField(max_length=255, blank=True, null=True)
    content = models.TextField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.SENT)
    is_patient_portal = models.BooleanField(default=False)
    patient = models.ForeignKey(Patient, null=True, blank=True, on_delete=models.SET_NULL, related_name='messages')
    sent_at = models.DateTimeField(default=timezone.now, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)


class RefillRequest(models.Model):
    class Status(models.TextChoices):
        REQUESTED = 'requested', 'Requested'
        APPROVED = 'approved', 'Approved'
        DENIED = 'denied', 'Denied'
        COMPLETED = 'completed', 'Completed'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='refill_requests')
    prescription = models.ForeignKey(Prescription, on_delete=models.PROTECT, related_name='refill_requests')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='refill_requests')
    request_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.REQUESTED)
    notes = models.TextField(blank=True, null=True)
    approved_date = models.DateTimeField(null=True, blank=True)
    new_prescription = models.ForeignKey(
        Prescription, null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )


class DoctorFeedback(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='feedback')
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='feedback_given')
    appointment = models.ForeignKey(Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    rating = models.PositiveSmallIntegerField()
    comment = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=Q(rating__gte=1, rating__lte=5), name='feedback_rating_range'),
        ]


class Notification(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notifications')
    type = models.CharField(max_length=64)
    title = models.CharField(max_length=255)
    message = models.TextField()
    related_id = models.CharField(max_length=64, blank=True, null=True)
    is_read = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
