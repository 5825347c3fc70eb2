"""
Django admin registrations for the clinic models.

Billing rows are shown read-only: payments are only ever created through
the API so that the paid total of a bill stays within its amount.
"""

from django.contrib import admin

from .models import (
    Appointment,
    Bed,
    Bill,
    Department,
    Doctor,
    LabTest,
    Medication,
    Patient,
    PatientEvent,
    Payment,
    Prescription,
    Room,
    TestOrder,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'name', 'role', 'email', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'name', 'email')
    exclude = ('password',)


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('name', 'floor', 'head_doctor')
    search_fields = ('name',)


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('user', 'specialization', 'license_number', 'department')
    list_filter = ('department',)
    search_fields = ('user__username', 'user__name', 'license_number')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('first_name', 'last_name', 'date_of_birth', 'gender', 'phone', 'created_at')
    list_filter = ('gender', 'blood_group')
    search_fields = ('first_name', 'last_name', 'phone', 'email')


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ('room_number', 'room_type', 'floor', 'capacity', 'department')


@admin.register(Bed)
class BedAdmin(admin.ModelAdmin):
    list_display = ('bed_number', 'room', 'status', 'patient')
    list_filter = ('status',)


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('appointment_date', 'start_time', 'patient', 'doctor', 'status', 'is_emergency')
    list_filter = ('status', 'is_emergency')
    search_fields = ('patient__first_name', 'patient__last_name', 'doctor__user__name')


@admin.register(Medication)
class MedicationAdmin(admin.ModelAdmin):
    list_display = ('name', 'strength', 'stock_quantity', 'reorder_level', 'expiry_date')
    search_fields = ('name', 'generic_name')


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('prescription_date', 'patient', 'doctor', 'diagnosis')


@admin.register(LabTest)
class LabTestAdmin(admin.ModelAdmin):
    list_display = ('test_name', 'test_code', 'category', 'price')
    search_fields = ('test_name', 'test_code')


@admin.register(TestOrder)
class TestOrderAdmin(admin.ModelAdmin):
    list_display = ('order_date', 'patient', 'lab_test', 'status')
    list_filter = ('status',)


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'total_amount', 'due_date', 'is_cancelled', 'bill_date')
    list_filter = ('is_cancelled',)

    def get_readonly_fields(self, request, obj=None):
        # the total of an existing bill is fixed once payments can reference it
        if obj is not None:
            return ('total_amount',)
        return ()


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('id', 'bill', 'amount', 'payment_method', 'payment_date')
    search_fields = ('transaction_id',)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PatientEvent)
class PatientEventAdmin(admin.ModelAdmin):
    list_display = ('event_date', 'patient', 'event_type', 'title', 'actor')
    list_filter = ('event_type',)
