from rest_framework import serializers

from clinic.models import HealthVital, Patient, PatientAlert, PatientEvent, Vaccination
from clinic.serializers.base import CamelModelSerializer


class PatientSerializer(CamelModelSerializer):
    class Meta:
        model = Patient
        fields = (
            'id', 'user', 'first_name', 'last_name', 'date_of_birth', 'gender', 'phone', 'email',
            'address', 'blood_group', 'emergency_contact_name', 'emergency_contact_phone',
            'medical_history', 'allergies', 'created_at',
        )
        read_only_fields = ('id', 'user', 'created_at')


class PatientAlertSerializer(CamelModelSerializer):
    class Meta:
        model = PatientAlert
        fields = ('id', 'patient', 'alert_type', 'severity', 'message', 'is_active', 'created_at', 'updated_at')
        read_only_fields = ('id', 'patient', 'created_at', 'updated_at')


class PatientEventSerializer(CamelModelSerializer):
    actor_name = serializers.CharField(source='actor.name', read_only=True, default=None)
    doctor_name = serializers.CharField(source='doctor.user.name', read_only=True, default=None)

    class Meta:
        model = PatientEvent
        fields = (
            'id', 'patient', 'event_type', 'event_date', 'title', 'description', 'related_id',
            'actor', 'actor_name', 'doctor', 'doctor_name', 'metadata', 'created_at',
        )
        read_only_fields = fields


class HealthVitalSerializer(CamelModelSerializer):
    class Meta:
        model = HealthVital
        fields = (
            'id', 'patient', 'recorded_date', 'blood_pressure_systolic', 'blood_pressure_diastolic',
            'heart_rate', 'temperature', 'blood_sugar', 'weight', 'height', 'oxygen_saturation', 'notes',
        )
        read_only_fields = ('id', 'patient')
        extra_kwargs = {'recorded_date': {'required': False}}


class VaccinationSerializer(CamelModelSerializer):
    administered_by_name = serializers.CharField(source='administered_by.user.name', read_only=True, default=None)

    class Meta:
        model = Vaccination
        fields = (
            'id', 'patient', 'vaccine_name', 'administered_date', 'administered_by', 'administered_by_name',
            'batch_number', 'next_dose_date', 'notes', 'created_at',
        )
        read_only_fields = ('id', 'patient', 'created_at')
