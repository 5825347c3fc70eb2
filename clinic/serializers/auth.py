from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from clinic.models import Patient, User
from clinic.serializers.base import CamelModelSerializer, CamelSerializer


class LoginSerializer(CamelSerializer):
    username = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required')
        return v


class RegisterSerializer(CamelSerializer):
    """Public sign-up payload.

    There is deliberately no ``role`` field: whatever the client sends for
    it is discarded and the account is always created as a patient.
    """
    username = serializers.CharField(min_length=3, max_length=150)
    password = serializers.CharField(min_length=6, trim_whitespace=False, write_only=True)
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=Patient.Gender.choices, required=False)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    blood_group = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=5)
    emergency_contact_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    emergency_contact_phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)

    def validate_name(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Name is required')
        return v

    def validate_password(self, v):
        try:
            validate_password(v)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.messages)
        return v


class UserSerializer(CamelModelSerializer):
    """Account representation; the password hash is never part of it."""

    class Meta:
        model = User
        fields = ('id', 'username', 'role', 'name', 'email', 'phone', 'created_at')
        read_only_fields = fields
