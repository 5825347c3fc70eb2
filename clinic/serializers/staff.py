from rest_framework import serializers

from clinic.models import Bed, Department, Doctor, Room
from clinic.serializers.base import CamelModelSerializer, CamelSerializer


class DepartmentSerializer(CamelModelSerializer):
    class Meta:
        model = Department
        fields = ('id', 'name', 'description', 'floor', 'head_doctor')


class DoctorSerializer(CamelModelSerializer):
    name = serializers.CharField(source='user.name', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    phone = serializers.CharField(source='user.phone', read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)
    department_name = serializers.CharField(source='department.name', read_only=True, default=None)

    class Meta:
        model = Doctor
        fields = (
            'id', 'user', 'department', 'department_name', 'specialization', 'license_number',
            'years_of_experience', 'name', 'email', 'phone', 'username',
        )
        read_only_fields = fields


class DoctorCreateSerializer(CamelSerializer):
    username = serializers.CharField(min_length=3, max_length=150)
    password = serializers.CharField(min_length=6, trim_whitespace=False, write_only=True)
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)
    specialization = serializers.CharField(max_length=255)
    license_number = serializers.CharField(max_length=50)
    years_of_experience = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    department_id = serializers.PrimaryKeyRelatedField(
        source='department', queryset=Department.objects.all(), required=False, allow_null=True,
        pk_field=serializers.UUIDField(),
    )


class RoomSerializer(CamelModelSerializer):
    class Meta:
        model = Room
        fields = ('id', 'room_number', 'department', 'room_type', 'floor', 'capacity')


class BedSerializer(CamelModelSerializer):
    room_number = serializers.CharField(source='room.room_number', read_only=True)
    patient_name = serializers.CharField(source='patient.full_name', read_only=True, default=None)

    class Meta:
        model = Bed
        fields = ('id', 'room', 'room_number', 'bed_number', 'status', 'patient', 'patient_name', 'assigned_date')
        read_only_fields = ('id', 'assigned_date')
