from rest_framework import serializers

from clinic.models import (
    Appointment,
    DoctorFeedback,
    LabTest,
    Medication,
    Prescription,
    PrescriptionMedication,
    PrescriptionTemplate,
    RecurringAppointment,
    Referral,
    RefillRequest,
    SoapNote,
    TestOrder,
)
from clinic.serializers.base import CamelModelSerializer, CamelSerializer


def _check_time_range(attrs, instance=None):
    start = attrs.get('start_time', getattr(instance, 'start_time', None))
    end = attrs.get('end_time', getattr(instance, 'end_time', None))
    if start and end and end <= start:
        raise serializers.ValidationError({'end_time': 'End time must be after start time'})


class AppointmentSerializer(CamelModelSerializer):
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    doctor_name = serializers.CharField(source='doctor.user.name', read_only=True)

    class Meta:
        model = Appointment
        fields = (
            'id', 'patient', 'patient_name', 'doctor', 'doctor_name', 'appointment_date', 'start_time',
            'end_time', 'status', 'reason', 'notes', 'pre_visit_notes', 'post_visit_notes', 'is_emergency',
            'recurring_appointment', 'follow_up_for', 'created_at',
        )
        read_only_fields = ('id', 'created_at')

    def validate(self, attrs):
        attrs = super().validate(attrs)
        _check_time_range(attrs, self.instance)
        return attrs


class RecurringAppointmentSerializer(CamelModelSerializer):
    class Meta:
        model = RecurringAppointment
        fields = (
            'id', 'patient', 'doctor', 'frequency_days', 'start_date', 'end_date', 'start_time',
            'end_time', 'reason', 'is_active', 'created_at',
        )
        read_only_fields = ('id', 'created_at')
        extra_kwargs = {'frequency_days': {'min_value': 1}}

    def validate(self, attrs):
        attrs = super().validate(attrs)
        _check_time_range(attrs, self.instance)
        return attrs


class MedicationSerializer(CamelModelSerializer):
    class Meta:
        model = Medication
        fields = (
            'id', 'name', 'generic_name', 'dosage_form', 'strength', 'description', 'manufacturer',
            'unit_price', 'stock_quantity', 'reorder_level', 'expiry_date',
        )
        extra_kwargs = {
            'unit_price': {'min_value': 0},
            'stock_quantity': {'min_value': 0},
            'reorder_level': {'min_value': 0},
        }


class PrescriptionMedicationSerializer(CamelModelSerializer):
    medication_name = serializers.CharField(source='medication.name', read_only=True)

    class Meta:
        model = PrescriptionMedication
        fields = ('id', 'medication', 'medication_name', 'dosage', 'frequency', 'duration', 'instructions')
        read_only_fields = ('id',)


class PrescriptionSerializer(CamelModelSerializer):
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    doctor_name = serializers.CharField(source='doctor.user.name', read_only=True)

    class Meta:
        model = Prescription
        fields = (
            'id', 'patient', 'patient_name', 'doctor', 'doctor_name', 'appointment', 'prescription_date',
            'diagnosis', 'notes', 'created_at',
        )
        read_only_fields = ('id', 'created_at')


class PrescriptionDetailSerializer(PrescriptionSerializer):
    medications = PrescriptionMedicationSerializer(many=True, read_only=True)

    class Meta(PrescriptionSerializer.Meta):
        fields = PrescriptionSerializer.Meta.fields + ('medications',)


class PrescriptionCreateSerializer(PrescriptionSerializer):
    """Prescription with its medication lines.

    ``doctorId`` may be omitted, in which case the prescribing doctor is
    taken from the caller's own profile by the view.
    """
    medications = PrescriptionMedicationSerializer(many=True, required=False)

    class Meta(PrescriptionSerializer.Meta):
        fields = PrescriptionSerializer.Meta.fields + ('medications',)
        extra_kwargs = {'doctor': {'required': False}}

    def create(self, validated_data):
        lines = validated_data.pop('medications', [])
        prescription = Prescription.objects.create(**validated_data)
        for line in lines:
            PrescriptionMedication.objects.create(prescription=prescription, **line)
        return prescription


class PrescriptionTemplateSerializer(CamelModelSerializer):
    class Meta:
        model = PrescriptionTemplate
        fields = ('id', 'doctor', 'template_name', 'condition', 'diagnosis', 'notes', 'is_public', 'created_at')
        read_only_fields = ('id', 'doctor', 'created_at')


class LabTestSerializer(CamelModelSerializer):
    class Meta:
        model = LabTest
        fields = (
            'id', 'test_name', 'test_code', 'category', 'description', 'price', 'normal_range',
            'preparation_instructions',
        )
        extra_kwargs = {'price': {'min_value': 0}}


class TestOrderSerializer(CamelModelSerializer):
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    doctor_name = serializers.CharField(source='doctor.user.name', read_only=True)
    test_name = serializers.CharField(source='lab_test.test_name', read_only=True)
    test_code = serializers.CharField(source='lab_test.test_code', read_only=True)
    test_category = serializers.CharField(source='lab_test.category', read_only=True)
    normal_range = serializers.CharField(source='lab_test.normal_range', read_only=True)
    test_price = serializers.DecimalField(source='lab_test.price', max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = TestOrder
        fields = (
            'id', 'patient', 'patient_name', 'doctor', 'doctor_name', 'lab_test', 'test_name', 'test_code',
            'test_category', 'normal_range', 'test_price', 'order_date', 'status', 'collected_date',
            'reported_date', 'results', 'notes',
        )
        read_only_fields = ('id',)
        extra_kwargs = {'order_date': {'required': False}}

    # keep pytest from collecting this serializer as a test class
    __test__ = False


class SoapNoteSerializer(CamelModelSerializer):
    class Meta:
        model = SoapNote
        fields = ('id', 'appointment', 'subjective', 'objective', 'assessment', 'plan', 'created_at', 'updated_at')
        read_only_fields = ('id', 'created_at', 'updated_at')


class ReferralSerializer(CamelModelSerializer):
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    from_doctor_name = serializers.CharField(source='from_doctor.user.name', read_only=True)
    to_doctor_name = serializers.CharField(source='to_doctor.user.name', read_only=True)

    class Meta:
        model = Referral
        fields = (
            'id', 'patient', 'patient_name', 'from_doctor', 'from_doctor_name', 'to_doctor', 'to_doctor_name',
            'reason', 'notes', 'status', 'referral_date', 'completed_date',
        )
        read_only_fields = ('id', 'from_doctor', 'status', 'referral_date', 'completed_date')


class RefillRequestSerializer(CamelModelSerializer):
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    doctor_name = serializers.CharField(source='doctor.user.name', read_only=True)

    class Meta:
        model = RefillRequest
        fields = (
            'id', 'patient', 'patient_name', 'prescription', 'doctor', 'doctor_name', 'request_date',
            'status', 'notes', 'approved_date', 'new_prescription',
        )
        read_only_fields = ('id', 'patient', 'request_date', 'status', 'approved_date', 'new_prescription')


class StatusUpdateSerializer(CamelSerializer):
    status = serializers.ChoiceField(choices=())

    def __init__(self, *args, choices=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].choices = choices


class RefillStatusSerializer(StatusUpdateSerializer):
    new_prescription_id = serializers.PrimaryKeyRelatedField(
        source='new_prescription', queryset=Prescription.objects.all(), required=False, allow_null=True,
        pk_field=serializers.UUIDField(),
    )


class DoctorFeedbackSerializer(CamelModelSerializer):
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)

    class Meta:
        model = DoctorFeedback
        fields = ('id', 'doctor', 'patient', 'patient_name', 'appointment', 'rating', 'comment', 'created_at')
        read_only_fields = ('id', 'patient', 'created_at')
        extra_kwargs = {'rating': {'min_value': 1, 'max_value': 5}}


class RecurringAppointmentQuerySerializer(CamelSerializer):
    patient_id = serializers.UUIDField(required=False)
    doctor_id = serializers.UUIDField(required=False)
