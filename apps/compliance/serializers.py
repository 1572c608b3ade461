from rest_framework import serializers

from apps.accounts.validators import validate_not_future
from apps.customers.models import Customer
from .models import (
    Complaint,
    ComplaintCategory,
    ComplaintStatus,
    ComplianceReport,
    IdType,
    IdVerification,
    ReportStatus,
    ReportType,
)

GENERATABLE_REPORTS = [
    (ReportType.EMPLOYEE_LIST.value, ReportType.EMPLOYEE_LIST.label),
    (ReportType.COMPLAINT_LOG.value, ReportType.COMPLAINT_LOG.label),
]


class IdVerificationSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    verified_by_email = serializers.EmailField(source='verified_by.email', read_only=True, default=None)

    class Meta:
        model = IdVerification
        fields = [
            'id',
            'customer',
            'customer_name',
            'id_type',
            'id_image_url',
            'birth_date',
            'expiry_date',
            'ocr_result',
            'is_verified',
            'verification_date',
            'verified_by',
            'verified_by_email',
            'notes',
            'created_at',
        ]
        read_only_fields = fields


class IdVerificationInputSerializer(serializers.Serializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    id_type = serializers.ChoiceField(choices=IdType.choices)
    birth_date = serializers.DateField(required=False, allow_null=True, validators=[validate_not_future])
    expiry_date = serializers.DateField(required=False, allow_null=True)
    id_image_url = serializers.URLField(max_length=500, required=False, allow_blank=True)
    ocr_result = serializers.JSONField(required=False, allow_null=True)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)

    def to_service_kwargs(self):
        data = dict(self.validated_data)
        data['customer_id'] = data.pop('customer').id
        return data


class IdVerificationFilterSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField(required=False)
    id_type = serializers.ChoiceField(choices=IdType.choices, required=False)
    is_verified = serializers.BooleanField(required=False, allow_null=True)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class ComplaintSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True, default=None)

    class Meta:
        model = Complaint
        fields = [
            'id',
            'customer',
            'customer_name',
            'received_at',
            'category',
            'description',
            'status',
            'resolution',
            'resolved_at',
            'handled_by',
            'created_at',
        ]
        read_only_fields = fields


class ComplaintInputSerializer(serializers.Serializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    category = serializers.ChoiceField(choices=ComplaintCategory.choices, default=ComplaintCategory.OTHER)
    description = serializers.CharField(min_length=1, max_length=2000)
    received_at = serializers.DateTimeField(required=False)

    def to_service_kwargs(self):
        data = dict(self.validated_data)
        customer = data.pop('customer', None)
        data['customer_id'] = customer.id if customer else None
        return data


class ComplaintFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ComplaintStatus.choices, required=False)
    category = serializers.ChoiceField(choices=ComplaintCategory.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class ResolveComplaintSerializer(serializers.Serializer):
    resolution = serializers.CharField(min_length=1, max_length=2000)


class ComplianceReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = ComplianceReport
        fields = [
            'id',
            'report_type',
            'period_start',
            'period_end',
            'status',
            'file_path',
            'report_data',
            'generated_by',
            'generated_at',
        ]
        read_only_fields = fields


class GenerateReportSerializer(serializers.Serializer):
    report_type = serializers.ChoiceField(choices=GENERATABLE_REPORTS)
    period_start = serializers.DateField()
    period_end = serializers.DateField()

    def validate(self, attrs):
        if attrs['period_end'] < attrs['period_start']:
            raise serializers.ValidationError({'period_end': 'period_end must be on or after period_start'})
        return attrs


class ReportStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ReportStatus.choices)
    file_path = serializers.CharField(max_length=500, required=False, allow_blank=True)


class ReportFilterSerializer(serializers.Serializer):
    report_type = serializers.ChoiceField(choices=ReportType.choices, required=False)
    status = serializers.ChoiceField(choices=ReportStatus.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class ComplianceStatsSerializer(serializers.Serializer):
    verifications = serializers.DictField()
    reports = serializers.DictField()
