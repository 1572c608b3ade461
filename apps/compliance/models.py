from django.conf import settings
from django.db import models
from django.utils import timezone
import uuid


class IdType(models.TextChoices):
    LICENSE = 'license', 'Driver license'
    PASSPORT = 'passport', 'Passport'
    MYNUMBER = 'mynumber', 'My Number card'
    RESIDENCE_CARD = 'residence_card', 'Residence card'


class IdVerification(models.Model):
    """Age check of a customer against an identity document."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey('customers.Customer', on_delete=models.CASCADE, related_name='id_verifications')
    id_type = models.CharField(max_length=20, choices=IdType.choices)
    id_image_url = models.URLField(max_length=500, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    expiry_date = models.DateField(null=True, blank=True)
    ocr_result = models.JSONField(null=True, blank=True)
    is_verified = models.BooleanField(default=False, db_index=True)
    verification_date = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'id_verifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['id_type', 'is_verified']),
        ]

    def __str__(self):
        return f"{self.customer} ({self.id_type})"


class ReportType(models.TextChoices):
    EMPLOYEE_LIST = 'employee_list', 'Employee list'
    COMPLAINT_LOG = 'complaint_log', 'Complaint log'
    BUSINESS_REPORT = 'business_report', 'Business report'
    TAX_REPORT = 'tax_report', 'Tax report'


class ReportStatus(models.TextChoices):
    GENERATED = 'generated', 'Generated'
    SUBMITTED = 'submitted', 'Submitted'
    APPROVED = 'approved', 'Approved'


class ComplianceReport(models.Model):
    """Regulatory report snapshot for a period."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    report_type = models.CharField(max_length=20, choices=ReportType.choices, db_index=True)
    period_start = models.DateField()
    period_end = models.DateField()
    status = models.CharField(
        max_length=10, choices=ReportStatus.choices, default=ReportStatus.GENERATED, db_index=True
    )
    file_path = models.CharField(max_length=500, blank=True)
    report_data = models.JSONField(default=dict, blank=True)
    generated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    generated_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'compliance_reports'
        ordering = ['-generated_at']

    def __str__(self):
        return f"{self.report_type} {self.period_start}..{self.period_end}"


class ComplaintCategory(models.TextChoices):
    SERVICE = 'service', 'Service'
    BILLING = 'billing', 'Billing'
    NOISE = 'noise', 'Noise'
    STAFF = 'staff', 'Staff conduct'
    OTHER = 'other', 'Other'


class ComplaintStatus(models.TextChoices):
    OPEN = 'open', 'Open'
    RESOLVED = 'resolved', 'Resolved'


class Complaint(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        'customers.Customer', on_delete=models.SET_NULL, null=True, blank=True, related_name='complaints'
    )
    received_at = models.DateTimeField(default=timezone.now, db_index=True)
    category = models.CharField(max_length=20, choices=ComplaintCategory.choices, default=ComplaintCategory.OTHER)
    description = models.TextField(max_length=2000)
    status = models.CharField(
        max_length=10, choices=ComplaintStatus.choices, default=ComplaintStatus.OPEN, db_index=True
    )
    resolution = models.TextField(blank=True)
    resolved_at = models.DateTimeField(null=True, blank=True)
    handled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'complaints'
        ordering = ['-received_at']

    def __str__(self):
        return f"{self.category} complaint {self.received_at:%Y-%m-%d}"
