from django.contrib import admin

from .models import Complaint, ComplianceReport, IdVerification


@admin.register(IdVerification)
class IdVerificationAdmin(admin.ModelAdmin):
    list_display = ['customer', 'id_type', 'birth_date', 'is_verified', 'verification_date']
    list_filter = ['id_type', 'is_verified']
    search_fields = ['customer__name', 'customer__phone_number']
    raw_id_fields = ['customer', 'verified_by']


@admin.register(ComplianceReport)
class ComplianceReportAdmin(admin.ModelAdmin):
    list_display = ['report_type', 'period_start', 'period_end', 'status', 'generated_at']
    list_filter = ['report_type', 'status']
    readonly_fields = ['report_data', 'generated_at']


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ['received_at', 'category', 'status', 'customer']
    list_filter = ['category', 'status']
    search_fields = ['description', 'customer__name']
    raw_id_fields = ['customer', 'handled_by']
