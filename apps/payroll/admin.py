from django.contrib import admin

from .models import (
    PayrollRule,
    SalesTier,
    NominationType,
    PayrollRuleAssignment,
    PayrollCalculation,
    PayrollCalculationDetail,
)


class SalesTierInline(admin.TabularInline):
    model = SalesTier
    extra = 0


@admin.register(PayrollRule)
class PayrollRuleAdmin(admin.ModelAdmin):
    list_display = ['rule_name', 'base_hourly_rate', 'base_back_percentage', 'is_active', 'effective_from']
    list_filter = ['is_active']
    inlines = [SalesTierInline]


@admin.register(NominationType)
class NominationTypeAdmin(admin.ModelAdmin):
    list_display = ['type_name', 'display_name', 'price', 'back_percentage', 'is_active']


@admin.register(PayrollRuleAssignment)
class PayrollRuleAssignmentAdmin(admin.ModelAdmin):
    list_display = ['cast', 'rule', 'assigned_from', 'assigned_until', 'is_active']
    raw_id_fields = ['cast']


class PayrollCalculationDetailInline(admin.TabularInline):
    model = PayrollCalculationDetail
    extra = 0


@admin.register(PayrollCalculation)
class PayrollCalculationAdmin(admin.ModelAdmin):
    list_display = ['cast', 'period_start', 'period_end', 'gross_amount', 'net_amount', 'status']
    list_filter = ['status']
    raw_id_fields = ['cast']
    inlines = [PayrollCalculationDetailInline]
