from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from decimal import Decimal
import uuid

PERCENT_VALIDATORS = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]


class PayrollRule(models.Model):
    """Hourly base rate and sales back for a group of casts."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    rule_name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    base_hourly_rate = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    base_back_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'), validators=PERCENT_VALIDATORS
    )
    is_active = models.BooleanField(default=True)
    effective_from = models.DateField()
    effective_until = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payroll_rules'
        ordering = ['rule_name']

    def __str__(self):
        return self.rule_name


class SalesTier(models.Model):
    """Back percentage applied to the slice of sales between min and max."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    rule = models.ForeignKey(PayrollRule, on_delete=models.CASCADE, related_name='sales_tiers')
    min_sales = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    max_sales = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    back_percentage = models.DecimalField(max_digits=5, decimal_places=2, validators=PERCENT_VALIDATORS)

    class Meta:
        db_table = 'sales_tiers'
        ordering = ['min_sales']


class NominationType(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    type_name = models.CharField(max_length=50, unique=True)
    display_name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    back_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'), validators=PERCENT_VALIDATORS
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'nomination_types'
        ordering = ['-back_percentage']

    def __str__(self):
        return self.display_name


class PayrollRuleAssignment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cast = models.ForeignKey('casts.CastProfile', on_delete=models.CASCADE, related_name='payroll_assignments')
    rule = models.ForeignKey(PayrollRule, on_delete=models.PROTECT, related_name='assignments')
    assigned_from = models.DateField()
    assigned_until = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payroll_rule_assignments'
        ordering = ['-assigned_from']
        indexes = [
            models.Index(fields=['cast', 'is_active', 'assigned_from']),
        ]


class CalculationStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    CONFIRMED = 'confirmed', 'Confirmed'
    APPROVED = 'approved', 'Approved'


class PayrollCalculation(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cast = models.ForeignKey('casts.CastProfile', on_delete=models.CASCADE, related_name='payroll_calculations')
    rule = models.ForeignKey(PayrollRule, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    period_start = models.DateField()
    period_end = models.DateField()
    work_hours = models.PositiveIntegerField(default=0)
    total_sales = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    base_pay = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    back_pay = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    nomination_pay = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    gross_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    deductions = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    net_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    status = models.CharField(
        max_length=10, choices=CalculationStatus.choices, default=CalculationStatus.DRAFT, db_index=True
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payroll_calculations'
        ordering = ['-period_start']
        indexes = [
            models.Index(fields=['cast', 'period_start']),
        ]

    def __str__(self):
        return f"{self.cast} {self.period_start}..{self.period_end}"


class DetailItemType(models.TextChoices):
    BASE = 'base', 'Base'
    BACK = 'back', 'Back'
    NOMINATION = 'nomination', 'Nomination'


class PayrollCalculationDetail(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    calculation = models.ForeignKey(PayrollCalculation, on_delete=models.CASCADE, related_name='details')
    item_type = models.CharField(max_length=12, choices=DetailItemType.choices)
    description = models.CharField(max_length=200)
    quantity = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    rate = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'payroll_calculation_details'
