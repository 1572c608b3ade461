from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from decimal import Decimal
import uuid


class CastProfile(models.Model):
    """Public profile and pay terms of a cast-role staff member."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    staff = models.OneToOneField(
        'staff.Staff',
        on_delete=models.CASCADE,
        related_name='cast_profile',
    )
    stage_name = models.CharField(max_length=50)
    birthday = models.DateField(null=True, blank=True)
    blood_type = models.CharField(max_length=3, blank=True)
    height = models.PositiveSmallIntegerField(null=True, blank=True)
    three_size = models.CharField(max_length=20, blank=True)
    hobby = models.CharField(max_length=200, blank=True)
    special_skill = models.CharField(max_length=200, blank=True)
    self_introduction = models.TextField(max_length=1000, blank=True)
    profile_image_url = models.URLField(blank=True)

    hourly_rate = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))],
    )
    back_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
    )
    is_active = models.BooleanField(default=True, db_index=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'casts_profile'
        ordering = ['stage_name']

    def __str__(self):
        return self.stage_name


class CastPerformance(models.Model):
    """Daily performance figures of a cast member."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cast = models.ForeignKey(CastProfile, on_delete=models.CASCADE, related_name='performances')
    date = models.DateField()
    shimei_count = models.PositiveIntegerField(default=0)
    dohan_count = models.PositiveIntegerField(default=0)
    sales_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    drink_count = models.PositiveIntegerField(default=0)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'cast_performances'
        ordering = ['-date']
        constraints = [
            models.UniqueConstraint(fields=['cast', 'date'], name='unique_cast_performance_per_day'),
        ]
