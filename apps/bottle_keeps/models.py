from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from decimal import Decimal
import uuid


class BottleStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    CONSUMED = 'consumed', 'Consumed'
    EXPIRED = 'expired', 'Expired'
    REMOVED = 'removed', 'Removed'


class BottleKeep(models.Model):
    """
    A bottle bought by a customer and kept at the venue for later visits.

    ``remaining_percentage`` runs from 1 (full) to 0 (empty).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bottle_number = models.CharField(max_length=20, unique=True)
    customer = models.ForeignKey(
        'customers.Customer', on_delete=models.CASCADE, related_name='bottle_keeps'
    )
    product = models.ForeignKey(
        'inventory.Product', on_delete=models.PROTECT, related_name='bottle_keeps'
    )
    opened_date = models.DateField()
    expiry_date = models.DateField(db_index=True)
    remaining_percentage = models.DecimalField(
        max_digits=4,
        decimal_places=3,
        default=Decimal('1'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('1'))],
    )
    status = models.CharField(
        max_length=10,
        choices=BottleStatus.choices,
        default=BottleStatus.ACTIVE,
        db_index=True,
    )
    storage_location = models.CharField(max_length=50, blank=True)
    table_number = models.CharField(max_length=20, blank=True)
    host_staff = models.ForeignKey(
        'staff.Staff', on_delete=models.SET_NULL, null=True, blank=True, related_name='hosted_bottles'
    )
    notes = models.TextField(blank=True)
    tags = models.JSONField(default=list, blank=True)
    last_served_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bottle_keeps'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['customer', 'status']),
            models.Index(fields=['status', 'expiry_date']),
        ]

    def __str__(self):
        return f"{self.bottle_number} ({self.product})"


class BottleKeepUsage(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bottle_keep = models.ForeignKey(BottleKeep, on_delete=models.CASCADE, related_name='usages')
    visit = models.ForeignKey(
        'visits.Visit', on_delete=models.SET_NULL, null=True, blank=True, related_name='bottle_usages'
    )
    served_amount = models.DecimalField(
        max_digits=4,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001')), MaxValueValidator(Decimal('1'))],
    )
    served_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    notes = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'bottle_keep_usage'
        ordering = ['-created_at']


class BottleKeepMovement(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bottle_keep = models.ForeignKey(BottleKeep, on_delete=models.CASCADE, related_name='movements')
    from_location = models.CharField(max_length=50, blank=True)
    to_location = models.CharField(max_length=50)
    reason = models.CharField(max_length=200, blank=True)
    moved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'bottle_keep_movements'
        ordering = ['-created_at']
