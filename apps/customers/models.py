from django.conf import settings
from django.db import models
import uuid


class CustomerStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    VIP = 'vip', 'VIP'
    BLOCKED = 'blocked', 'Blocked'


class Customer(models.Model):
    """A guest of the venue tracked for CRM, bookings and bottle-keeps."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    name_kana = models.CharField(max_length=100, blank=True)
    phone_number = models.CharField(max_length=20, blank=True, db_index=True)
    line_id = models.CharField(max_length=50, blank=True)
    birthday = models.DateField(null=True, blank=True)
    memo = models.TextField(max_length=1000, blank=True)
    status = models.CharField(
        max_length=10,
        choices=CustomerStatus.choices,
        default=CustomerStatus.ACTIVE,
        db_index=True,
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['name']),
            models.Index(fields=['name_kana']),
        ]

    def __str__(self):
        return self.name
