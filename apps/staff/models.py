from django.conf import settings
from django.db import models
import uuid

from apps.accounts.models import StaffRole


class Staff(models.Model):
    """An employee of the venue, optionally linked to a login account."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='staff_profile',
    )
    full_name = models.CharField(max_length=100)
    full_name_kana = models.CharField(max_length=100, blank=True)
    role = models.CharField(max_length=20, choices=StaffRole.choices, db_index=True)
    hire_date = models.DateField()
    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'staffs'
        ordering = ['role', 'full_name']
        indexes = [
            models.Index(fields=['role', 'is_active']),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.role})"
