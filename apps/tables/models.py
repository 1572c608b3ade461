from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
import uuid


class TableStatus(models.TextChoices):
    AVAILABLE = 'available', 'Available'
    RESERVED = 'reserved', 'Reserved'
    OCCUPIED = 'occupied', 'Occupied'
    CLEANING = 'cleaning', 'Cleaning'


class Table(models.Model):
    """A seat group on the floor. Holds at most one active visit."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    table_name = models.CharField(max_length=50, unique=True)
    capacity = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(50)]
    )
    location = models.CharField(max_length=100, blank=True)
    is_vip = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    current_status = models.CharField(
        max_length=10,
        choices=TableStatus.choices,
        default=TableStatus.AVAILABLE,
        db_index=True,
    )
    current_visit = models.OneToOneField(
        'visits.Visit',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='seated_at',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tables'
        ordering = ['table_name']

    def __str__(self):
        return self.table_name
