from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal
import uuid


class VisitStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class PaymentMethod(models.TextChoices):
    CASH = 'cash', 'Cash'
    CARD = 'card', 'Card'
    OTHER = 'other', 'Other'


class NominationRole(models.TextChoices):
    PRIMARY = 'primary', 'Primary'
    INHOUSE = 'inhouse', 'In-house'
    HELP = 'help', 'Help'
    DOUHAN = 'douhan', 'Douhan'
    AFTER = 'after', 'After'


class GuestType(models.TextChoices):
    MAIN = 'main', 'Main'
    COMPANION = 'companion', 'Companion'
    ADDITIONAL = 'additional', 'Additional'


class Visit(models.Model):
    """A party's stay at the venue from check-in to payment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session_code = models.CharField(max_length=20, unique=True)
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.PROTECT,
        related_name='visits',
    )
    table = models.ForeignKey(
        'tables.Table',
        on_delete=models.PROTECT,
        related_name='visits',
    )
    num_guests = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    check_in_at = models.DateTimeField(default=timezone.now, db_index=True)
    check_out_at = models.DateTimeField(null=True, blank=True)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    service_charge = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))],
    )
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices, blank=True)
    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    status = models.CharField(
        max_length=10,
        choices=VisitStatus.choices,
        default=VisitStatus.ACTIVE,
        db_index=True,
    )
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'visits'
        ordering = ['-check_in_at']
        indexes = [
            models.Index(fields=['customer', 'check_in_at']),
            models.Index(fields=['status', 'check_in_at']),
        ]

    def __str__(self):
        return self.session_code


class TableSegment(models.Model):
    """One stretch of a visit spent at one table."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name='table_segments')
    table = models.ForeignKey('tables.Table', on_delete=models.PROTECT, related_name='+')
    started_at = models.DateTimeField(default=timezone.now)
    ended_at = models.DateTimeField(null=True, blank=True)
    reason = models.CharField(max_length=100, default='initial')

    class Meta:
        db_table = 'visit_table_segments'
        ordering = ['started_at']


class Nomination(models.Model):
    """A cast member engaged on a visit, with the fee charged for it."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name='nominations')
    cast = models.ForeignKey('casts.CastProfile', on_delete=models.PROTECT, related_name='nominations')
    nomination_type = models.ForeignKey(
        'payroll.NominationType',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='nominations',
    )
    role = models.CharField(max_length=10, choices=NominationRole.choices, default=NominationRole.PRIMARY)
    fee_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    back_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0'))
    started_at = models.DateTimeField(default=timezone.now)
    ended_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'cast_engagements'
        ordering = ['started_at']
        indexes = [
            models.Index(fields=['cast', 'started_at']),
        ]


class VisitGuest(models.Model):
    """One person in a visiting party. The visit's customer is the main guest."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name='guests')
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.PROTECT,
        related_name='guest_visits',
    )
    guest_type = models.CharField(max_length=10, choices=GuestType.choices, default=GuestType.COMPANION)
    seat_position = models.PositiveSmallIntegerField(null=True, blank=True)
    is_primary_payer = models.BooleanField(default=False)
    check_in_at = models.DateTimeField(default=timezone.now)
    check_out_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'visit_guests'
        ordering = ['check_in_at']
        constraints = [
            models.UniqueConstraint(fields=['visit', 'customer'], name='unique_guest_per_visit'),
        ]

    def __str__(self):
        return f"{self.customer} @ {self.visit}"

    @property
    def is_present(self):
        return self.check_out_at is None
