from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from decimal import Decimal
import uuid


class OrderItem(models.Model):
    """A product ordered during a visit, optionally credited to a cast."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    visit = models.ForeignKey('visits.Visit', on_delete=models.CASCADE, related_name='order_items')
    product = models.ForeignKey('inventory.Product', on_delete=models.PROTECT, related_name='order_items')
    cast = models.ForeignKey(
        'casts.CastProfile',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items',
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0'))]
    )
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    notes = models.CharField(max_length=200, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'order_items'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['visit', 'created_at']),
            models.Index(fields=['cast', 'created_at']),
        ]

    def __str__(self):
        return f"{self.product} x{self.quantity}"

    def save(self, *args, **kwargs):
        self.total_price = self.unit_price * self.quantity
        super().save(*args, **kwargs)


class GuestOrder(models.Model):
    """The part of an order item charged to one guest."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_item = models.ForeignKey(OrderItem, on_delete=models.CASCADE, related_name='guest_shares')
    guest = models.ForeignKey('visits.VisitGuest', on_delete=models.CASCADE, related_name='order_shares')
    share_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01')), MaxValueValidator(Decimal('100'))],
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'guest_orders'
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(fields=['order_item', 'guest'], name='unique_guest_share_per_item'),
        ]

    @property
    def is_shared(self):
        return self.share_percentage < 100


class DailyClosing(models.Model):
    """Register close for one business day. One row per date."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    closing_date = models.DateField(unique=True)
    total_visits = models.PositiveIntegerField(default=0)
    total_sales = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_cash = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_card = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    closed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    closed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'daily_closings'
        ordering = ['-closing_date']

    def __str__(self):
        return f"Closing {self.closing_date}"
