"""Bottle-keep statistics, alerts and expiry views."""

from collections import defaultdict
from datetime import timedelta
from decimal import Decimal
from uuid import UUID

from django.utils import timezone

from ..models import BottleKeep, BottleStatus

ALERT_WINDOW_DAYS = 7
CRITICAL_DAYS = 3
LOW_AMOUNT = Decimal('0.25')
CRITICAL_AMOUNT = Decimal('0.1')
SEVERITY_ORDER = {'critical': 0, 'warning': 1}


def bottle_value(bottle: BottleKeep) -> Decimal:
    """Product price scaled by what is left in the bottle."""
    return bottle.product.price * bottle.remaining_percentage


def _active():
    return BottleKeep.objects.filter(status=BottleStatus.ACTIVE).select_related('customer', 'product')


def bottle_keep_stats() -> dict:
    today = timezone.localdate()
    counts = defaultdict(int)
    for status in BottleKeep.objects.values_list('status', flat=True):
        counts[status] += 1

    active = list(_active())
    return {
        'total_bottles': sum(counts.values()),
        'active_bottles': counts[BottleStatus.ACTIVE],
        'expired_bottles': counts[BottleStatus.EXPIRED],
        'consumed_bottles': counts[BottleStatus.CONSUMED],
        'total_value': sum((bottle_value(b) for b in active), Decimal('0')),
        'expiring_soon': sum(
            1 for b in active
            if today <= b.expiry_date <= today + timedelta(days=ALERT_WINDOW_DAYS)
        ),
    }


def bottle_keep_alerts() -> list:
    """
    Expiry and low-amount alerts for active bottles.

    A bottle can raise both an expiry and a low-amount alert. Critical
    alerts sort first.
    """
    today = timezone.localdate()
    alerts = []

    for bottle in _active():
        base = {
            'bottle_keep_id': bottle.id,
            'bottle_number': bottle.bottle_number,
            'customer_name': bottle.customer.name,
            'product_name': bottle.product.name,
        }
        days_left = (bottle.expiry_date - today).days

        if days_left < 0:
            alerts.append({
                **base,
                'alert_type': 'expired',
                'severity': 'critical',
                'message': f"Expired {-days_left} days ago",
                'days_until_expiry': days_left,
            })
        elif days_left <= ALERT_WINDOW_DAYS:
            alerts.append({
                **base,
                'alert_type': 'expiring',
                'severity': 'critical' if days_left <= CRITICAL_DAYS else 'warning',
                'message': f"Expires in {days_left} days",
                'days_until_expiry': days_left,
            })

        if bottle.remaining_percentage <= LOW_AMOUNT:
            alerts.append({
                **base,
                'alert_type': 'low_amount',
                'severity': 'critical' if bottle.remaining_percentage <= CRITICAL_AMOUNT else 'warning',
                'message': f"{int(bottle.remaining_percentage * 100)}% left",
                'days_until_expiry': days_left,
            })

    alerts.sort(key=lambda a: SEVERITY_ORDER[a['severity']])
    return alerts


def bottle_alert_count() -> int:
    return len(bottle_keep_alerts())


def customer_summary(*, customer_id: UUID) -> dict:
    bottles = list(
        BottleKeep.objects.filter(customer_id=customer_id).select_related('customer', 'product')
    )
    active = [b for b in bottles if b.status == BottleStatus.ACTIVE]
    return {
        'customer_id': customer_id,
        'customer_name': bottles[0].customer.name if bottles else None,
        'total_bottles': len(bottles),
        'active_bottles': len(active),
        'total_value': sum((bottle_value(b) for b in active), Decimal('0')),
        'bottles': bottles,
    }


def expiry_management() -> dict:
    """Active bottles bucketed by how soon they expire, plus expired ones."""
    today = timezone.localdate()
    week = today + timedelta(days=7)
    month = today + timedelta(days=30)

    buckets = {'expiring_today': [], 'expiring_this_week': [], 'expiring_this_month': []}
    for bottle in _active():
        if bottle.expiry_date == today:
            buckets['expiring_today'].append(bottle)
        elif today < bottle.expiry_date <= week:
            buckets['expiring_this_week'].append(bottle)
        elif week < bottle.expiry_date <= month:
            buckets['expiring_this_month'].append(bottle)

    buckets['expired'] = list(
        BottleKeep.objects.filter(status=BottleStatus.EXPIRED).select_related('customer', 'product')
    )
    return buckets


def inventory_by_location() -> list:
    groups = defaultdict(list)
    for bottle in _active():
        groups[bottle.storage_location or 'unassigned'].append(bottle)

    return [
        {
            'storage_location': location,
            'total_bottles': len(bottles),
            'total_value': sum((bottle_value(b) for b in bottles), Decimal('0')),
            'bottles': bottles,
        }
        for location, bottles in sorted(groups.items())
    ]
