"""Bottle-keep records: registration, serving, moves and expiry."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from ..models import BottleKeep, BottleKeepMovement, BottleKeepUsage, BottleStatus
from .exceptions import BottleKeepNotFoundError, BottleNotActiveError

logger = logging.getLogger(__name__)

LOW_AMOUNT = Decimal('0.25')

EDITABLE_FIELDS = (
    'product_id', 'opened_date', 'expiry_date', 'remaining_percentage', 'status',
    'storage_location', 'table_number', 'host_staff_id', 'notes', 'tags',
)


def next_bottle_number() -> str:
    """``BK`` followed by a zero padded six digit sequence."""
    sequence = BottleKeep.objects.count() + 1
    while True:
        number = f"BK{sequence:06d}"
        if not BottleKeep.objects.filter(bottle_number=number).exists():
            return number
        sequence += 1


def default_expiry(opened: date) -> date:
    return opened + relativedelta(months=settings.BOTTLE_KEEP_DEFAULT_MONTHS)


def get_bottle_keep(*, bottle_keep_id: UUID, lock: bool = False) -> BottleKeep:
    qs = BottleKeep.objects.select_for_update() if lock else BottleKeep.objects.select_related(
        'customer', 'product', 'host_staff'
    )
    try:
        return qs.get(id=bottle_keep_id)
    except BottleKeep.DoesNotExist:
        raise BottleKeepNotFoundError(f"Bottle keep {bottle_keep_id} not found")


@transaction.atomic
def create_bottle_keep(
    *,
    customer_id: UUID,
    product_id: UUID,
    opened_date: Optional[date] = None,
    expiry_date: Optional[date] = None,
    bottle_number: str = '',
    **fields,
) -> BottleKeep:
    opened = opened_date or timezone.localdate()
    data = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}

    bottle = BottleKeep.objects.create(
        customer_id=customer_id,
        product_id=product_id,
        bottle_number=bottle_number or next_bottle_number(),
        opened_date=opened,
        expiry_date=expiry_date or default_expiry(opened),
        **data,
    )
    logger.info('Bottle %s registered for customer %s', bottle.bottle_number, customer_id)
    return bottle


@transaction.atomic
def update_bottle_keep(*, bottle_keep_id: UUID, **fields) -> BottleKeep:
    bottle = get_bottle_keep(bottle_keep_id=bottle_keep_id, lock=True)
    for key, value in fields.items():
        if key in EDITABLE_FIELDS:
            setattr(bottle, key, value)
    if bottle.status == BottleStatus.ACTIVE and Decimal(bottle.remaining_percentage) <= 0:
        bottle.remaining_percentage = Decimal('0')
        bottle.status = BottleStatus.CONSUMED
    bottle.save()
    return bottle


@transaction.atomic
def delete_bottle_keep(*, bottle_keep_id: UUID) -> None:
    bottle = get_bottle_keep(bottle_keep_id=bottle_keep_id, lock=True)
    bottle.delete()
    logger.info('Bottle %s deleted', bottle.bottle_number)


@transaction.atomic
def serve_bottle(
    *,
    bottle_keep_id: UUID,
    served_amount: Decimal,
    visit_id: Optional[UUID] = None,
    notes: str = '',
    served_by=None,
) -> BottleKeep:
    """
    Pour from a kept bottle.

    The remaining level is clamped at zero; an empty bottle becomes
    consumed.

    Raises:
        BottleNotActiveError: If the bottle is not active
    """
    bottle = get_bottle_keep(bottle_keep_id=bottle_keep_id, lock=True)
    if bottle.status != BottleStatus.ACTIVE:
        raise BottleNotActiveError(f"Bottle {bottle.bottle_number} is {bottle.status}")

    BottleKeepUsage.objects.create(
        bottle_keep=bottle,
        visit_id=visit_id,
        served_amount=served_amount,
        served_by=served_by,
        notes=notes,
    )

    bottle.remaining_percentage = max(Decimal('0'), bottle.remaining_percentage - served_amount)
    if bottle.remaining_percentage == 0:
        bottle.status = BottleStatus.CONSUMED
    bottle.last_served_date = timezone.localdate()
    bottle.save()

    logger.info('Served %s from %s, %s left', served_amount, bottle.bottle_number, bottle.remaining_percentage)
    return bottle


@transaction.atomic
def move_bottle(*, bottle_keep_id: UUID, to_location: str, reason: str = '', moved_by=None) -> BottleKeep:
    bottle = get_bottle_keep(bottle_keep_id=bottle_keep_id, lock=True)
    if bottle.status != BottleStatus.ACTIVE:
        raise BottleNotActiveError(f"Bottle {bottle.bottle_number} is {bottle.status}")

    BottleKeepMovement.objects.create(
        bottle_keep=bottle,
        from_location=bottle.storage_location,
        to_location=to_location,
        reason=reason,
        moved_by=moved_by,
    )
    bottle.storage_location = to_location
    bottle.save(update_fields=['storage_location', 'updated_at'])
    return bottle


def update_expired_bottles() -> int:
    """Mark active bottles past their expiry date as expired. Returns the count."""
    count = BottleKeep.objects.filter(
        status=BottleStatus.ACTIVE, expiry_date__lt=timezone.localdate()
    ).update(status=BottleStatus.EXPIRED)
    if count:
        logger.info('%s bottle keeps expired', count)
    return count


def search_bottle_keeps(
    *,
    customer_id: Optional[UUID] = None,
    product_id: Optional[UUID] = None,
    status: Optional[str] = None,
    storage_location: Optional[str] = None,
    expiring_within: Optional[int] = None,
    low_amount: Optional[bool] = None,
    query: str = '',
) -> QuerySet:
    qs = BottleKeep.objects.select_related('customer', 'product', 'host_staff')
    if customer_id:
        qs = qs.filter(customer_id=customer_id)
    if product_id:
        qs = qs.filter(product_id=product_id)
    if status:
        qs = qs.filter(status=status)
    if storage_location:
        qs = qs.filter(storage_location=storage_location)
    if expiring_within is not None:
        qs = qs.filter(expiry_date__lte=timezone.localdate() + timedelta(days=expiring_within))
    if low_amount:
        qs = qs.filter(remaining_percentage__lte=LOW_AMOUNT)
    if query:
        qs = qs.filter(
            Q(customer__name__icontains=query)
            | Q(product__name__icontains=query)
            | Q(bottle_number__icontains=query)
        )
    return qs


def storage_locations() -> list:
    return list(
        BottleKeep.objects
        .exclude(storage_location='')
        .order_by('storage_location')
        .values_list('storage_location', flat=True)
        .distinct()
    )
