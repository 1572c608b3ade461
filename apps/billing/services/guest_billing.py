"""Per-guest attribution of orders and individual bills for a party."""

import logging
from decimal import Decimal
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import Sum

from apps.visits.models import Nomination, VisitGuest, VisitStatus
from apps.visits.services import get_guest, get_visit
from ..models import GuestOrder, OrderItem
from .exceptions import InvalidSplitError, VisitClosedError
from .order_management import get_order_item, share_amounts
from .payment import floor_yen

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
HUNDRED = Decimal('100')


def unassigned_total(*, visit_id: UUID) -> Decimal:
    """Order items nobody has claimed plus every nomination fee on the visit."""
    items = (
        OrderItem.objects
        .filter(visit_id=visit_id, guest_shares__isnull=True)
        .aggregate(total=Sum('total_price'))['total'] or ZERO
    )
    nominations = Nomination.objects.filter(visit_id=visit_id).aggregate(total=Sum('fee_amount'))['total'] or ZERO
    return items + nominations


@transaction.atomic
def split_order_item(*, order_item_id: UUID, shares: list) -> list:
    """
    Charge an order item to one or more guests of its visit.

    ``shares`` is a list of ``{'guest_id': ..., 'percentage': ...}``;
    percentages must add up to 100. Existing shares of the item are
    replaced.

    Raises:
        VisitClosedError: If the visit is not active
        InvalidSplitError: If the shares are empty, repeat a guest, name a
            guest from another visit or do not add up to 100
    """
    order_item = get_order_item(order_item_id=order_item_id)
    if order_item.visit.status != VisitStatus.ACTIVE:
        raise VisitClosedError(f"Visit {order_item.visit.session_code} is {order_item.visit.status}")

    if not shares:
        raise InvalidSplitError('At least one guest is required')
    guest_ids = [str(share['guest_id']) for share in shares]
    if len(set(guest_ids)) != len(guest_ids):
        raise InvalidSplitError('A guest can only appear once in a split')
    percentages = [Decimal(share['percentage']) for share in shares]
    if any(p <= 0 for p in percentages) or sum(percentages) != HUNDRED:
        raise InvalidSplitError(f"Shares must be positive and add up to 100, got {sum(percentages)}")

    guests = {
        str(guest.id): guest
        for guest in VisitGuest.objects.filter(id__in=guest_ids, visit_id=order_item.visit_id)
    }
    missing = [guest_id for guest_id in guest_ids if guest_id not in guests]
    if missing:
        raise InvalidSplitError(f"Guests {', '.join(missing)} are not on this visit")

    order_item.guest_shares.all().delete()
    amounts = share_amounts(order_item.total_price, percentages)
    created = [
        GuestOrder.objects.create(
            order_item=order_item,
            guest=guests[guest_id],
            share_percentage=percentage,
            amount=amount,
        )
        for guest_id, percentage, amount in zip(guest_ids, percentages, amounts)
    ]
    logger.info('Order item %s split across %s guests', order_item.id, len(created))
    return created


def assign_order_item(*, order_item_id: UUID, guest_id: UUID) -> GuestOrder:
    """Charge the whole order item to one guest."""
    return split_order_item(
        order_item_id=order_item_id, shares=[{'guest_id': guest_id, 'percentage': HUNDRED}]
    )[0]


@transaction.atomic
def clear_order_item_shares(*, order_item_id: UUID) -> None:
    """Hand the order item back to the primary payer."""
    order_item = get_order_item(order_item_id=order_item_id)
    if order_item.visit.status != VisitStatus.ACTIVE:
        raise VisitClosedError(f"Visit {order_item.visit.session_code} is {order_item.visit.status}")
    order_item.guest_shares.all().delete()


def guest_bill(*, guest_id: UUID) -> dict:
    """
    Price one guest's part of the visit.

    A guest pays their order shares. The primary payer also carries every
    unclaimed order item and all nomination fees. Service charge and tax
    are applied per guest and floored to whole yen, so the guest totals
    can fall a few yen short of the visit bill.
    """
    guest = get_guest(guest_id=guest_id)

    items_total = (
        guest.order_shares
        .filter(order_item__visit_id=guest.visit_id)
        .aggregate(total=Sum('amount'))['total'] or ZERO
    )
    carried = unassigned_total(visit_id=guest.visit_id) if guest.is_primary_payer else ZERO

    subtotal = items_total + carried
    service_charge = floor_yen(subtotal * settings.BILLING_SERVICE_CHARGE_RATE)
    tax_amount = floor_yen((subtotal + service_charge) * settings.BILLING_TAX_RATE)

    return {
        'guest_id': guest.id,
        'customer_id': guest.customer_id,
        'customer_name': guest.customer.name,
        'is_primary_payer': guest.is_primary_payer,
        'items_total': items_total,
        'carried_total': carried,
        'subtotal': subtotal,
        'service_charge': service_charge,
        'tax_amount': tax_amount,
        'total_amount': subtotal + service_charge + tax_amount,
    }


def split_bill(*, visit_id: UUID) -> dict:
    """
    Individual bills for every guest on the visit.

    Without a primary payer the unclaimed amount is reported as
    ``unassigned_total`` instead of being charged to anyone.
    """
    visit = get_visit(visit_id=visit_id)
    guests = list(visit.guests.order_by('check_in_at'))
    has_payer = any(guest.is_primary_payer for guest in guests)

    return {
        'visit_id': visit.id,
        'guests': [guest_bill(guest_id=guest.id) for guest in guests],
        'unassigned_total': ZERO if has_payer else unassigned_total(visit_id=visit.id),
    }
