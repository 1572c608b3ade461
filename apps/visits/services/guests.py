"""Guests in a visiting party: arrivals, departures and the primary payer."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.customers.services import create_customer
from ..models import GuestType, Visit, VisitGuest, VisitStatus
from .exceptions import (
    GuestAlreadyPresentError,
    GuestCheckedOutError,
    GuestNotFoundError,
    VisitNotActiveError,
    VisitServiceError,
)
from .session_management import get_visit

logger = logging.getLogger(__name__)


def _require_active(visit: Visit) -> None:
    if visit.status != VisitStatus.ACTIVE:
        raise VisitNotActiveError(f"Visit {visit.session_code} is {visit.status}")


def _sync_headcount(visit: Visit) -> None:
    present = visit.guests.filter(check_out_at__isnull=True).count()
    if present > visit.num_guests:
        visit.num_guests = present
        visit.save(update_fields=['num_guests', 'updated_at'])


def get_guest(*, guest_id: UUID, lock: bool = False) -> VisitGuest:
    qs = VisitGuest.objects.select_for_update() if lock else VisitGuest.objects.select_related('customer', 'visit')
    try:
        return qs.get(id=guest_id)
    except VisitGuest.DoesNotExist:
        raise GuestNotFoundError(f"Guest {guest_id} not found")


def visit_guests(*, visit_id: UUID) -> QuerySet:
    return VisitGuest.objects.filter(visit_id=visit_id).select_related('customer')


@transaction.atomic
def add_guest(
    *,
    visit_id: UUID,
    customer_id: Optional[UUID] = None,
    name: str = '',
    phone_number: str = '',
    guest_type: str = GuestType.COMPANION,
    seat_position: Optional[int] = None,
    is_primary_payer: bool = False,
    created_by=None,
) -> VisitGuest:
    """
    Add a person to an active visit.

    Either an existing customer or a name for a new customer record is
    needed. The visit headcount grows to cover every present guest.

    Raises:
        VisitNotActiveError: If the visit is closed
        GuestAlreadyPresentError: If the customer is already on the visit
        DuplicatePhoneNumberError: If a new guest's phone number is taken
    """
    visit = get_visit(visit_id=visit_id, lock=True)
    _require_active(visit)

    if customer_id is None:
        if not name:
            raise VisitServiceError('A customer or a guest name is required')
        customer_id = create_customer(name=name, phone_number=phone_number, created_by=created_by).id

    if visit.guests.filter(customer_id=customer_id).exists():
        raise GuestAlreadyPresentError(f"Customer {customer_id} is already on visit {visit.session_code}")

    if is_primary_payer:
        visit.guests.update(is_primary_payer=False)
    guest = VisitGuest.objects.create(
        visit=visit,
        customer_id=customer_id,
        guest_type=guest_type,
        seat_position=seat_position,
        is_primary_payer=is_primary_payer,
    )
    _sync_headcount(visit)

    logger.info('Guest %s joined visit %s as %s', customer_id, visit.session_code, guest_type)
    return guest


@transaction.atomic
def check_out_guest(*, guest_id: UUID, when=None) -> VisitGuest:
    """
    Record a guest leaving before the rest of the party.

    Raises:
        GuestCheckedOutError: If the guest has already left
    """
    guest = get_guest(guest_id=guest_id, lock=True)
    if guest.check_out_at is not None:
        raise GuestCheckedOutError(f"Guest {guest_id} already checked out")

    guest.check_out_at = when or timezone.now()
    guest.save(update_fields=['check_out_at', 'updated_at'])
    logger.info('Guest %s checked out of visit %s', guest.id, guest.visit_id)
    return guest


@transaction.atomic
def transfer_guest(*, guest_id: UUID, to_visit_id: UUID) -> VisitGuest:
    """
    Move a guest to another active visit.

    The guest starts fresh on the new visit: check-in is reset and they
    are not the payer there. Orders attributed to the guest stay on the
    old visit's bill and fall back to its primary payer.

    Raises:
        VisitNotActiveError: If either visit is closed
        GuestAlreadyPresentError: If the customer is already on the target visit
    """
    guest = get_guest(guest_id=guest_id, lock=True)
    if str(guest.visit_id) == str(to_visit_id):
        raise VisitServiceError('Guest is already on this visit')

    _require_active(get_visit(visit_id=guest.visit_id))
    target = get_visit(visit_id=to_visit_id, lock=True)
    _require_active(target)
    if target.guests.filter(customer_id=guest.customer_id).exists():
        raise GuestAlreadyPresentError(
            f"Customer {guest.customer_id} is already on visit {target.session_code}"
        )

    guest.order_shares.all().delete()
    guest.visit = target
    guest.check_in_at = timezone.now()
    guest.check_out_at = None
    guest.is_primary_payer = False
    guest.save()
    _sync_headcount(target)

    logger.info('Guest %s transferred to visit %s', guest.id, target.session_code)
    return guest


@transaction.atomic
def set_primary_payer(*, guest_id: UUID) -> VisitGuest:
    """Make ``guest_id`` the only primary payer on its visit."""
    guest = get_guest(guest_id=guest_id, lock=True)
    VisitGuest.objects.filter(visit_id=guest.visit_id).exclude(id=guest.id).update(is_primary_payer=False)
    guest.is_primary_payer = True
    guest.save(update_fields=['is_primary_payer', 'updated_at'])
    return guest
