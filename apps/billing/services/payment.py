"""Bill calculation and checkout."""

import logging
from decimal import Decimal, ROUND_FLOOR
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.tables.models import Table
from apps.visits.models import Nomination, PaymentStatus, VisitStatus
from apps.visits.services import check_out_party, close_open_segment, get_visit, release_table
from ..models import OrderItem
from .exceptions import VisitClosedError

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


def floor_yen(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(Decimal('1'), rounding=ROUND_FLOOR)


def calculate_bill(*, visit_id: UUID) -> dict:
    """
    Price a visit.

    subtotal is order items plus every nomination fee on the visit, ended
    ones included. The service charge is taken on the subtotal, tax on
    subtotal plus service charge, both floored to whole yen.
    """
    visit = get_visit(visit_id=visit_id)

    items_total = OrderItem.objects.filter(visit=visit).aggregate(total=Sum('total_price'))['total'] or ZERO
    nomination_total = (
        Nomination.objects
        .filter(visit=visit)
        .aggregate(total=Sum('fee_amount'))['total'] or ZERO
    )

    subtotal = items_total + nomination_total
    service_charge = floor_yen(subtotal * settings.BILLING_SERVICE_CHARGE_RATE)
    tax_amount = floor_yen((subtotal + service_charge) * settings.BILLING_TAX_RATE)

    return {
        'visit_id': visit.id,
        'items_total': items_total,
        'nomination_total': nomination_total,
        'subtotal': subtotal,
        'service_charge': service_charge,
        'tax_amount': tax_amount,
        'total_amount': subtotal + service_charge + tax_amount,
    }


@transaction.atomic
def process_payment(*, visit_id: UUID, payment_method: str, notes: str = ''):
    """
    Settle a visit.

    Stores the bill on the visit, marks payment and visit completed,
    closes the table segment, checks out the party, ends active
    nominations and sends the table to cleaning.

    Raises:
        VisitClosedError: If the visit is not active
    """
    visit = get_visit(visit_id=visit_id, lock=True)
    if visit.status != VisitStatus.ACTIVE:
        raise VisitClosedError(f"Visit {visit.session_code} is {visit.status}")

    bill = calculate_bill(visit_id=visit.id)
    now = timezone.now()

    visit.subtotal = bill['subtotal']
    visit.service_charge = bill['service_charge']
    visit.tax_amount = bill['tax_amount']
    visit.total_amount = bill['total_amount']
    visit.payment_method = payment_method
    visit.payment_status = PaymentStatus.COMPLETED
    visit.status = VisitStatus.COMPLETED
    visit.check_out_at = now
    if notes:
        visit.notes = f"{visit.notes}\n{notes}".strip()
    visit.save()

    close_open_segment(visit, when=now)
    check_out_party(visit, when=now)
    visit.nominations.filter(is_active=True).update(is_active=False, ended_at=now)
    release_table(Table.objects.select_for_update().get(id=visit.table_id))

    logger.info(
        'Visit %s paid %s by %s', visit.session_code, visit.total_amount, payment_method
    )
    return visit
