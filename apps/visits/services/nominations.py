"""Cast engagements (nominations) on a visit."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.payroll.models import NominationType
from ..models import Nomination, VisitStatus
from .exceptions import (
    VisitNotActiveError,
    NominationNotFoundError,
    CastAlreadyEngagedError,
    VisitServiceError,
)
from .session_management import get_visit

logger = logging.getLogger(__name__)


@transaction.atomic
def add_nomination(
    *,
    visit_id: UUID,
    cast_id: UUID,
    role: str = 'primary',
    nomination_type_id: Optional[UUID] = None,
) -> Nomination:
    """
    Engage a cast member on a visit.

    Fee and back percentage are copied from the nomination type at the
    time of nomination so later price changes do not alter the bill.

    Raises:
        VisitNotActiveError: If the visit is closed
        CastAlreadyEngagedError: If the cast is already active on the visit
    """
    visit = get_visit(visit_id=visit_id, lock=True)
    if visit.status != VisitStatus.ACTIVE:
        raise VisitNotActiveError(f"Visit {visit.session_code} is {visit.status}")

    if Nomination.objects.filter(visit=visit, cast_id=cast_id, is_active=True).exists():
        raise CastAlreadyEngagedError("This cast is already active on the visit")

    fee, back = Decimal('0'), Decimal('0')
    nomination_type = None
    if nomination_type_id:
        try:
            nomination_type = NominationType.objects.get(id=nomination_type_id, is_active=True)
        except NominationType.DoesNotExist:
            raise VisitServiceError(f"Nomination type {nomination_type_id} not found")
        fee, back = nomination_type.price, nomination_type.back_percentage

    nomination = Nomination.objects.create(
        visit=visit,
        cast_id=cast_id,
        nomination_type=nomination_type,
        role=role,
        fee_amount=fee,
        back_percentage=back,
    )
    logger.info('Cast %s nominated on visit %s (fee %s)', cast_id, visit.session_code, fee)
    return nomination


@transaction.atomic
def end_nomination(*, nomination_id: UUID) -> Nomination:
    try:
        nomination = Nomination.objects.select_for_update().get(id=nomination_id)
    except Nomination.DoesNotExist:
        raise NominationNotFoundError(f"Nomination {nomination_id} not found")

    if nomination.is_active:
        nomination.is_active = False
        nomination.ended_at = timezone.now()
        nomination.save(update_fields=['is_active', 'ended_at'])
    return nomination
