"""Customer ID verification and complaint handling."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from ..models import Complaint, ComplaintStatus, IdVerification
from .exceptions import (
    AlreadyVerifiedError,
    ComplaintAlreadyResolvedError,
    ComplaintNotFoundError,
    VerificationNotFoundError,
)

logger = logging.getLogger(__name__)


def age_on(birth_date: date, on_date: date) -> int:
    return relativedelta(on_date, birth_date).years


def _flag_notes(notes: str, birth_date: Optional[date], expiry_date: Optional[date]) -> str:
    today = timezone.localdate()
    flags = []
    if birth_date and age_on(birth_date, today) < settings.LEGAL_AGE:
        flags.append(f"[UNDERAGE] Customer is under {settings.LEGAL_AGE}")
    if expiry_date and expiry_date < today:
        flags.append(f"[EXPIRED] Document expired on {expiry_date.isoformat()}")
    return '\n'.join(flags + ([notes] if notes else []))


@transaction.atomic
def create_id_verification(
    *,
    customer_id: UUID,
    id_type: str,
    birth_date: Optional[date] = None,
    expiry_date: Optional[date] = None,
    id_image_url: str = '',
    ocr_result: Optional[dict] = None,
    notes: str = '',
) -> IdVerification:
    """
    Record an identity document check.

    Underage and expired documents are flagged at the top of ``notes``;
    the record is still saved so the refusal is on file.
    """
    verification = IdVerification.objects.create(
        customer_id=customer_id,
        id_type=id_type,
        birth_date=birth_date,
        expiry_date=expiry_date,
        id_image_url=id_image_url,
        ocr_result=ocr_result,
        notes=_flag_notes(notes, birth_date, expiry_date),
    )
    if verification.notes.startswith('[UNDERAGE]'):
        logger.warning('Underage ID presented for customer %s', customer_id)
    return verification


def get_id_verification(*, verification_id: UUID, lock: bool = False) -> IdVerification:
    qs = IdVerification.objects.select_related('customer', 'verified_by')
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(id=verification_id)
    except IdVerification.DoesNotExist:
        raise VerificationNotFoundError(f"ID verification {verification_id} not found")


@transaction.atomic
def verify_id(*, verification_id: UUID, verified_by=None) -> IdVerification:
    verification = get_id_verification(verification_id=verification_id, lock=True)
    if verification.is_verified:
        raise AlreadyVerifiedError('ID is already verified')

    verification.is_verified = True
    verification.verification_date = timezone.now()
    verification.verified_by = verified_by
    verification.save(update_fields=['is_verified', 'verification_date', 'verified_by'])
    logger.info('ID verification %s confirmed', verification.id)
    return verification


def id_verifications(
    *,
    customer_id: Optional[UUID] = None,
    id_type: Optional[str] = None,
    is_verified: Optional[bool] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> QuerySet:
    qs = IdVerification.objects.select_related('customer', 'verified_by')
    if customer_id:
        qs = qs.filter(customer_id=customer_id)
    if id_type:
        qs = qs.filter(id_type=id_type)
    if is_verified is not None:
        qs = qs.filter(is_verified=is_verified)
    if start_date:
        qs = qs.filter(created_at__date__gte=start_date)
    if end_date:
        qs = qs.filter(created_at__date__lte=end_date)
    return qs


# ============== Complaints ==============

def create_complaint(
    *,
    description: str,
    category: str,
    customer_id: Optional[UUID] = None,
    received_at=None,
    handled_by=None,
) -> Complaint:
    complaint = Complaint.objects.create(
        customer_id=customer_id,
        description=description,
        category=category,
        received_at=received_at or timezone.now(),
        handled_by=handled_by,
    )
    logger.info('Complaint %s received (%s)', complaint.id, category)
    return complaint


@transaction.atomic
def resolve_complaint(*, complaint_id: UUID, resolution: str, handled_by=None) -> Complaint:
    try:
        complaint = Complaint.objects.select_for_update().get(id=complaint_id)
    except Complaint.DoesNotExist:
        raise ComplaintNotFoundError(f"Complaint {complaint_id} not found")

    if complaint.status == ComplaintStatus.RESOLVED:
        raise ComplaintAlreadyResolvedError('Complaint is already resolved')

    complaint.status = ComplaintStatus.RESOLVED
    complaint.resolution = resolution
    complaint.resolved_at = timezone.now()
    complaint.handled_by = handled_by or complaint.handled_by
    complaint.save()
    logger.info('Complaint %s resolved', complaint.id)
    return complaint


def complaints(
    *,
    status: Optional[str] = None,
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> QuerySet:
    qs = Complaint.objects.select_related('customer', 'handled_by')
    if status:
        qs = qs.filter(status=status)
    if category:
        qs = qs.filter(category=category)
    if start_date:
        qs = qs.filter(received_at__date__gte=start_date)
    if end_date:
        qs = qs.filter(received_at__date__lte=end_date)
    return qs
