"""Customer records: CRUD, search and bulk status changes."""

import logging
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import ProtectedError, Q, QuerySet

from ..models import Customer
from .exceptions import CustomerHasHistoryError, CustomerNotFoundError, DuplicatePhoneNumberError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'name_kana', 'phone_number', 'line_id', 'birthday', 'memo', 'status')


def get_customer(*, customer_id: UUID) -> Customer:
    try:
        return Customer.objects.get(id=customer_id)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError(f"Customer {customer_id} not found")


def _check_phone_unique(phone_number: str, exclude_id=None) -> None:
    if not phone_number:
        return
    qs = Customer.objects.filter(phone_number=phone_number)
    if exclude_id:
        qs = qs.exclude(id=exclude_id)
    if qs.exists():
        raise DuplicatePhoneNumberError(f"Phone number {phone_number} is already registered")


@transaction.atomic
def create_customer(*, created_by=None, **fields) -> Customer:
    """
    Create a customer record.

    Raises:
        DuplicatePhoneNumberError: If the phone number belongs to another customer
    """
    data = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}
    _check_phone_unique(data.get('phone_number', ''))

    customer = Customer.objects.create(created_by=created_by, updated_by=created_by, **data)
    logger.info('Customer %s created', customer.id)
    return customer


@transaction.atomic
def update_customer(*, customer_id: UUID, updated_by=None, **fields) -> Customer:
    customer = get_customer(customer_id=customer_id)
    if 'phone_number' in fields:
        _check_phone_unique(fields['phone_number'], exclude_id=customer.id)

    for key, value in fields.items():
        if key in EDITABLE_FIELDS:
            setattr(customer, key, value)
    customer.updated_by = updated_by
    customer.save()
    logger.info('Customer %s updated', customer.id)
    return customer


@transaction.atomic
def delete_customer(*, customer_id: UUID) -> None:
    customer = get_customer(customer_id=customer_id)
    try:
        customer.delete()
    except ProtectedError:
        raise CustomerHasHistoryError(f"Customer {customer_id} has visit history; block them instead")
    logger.info('Customer %s deleted', customer_id)


def search_customers(
    *,
    query: str = '',
    status: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> QuerySet:
    """
    Search customers by free text and status.

    The query matches name, kana, phone number and LINE id
    (case-insensitive, partial match).
    """
    qs = Customer.objects.all()
    if query:
        qs = qs.filter(
            Q(name__icontains=query)
            | Q(name_kana__icontains=query)
            | Q(phone_number__icontains=query)
            | Q(line_id__icontains=query)
        )
    if status:
        qs = qs.filter(status=status)
    if limit is not None:
        qs = qs[offset:offset + limit]
    elif offset:
        qs = qs[offset:]
    return qs


def bulk_update_status(*, customer_ids: Iterable[UUID], status: str, updated_by=None) -> dict:
    """
    Change the status of many customers one row at a time.

    Each row succeeds or fails on its own; nothing is rolled back.

    Returns:
        dict with 'succeeded' and 'failed' lists of ids (failed entries
        carry the error message)
    """
    succeeded, failed = [], []
    for customer_id in customer_ids:
        try:
            update_customer(customer_id=customer_id, updated_by=updated_by, status=status)
        except CustomerNotFoundError as e:
            logger.warning('Bulk status update skipped %s: %s', customer_id, e)
            failed.append({'id': str(customer_id), 'error': str(e)})
        else:
            succeeded.append(str(customer_id))
    return {'succeeded': succeeded, 'failed': failed}
