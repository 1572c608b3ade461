"""Staff roster management."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import StaffRole
from ..models import Staff
from .exceptions import StaffNotFoundError, DuplicateStaffAccountError, InvalidStaffOperationError

User = get_user_model()
logger = logging.getLogger(__name__)


def get_staff(*, staff_id: UUID) -> Staff:
    try:
        return Staff.objects.select_related('user').get(id=staff_id)
    except Staff.DoesNotExist:
        raise StaffNotFoundError(f"Staff {staff_id} not found")


@transaction.atomic
def create_staff(
    *,
    full_name: str,
    role: str,
    hire_date: date,
    full_name_kana: str = '',
    is_active: bool = True,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> Staff:
    """
    Register a staff member, optionally with a login account.

    Args:
        full_name: Legal name
        role: One of StaffRole values
        hire_date: First working day
        full_name_kana: Name reading in katakana
        email: Login email; when given a User is created and linked
        password: Initial password for the login account

    Raises:
        DuplicateStaffAccountError: If the email is already registered
    """
    user = None
    if email:
        if User.objects.filter(email__iexact=email).exists():
            raise DuplicateStaffAccountError(f"Email {email} is already registered")
        user = User.objects.create_user(email=email, password=password, display_name=full_name)

    staff = Staff.objects.create(
        user=user,
        full_name=full_name,
        full_name_kana=full_name_kana,
        role=role,
        hire_date=hire_date,
        is_active=is_active,
    )
    logger.info('Staff %s created with role %s', staff.id, role)
    return staff


@transaction.atomic
def update_staff(*, staff_id: UUID, **fields) -> Staff:
    """Apply a partial update; unknown keys are ignored."""
    staff = get_staff(staff_id=staff_id)
    allowed = {'full_name', 'full_name_kana', 'role', 'hire_date', 'is_active'}
    for key, value in fields.items():
        if key in allowed:
            setattr(staff, key, value)
    staff.save()
    logger.info('Staff %s updated: %s', staff.id, sorted(k for k in fields if k in allowed))
    return staff


@transaction.atomic
def deactivate_staff(*, staff_id: UUID, performed_by=None) -> Staff:
    """
    Soft delete a staff member and lock their login.

    Raises:
        InvalidStaffOperationError: If a user tries to deactivate themselves
    """
    staff = get_staff(staff_id=staff_id)
    if performed_by is not None and staff.user_id and staff.user_id == performed_by.id:
        raise InvalidStaffOperationError("You cannot deactivate your own staff account")

    staff.is_active = False
    staff.save(update_fields=['is_active', 'updated_at'])
    if staff.user_id:
        User.objects.filter(id=staff.user_id).update(is_active=False)

    logger.info('Staff %s deactivated', staff.id)
    return staff


def search_staff(*, query: str = '', role: Optional[str] = None, is_active: Optional[bool] = None) -> QuerySet:
    qs = Staff.objects.select_related('user')
    if query:
        qs = qs.filter(Q(full_name__icontains=query) | Q(full_name_kana__icontains=query))
    if role:
        qs = qs.filter(role=role)
    if is_active is not None:
        qs = qs.filter(is_active=is_active)
    return qs


def unregistered_casts() -> QuerySet:
    """Active cast-role staff who do not yet have a cast profile."""
    return Staff.objects.filter(
        role=StaffRole.CAST,
        is_active=True,
        cast_profile__isnull=True,
    ).order_by('full_name')
