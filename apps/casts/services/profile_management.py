"""Cast profile management."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import StaffRole
from apps.staff.models import Staff
from ..models import CastProfile
from .exceptions import CastNotFoundError, CastProfileExistsError, NotCastStaffError

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    'stage_name', 'birthday', 'blood_type', 'height', 'three_size', 'hobby',
    'special_skill', 'self_introduction', 'profile_image_url',
)
# Pay terms are set by management only
MANAGED_FIELDS = PROFILE_FIELDS + ('hourly_rate', 'back_percentage', 'is_active')


def get_cast(*, cast_id: UUID) -> CastProfile:
    try:
        return CastProfile.objects.select_related('staff').get(id=cast_id)
    except CastProfile.DoesNotExist:
        raise CastNotFoundError(f"Cast {cast_id} not found")


def get_cast_for_user(user) -> CastProfile:
    staff = user.staff
    if staff is None:
        raise CastNotFoundError("No staff profile linked to this account")
    try:
        return CastProfile.objects.select_related('staff').get(staff=staff)
    except CastProfile.DoesNotExist:
        raise CastNotFoundError("No cast profile linked to this account")


@transaction.atomic
def create_cast_profile(*, staff_id: UUID, created_by=None, **fields) -> CastProfile:
    """
    Create the cast profile of a cast-role staff member.

    Raises:
        NotCastStaffError: If the staff is missing, inactive or not a cast
        CastProfileExistsError: If a profile already exists
    """
    try:
        staff = Staff.objects.select_for_update().get(id=staff_id)
    except Staff.DoesNotExist:
        raise NotCastStaffError(f"Staff {staff_id} not found")

    if staff.role != StaffRole.CAST or not staff.is_active:
        raise NotCastStaffError(f"{staff.full_name} is not an active cast member")
    if CastProfile.objects.filter(staff=staff).exists():
        raise CastProfileExistsError(f"{staff.full_name} already has a cast profile")

    data = {key: value for key, value in fields.items() if key in MANAGED_FIELDS}
    cast = CastProfile.objects.create(staff=staff, created_by=created_by, updated_by=created_by, **data)
    logger.info('Cast profile %s created for staff %s', cast.id, staff.id)
    return cast


@transaction.atomic
def update_cast_profile(*, cast_id: UUID, updated_by=None, own_profile: bool = False, **fields) -> CastProfile:
    """
    Update a cast profile.

    With ``own_profile`` only the public profile fields are applied; pay
    terms and the active flag are ignored.
    """
    cast = get_cast(cast_id=cast_id)
    allowed = PROFILE_FIELDS if own_profile else MANAGED_FIELDS
    for key, value in fields.items():
        if key in allowed:
            setattr(cast, key, value)
    cast.updated_by = updated_by
    cast.save()
    return cast


@transaction.atomic
def deactivate_cast(*, cast_id: UUID, updated_by=None) -> CastProfile:
    cast = get_cast(cast_id=cast_id)
    cast.is_active = False
    cast.updated_by = updated_by
    cast.save(update_fields=['is_active', 'updated_by', 'updated_at'])
    logger.info('Cast %s deactivated', cast.id)
    return cast


def search_casts(*, query: str = '', is_active: Optional[bool] = None) -> QuerySet:
    qs = CastProfile.objects.select_related('staff')
    if query:
        qs = qs.filter(Q(stage_name__icontains=query) | Q(staff__full_name__icontains=query))
    if is_active is not None:
        qs = qs.filter(is_active=is_active)
    return qs
