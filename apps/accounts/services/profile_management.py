"""Profile updates for the signed-in user."""

import logging

from django.db import transaction

logger = logging.getLogger(__name__)


@transaction.atomic
def update_profile(*, user, display_name=None, full_name=None, full_name_kana=None):
    """
    Update the user's display name and, when linked, their staff names.

    Only the fields passed explicitly are touched.
    """
    if display_name is not None:
        user.display_name = display_name
        user.save(update_fields=['display_name'])

    staff = getattr(user, 'staff_profile', None)
    if staff is not None:
        fields = []
        if full_name is not None:
            staff.full_name = full_name
            fields.append('full_name')
        if full_name_kana is not None:
            staff.full_name_kana = full_name_kana
            fields.append('full_name_kana')
        if fields:
            staff.save(update_fields=fields + ['updated_at'])

    logger.info('Profile updated for user %s', user.id)
    return user
