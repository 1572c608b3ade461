"""User authentication service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import InvalidCredentialsError, InactiveAccountError, InvalidTokenError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Authenticate user with email and password.

    Uses select_for_update() to prevent race conditions when updating last_login.

    Args:
        email: User's email
        password: User's password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email__iexact=email)
        )
    except User.DoesNotExist:
        logger.warning('Login failed for unknown email %s', email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        logger.warning('Login failed for %s: bad password', email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    # A deactivated staff row locks the login as well
    staff = getattr(user, 'staff_profile', None)
    if staff is not None and not staff.is_active and not user.is_superuser:
        raise InactiveAccountError("Staff account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    logger.info('User %s logged in', user.id)
    return user


def issue_tokens(user) -> dict:
    """Return a fresh refresh/access JWT pair for ``user``."""
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


def revoke_refresh_token(*, token: str) -> None:
    """
    Blacklist a refresh token on logout.

    Raises:
        InvalidTokenError: If the token is malformed, expired or already revoked
    """
    try:
        RefreshToken(token).blacklist()
    except TokenError as e:
        raise InvalidTokenError(str(e))
