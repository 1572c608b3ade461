"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
)
from .user_authentication import authenticate_user, issue_tokens, revoke_refresh_token
from .profile_management import update_profile

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    # Services
    'authenticate_user',
    'issue_tokens',
    'revoke_refresh_token',
    'update_profile',
]
