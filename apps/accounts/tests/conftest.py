import pytest

from apps.accounts.models import User


@pytest.fixture
def plain_user(db):
    """A login with no staff profile."""
    return User.objects.create_user(
        email='plain@example.com',
        password='TestPass123!',
        display_name='Plain User',
    )


@pytest.fixture
def inactive_user(db):
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        is_active=False,
    )


@pytest.fixture
def superuser(db):
    return User.objects.create_superuser(email='root@example.com', password='TestPass123!')
