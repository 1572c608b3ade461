"""
Shared fixtures: one signed-in API client per staff role plus the basic
venue records (customer, table, product, cast) most apps build on.
"""

import itertools
from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, StaffRole
from apps.casts.models import CastProfile
from apps.customers.models import Customer
from apps.inventory.models import Product
from apps.staff.models import Staff
from apps.tables.models import Table

_sequence = itertools.count(1)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def make_staff_user(db):
    """
    Factory: create a login linked to an active Staff row.

    ``role=None`` gives a user without any staff profile.
    """

    def _make(role=StaffRole.HALL, full_name=None, **user_fields):
        n = next(_sequence)
        user = User.objects.create_user(
            email=user_fields.pop('email', f'{role or "user"}{n}@example.com'),
            password='TestPass123!',
            **user_fields,
        )
        if role is not None:
            Staff.objects.create(
                user=user,
                full_name=full_name or f'{role} {n}',
                role=role,
                hire_date=date(2024, 4, 1),
            )
        return user

    return _make


@pytest.fixture
def client_for():
    """Factory: API client authenticated as ``user`` with a JWT."""

    def _client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client

    return _client


@pytest.fixture
def admin_user(make_staff_user):
    return make_staff_user(StaffRole.ADMIN, full_name='Admin User')


@pytest.fixture
def manager_user(make_staff_user):
    return make_staff_user(StaffRole.MANAGER, full_name='Manager User')


@pytest.fixture
def hall_user(make_staff_user):
    return make_staff_user(StaffRole.HALL, full_name='Hall User')


@pytest.fixture
def cashier_user(make_staff_user):
    return make_staff_user(StaffRole.CASHIER, full_name='Cashier User')


@pytest.fixture
def cast_user(make_staff_user):
    return make_staff_user(StaffRole.CAST, full_name='Cast User')


@pytest.fixture
def admin_client(client_for, admin_user):
    return client_for(admin_user)


@pytest.fixture
def manager_client(client_for, manager_user):
    return client_for(manager_user)


@pytest.fixture
def hall_client(client_for, hall_user):
    return client_for(hall_user)


@pytest.fixture
def cashier_client(client_for, cashier_user):
    return client_for(cashier_user)


@pytest.fixture
def cast_client(client_for, cast_user):
    return client_for(cast_user)


@pytest.fixture
def customer(db):
    return Customer.objects.create(name='Yamada Taro', phone_number='090-1234-5678')


@pytest.fixture
def other_customer(db):
    return Customer.objects.create(name='Suzuki Hanako', phone_number='080-2222-3333')


@pytest.fixture
def table(db):
    return Table.objects.create(table_name='A1', capacity=4)


@pytest.fixture
def other_table(db):
    return Table.objects.create(table_name='A2', capacity=6)


@pytest.fixture
def product(db):
    return Product.objects.create(
        name='Champagne',
        category='champagne',
        price=Decimal('20000'),
        cost=Decimal('8000'),
        stock_quantity=30,
    )


@pytest.fixture
def cast_profile(cast_user):
    return CastProfile.objects.create(
        staff=cast_user.staff_profile,
        stage_name='Rina',
        hourly_rate=Decimal('3000'),
        back_percentage=Decimal('10'),
    )
