from decimal import Decimal

import pytest

from apps.payroll.models import NominationType
from apps.visits.services import add_guest, start_visit


@pytest.fixture
def visit(customer, table, hall_user):
    return start_visit(customer_id=customer.id, table_id=table.id, num_guests=2, created_by=hall_user)


@pytest.fixture
def shimei(db):
    return NominationType.objects.create(
        type_name='shimei',
        display_name='Main nomination',
        price=Decimal('3000'),
        back_percentage=Decimal('50'),
    )


@pytest.fixture
def companion(visit, other_customer):
    return add_guest(visit_id=visit.id, customer_id=other_customer.id, seat_position=2)
