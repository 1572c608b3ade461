import pytest

from apps.visits.services import start_visit


@pytest.fixture
def visit(customer, table):
    return start_visit(customer_id=customer.id, table_id=table.id, num_guests=2)
