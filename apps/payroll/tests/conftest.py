from datetime import date
from decimal import Decimal

import pytest

from apps.payroll.models import NominationType
from apps.payroll.services import create_rule, assign_rule
from apps.visits.services import start_visit


@pytest.fixture
def rule(db):
    return create_rule(
        rule_name='Standard',
        base_hourly_rate=Decimal('2000'),
        base_back_percentage=Decimal('10'),
        effective_from=date(2024, 1, 1),
    )


@pytest.fixture
def assigned_rule(rule, cast_profile):
    assign_rule(cast_id=cast_profile.id, rule_id=rule.id, assigned_from=date(2024, 1, 1))
    return rule


@pytest.fixture
def nomination_type(db):
    return NominationType.objects.create(
        type_name='shimei',
        display_name='Main nomination',
        price=Decimal('3000'),
        back_percentage=Decimal('50'),
    )


@pytest.fixture
def visit(customer, table, hall_user):
    return start_visit(customer_id=customer.id, table_id=table.id, num_guests=2, created_by=hall_user)
