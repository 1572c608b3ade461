import itertools
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.visits.models import Visit, VisitStatus

_codes = itertools.count(1)


@pytest.fixture
def make_visit(table):
    """Factory: a past visit ``days_ago`` days back with the given bill total."""

    def _make(customer, days_ago, total='0', status=VisitStatus.COMPLETED):
        check_in = timezone.now() - timedelta(days=days_ago)
        return Visit.objects.create(
            session_code=f"T{next(_codes):08d}",
            customer=customer,
            table=table,
            check_in_at=check_in,
            check_out_at=check_in + timedelta(hours=2) if status == VisitStatus.COMPLETED else None,
            total_amount=Decimal(total),
            status=status,
        )

    return _make


@pytest.fixture
def regular_and_lapsed(customer, other_customer, make_visit):
    """``customer`` came three times recently; ``other_customer`` once, long ago."""
    for days_ago in (100, 40, 10):
        make_visit(customer, days_ago, '100000')
    make_visit(other_customer, 120, '50000')
    return customer, other_customer
