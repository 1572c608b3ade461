from datetime import timedelta

import pytest
from django.utils import timezone

from apps.bottle_keeps.services import create_bottle_keep


@pytest.fixture
def bottle(customer, product):
    """An active bottle opened today, kept in cellar A."""
    return create_bottle_keep(
        customer_id=customer.id,
        product_id=product.id,
        storage_location='cellar-A',
    )


@pytest.fixture
def make_bottle(customer, product):
    def _make(days_to_expiry=90, **fields):
        today = timezone.localdate()
        return create_bottle_keep(
            customer_id=fields.pop('customer_id', customer.id),
            product_id=product.id,
            opened_date=today - timedelta(days=30),
            expiry_date=today + timedelta(days=days_to_expiry),
            **fields,
        )

    return _make
