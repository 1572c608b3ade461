from datetime import time, timedelta

import pytest
from django.utils import timezone

from apps.reservations.services import create_reservation


@pytest.fixture
def booking_day():
    return timezone.localdate() + timedelta(days=7)


@pytest.fixture
def reservation(customer, table, booking_day):
    return create_reservation(
        customer_id=customer.id,
        table_id=table.id,
        reservation_date=booking_day,
        reservation_time=time(20, 0),
        number_of_guests=2,
    )
