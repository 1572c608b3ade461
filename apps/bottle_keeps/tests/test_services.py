import uuid
from datetime import date
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.bottle_keeps.models import BottleStatus
from apps.bottle_keeps.services import (
    next_bottle_number,
    default_expiry,
    serve_bottle,
    update_bottle_keep,
    move_bottle,
    update_expired_bottles,
    search_bottle_keeps,
    storage_locations,
    bottle_keep_stats,
    bottle_keep_alerts,
    customer_summary,
    expiry_management,
    inventory_by_location,
    BottleKeepNotFoundError,
    BottleNotActiveError,
)


class TestDefaults:

    def test_default_expiry_is_six_months(self):
        assert default_expiry(date(2025, 1, 31)) == date(2025, 7, 31)
        assert default_expiry(date(2025, 8, 31)) == date(2026, 2, 28)


@pytest.mark.django_db
class TestRegistration:

    def test_numbers_are_sequential(self, bottle, make_bottle):
        assert bottle.bottle_number == 'BK000001'
        assert make_bottle().bottle_number == 'BK000002'
        assert next_bottle_number() == 'BK000003'

    def test_new_bottle_is_full_and_active(self, bottle):
        assert bottle.remaining_percentage == Decimal('1')
        assert bottle.status == BottleStatus.ACTIVE
        assert bottle.expiry_date == default_expiry(timezone.localdate())


@pytest.mark.django_db
class TestServe:

    def test_serve_reduces_level_and_logs_usage(self, bottle, hall_user):
        bottle = serve_bottle(bottle_keep_id=bottle.id, served_amount=Decimal('0.3'), served_by=hall_user)

        bottle.refresh_from_db()
        assert bottle.remaining_percentage == Decimal('0.700')
        assert bottle.last_served_date == timezone.localdate()
        assert bottle.usages.get().served_by == hall_user

    def test_overpour_clamps_to_zero_and_consumes(self, bottle):
        serve_bottle(bottle_keep_id=bottle.id, served_amount=Decimal('0.8'))
        serve_bottle(bottle_keep_id=bottle.id, served_amount=Decimal('0.5'))

        bottle.refresh_from_db()
        assert bottle.remaining_percentage == Decimal('0')
        assert bottle.status == BottleStatus.CONSUMED

    def test_cannot_serve_consumed_bottle(self, bottle):
        serve_bottle(bottle_keep_id=bottle.id, served_amount=Decimal('1'))

        with pytest.raises(BottleNotActiveError):
            serve_bottle(bottle_keep_id=bottle.id, served_amount=Decimal('0.1'))

    def test_unknown_bottle(self, db):
        with pytest.raises(BottleKeepNotFoundError):
            serve_bottle(bottle_keep_id=uuid.uuid4(), served_amount=Decimal('0.1'))


@pytest.mark.django_db
class TestUpdate:

    def test_emptying_by_edit_consumes(self, bottle):
        bottle = update_bottle_keep(bottle_keep_id=bottle.id, remaining_percentage=Decimal('0'))

        bottle.refresh_from_db()
        assert bottle.remaining_percentage == Decimal('0')
        assert bottle.status == BottleStatus.CONSUMED

    def test_partial_edit_stays_active(self, bottle):
        bottle = update_bottle_keep(bottle_keep_id=bottle.id, remaining_percentage=Decimal('0.25'))

        bottle.refresh_from_db()
        assert bottle.status == BottleStatus.ACTIVE


@pytest.mark.django_db
class TestMove:

    def test_move_records_history(self, bottle, manager_user):
        bottle = move_bottle(bottle_keep_id=bottle.id, to_location='vip-shelf', reason='VIP', moved_by=manager_user)

        assert bottle.storage_location == 'vip-shelf'
        movement = bottle.movements.get()
        assert movement.from_location == 'cellar-A'
        assert movement.to_location == 'vip-shelf'
        assert storage_locations() == ['vip-shelf']


@pytest.mark.django_db
class TestExpiry:

    def test_update_expired_only_touches_overdue_active(self, make_bottle):
        overdue = make_bottle(days_to_expiry=-1)
        today = make_bottle(days_to_expiry=0)

        assert update_expired_bottles() == 1
        overdue.refresh_from_db()
        today.refresh_from_db()
        assert overdue.status == BottleStatus.EXPIRED
        assert today.status == BottleStatus.ACTIVE
        assert update_expired_bottles() == 0

    def test_expiry_buckets(self, make_bottle):
        make_bottle(days_to_expiry=0)
        make_bottle(days_to_expiry=5)
        make_bottle(days_to_expiry=20)
        make_bottle(days_to_expiry=90)
        make_bottle(days_to_expiry=-3, status=BottleStatus.EXPIRED)

        buckets = expiry_management()

        assert len(buckets['expiring_today']) == 1
        assert len(buckets['expiring_this_week']) == 1
        assert len(buckets['expiring_this_month']) == 1
        assert len(buckets['expired']) == 1


@pytest.mark.django_db
class TestSearch:

    def test_filters(self, make_bottle, other_customer):
        make_bottle(days_to_expiry=5)
        low = make_bottle(remaining_percentage=Decimal('0.2'))
        make_bottle(customer_id=other_customer.id)

        assert search_bottle_keeps(expiring_within=7).count() == 1
        assert list(search_bottle_keeps(low_amount=True)) == [low]
        assert search_bottle_keeps(query='Suzuki').count() == 1
        assert search_bottle_keeps(query='Champagne').count() == 3


@pytest.mark.django_db
class TestReporting:

    def test_stats_values_active_bottles(self, make_bottle):
        make_bottle(remaining_percentage=Decimal('0.5'))
        make_bottle(days_to_expiry=3)
        make_bottle(status=BottleStatus.CONSUMED, remaining_percentage=Decimal('0'))

        stats = bottle_keep_stats()

        assert stats['total_bottles'] == 3
        assert stats['active_bottles'] == 2
        assert stats['consumed_bottles'] == 1
        # 20000 * 0.5 + 20000 * 1
        assert stats['total_value'] == Decimal('30000')
        assert stats['expiring_soon'] == 1

    def test_alert_severities(self, make_bottle):
        make_bottle(days_to_expiry=6)
        make_bottle(days_to_expiry=2)
        make_bottle(remaining_percentage=Decimal('0.2'))
        make_bottle(remaining_percentage=Decimal('0.05'))
        make_bottle(days_to_expiry=-1)

        alerts = bottle_keep_alerts()
        by_kind = {(a['alert_type'], a['severity']) for a in alerts}

        assert len(alerts) == 5
        assert by_kind == {
            ('expiring', 'warning'),
            ('expiring', 'critical'),
            ('low_amount', 'warning'),
            ('low_amount', 'critical'),
            ('expired', 'critical'),
        }
        severities = [a['severity'] for a in alerts]
        assert severities == sorted(severities, key=lambda s: s != 'critical')

    def test_customer_summary(self, customer, make_bottle):
        make_bottle()
        make_bottle(status=BottleStatus.CONSUMED, remaining_percentage=Decimal('0'))

        summary = customer_summary(customer_id=customer.id)

        assert summary['customer_name'] == 'Yamada Taro'
        assert summary['total_bottles'] == 2
        assert summary['active_bottles'] == 1
        assert summary['total_value'] == Decimal('20000')

    def test_inventory_by_location(self, make_bottle):
        make_bottle(storage_location='cellar-A')
        make_bottle(storage_location='cellar-A')
        make_bottle()

        rows = inventory_by_location()

        assert [(r['storage_location'], r['total_bottles']) for r in rows] == [
            ('cellar-A', 2),
            ('unassigned', 1),
        ]
