from datetime import date
from decimal import Decimal

import pytest

from apps.casts.models import CastPerformance
from apps.casts.services import (
    create_cast_profile,
    update_cast_profile,
    record_performance,
    cast_ranking,
    calculate_compensation,
    CastProfileExistsError,
    NotCastStaffError,
)


@pytest.mark.django_db
class TestCastProfiles:

    def test_only_cast_role_staff(self, hall_user):
        with pytest.raises(NotCastStaffError):
            create_cast_profile(staff_id=hall_user.staff_profile.id, stage_name='Nope')

    def test_one_profile_per_staff(self, cast_profile, cast_user):
        with pytest.raises(CastProfileExistsError):
            create_cast_profile(staff_id=cast_user.staff_profile.id, stage_name='Again')

    def test_own_profile_cannot_change_pay(self, cast_profile):
        cast = update_cast_profile(
            cast_id=cast_profile.id, own_profile=True, hobby='Golf', hourly_rate=Decimal('9999')
        )

        assert cast.hobby == 'Golf'
        assert cast.hourly_rate == Decimal('3000')


@pytest.mark.django_db
class TestPerformance:

    def test_record_is_upsert(self, cast_profile):
        record_performance(cast_id=cast_profile.id, date=date(2025, 1, 10), sales_amount=Decimal('50000'))
        record_performance(cast_id=cast_profile.id, date=date(2025, 1, 10), sales_amount=Decimal('80000'))

        rows = CastPerformance.objects.filter(cast=cast_profile)
        assert rows.count() == 1
        assert rows.get().sales_amount == Decimal('80000')

    def test_ranking_orders_by_sales_then_shimei(self, cast_profile, make_staff_user):
        other = create_cast_profile(staff_id=make_staff_user('cast').staff_profile.id, stage_name='Aya')
        day = date(2025, 1, 10)
        record_performance(cast_id=cast_profile.id, date=day, sales_amount=Decimal('10000'), shimei_count=1)
        record_performance(cast_id=other.id, date=day, sales_amount=Decimal('10000'), shimei_count=3)

        ranking = cast_ranking(start_date=day, end_date=day)

        assert [row['stage_name'] for row in ranking] == ['Aya', 'Rina']
        assert ranking[0]['rank'] == 1

    def test_compensation(self, cast_profile, settings):
        settings.CAST_SHIFT_HOURS = 6
        record_performance(cast_id=cast_profile.id, date=date(2025, 1, 10), sales_amount=Decimal('100000'))
        record_performance(cast_id=cast_profile.id, date=date(2025, 1, 11), sales_amount=Decimal('55555'))
        record_performance(cast_id=cast_profile.id, date=date(2025, 2, 1), sales_amount=Decimal('99999'))

        result = calculate_compensation(
            cast_id=cast_profile.id, start_date=date(2025, 1, 1), end_date=date(2025, 1, 31)
        )

        assert result['work_days'] == 2
        assert result['work_hours'] == 12
        assert result['hourly_wage'] == Decimal('36000')
        assert result['back_amount'] == Decimal('15555')
        assert result['total_amount'] == Decimal('51555')
