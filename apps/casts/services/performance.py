"""Daily cast performance, rankings and compensation."""

import logging
from datetime import date
from decimal import Decimal, ROUND_FLOOR
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import Sum, Count

from ..models import CastProfile, CastPerformance
from .exceptions import CastNotFoundError
from .profile_management import get_cast

logger = logging.getLogger(__name__)

PERFORMANCE_FIELDS = ('shimei_count', 'dohan_count', 'sales_amount', 'drink_count')


@transaction.atomic
def record_performance(*, cast_id: UUID, date: date, created_by=None, **figures) -> CastPerformance:
    """
    Upsert the performance row for a cast on a day.

    Returns:
        The created or updated CastPerformance
    """
    cast = get_cast(cast_id=cast_id)
    defaults = {key: value for key, value in figures.items() if key in PERFORMANCE_FIELDS}
    performance, created = CastPerformance.objects.update_or_create(
        cast=cast,
        date=date,
        defaults={**defaults, 'created_by': created_by},
    )
    logger.info(
        'Performance %s for cast %s on %s', 'recorded' if created else 'updated', cast.id, date
    )
    return performance


def performance_history(*, cast_id: UUID, start_date: date = None, end_date: date = None):
    qs = CastPerformance.objects.filter(cast_id=cast_id)
    if start_date:
        qs = qs.filter(date__gte=start_date)
    if end_date:
        qs = qs.filter(date__lte=end_date)
    return qs.order_by('-date')


def cast_ranking(*, start_date: date, end_date: date, limit: int = 10) -> list:
    """
    Rank active casts by sales, then nominations, over a period.

    Returns:
        list of dicts with rank, cast_id, stage_name and the summed figures
    """
    rows = (
        CastPerformance.objects
        .filter(date__gte=start_date, date__lte=end_date, cast__is_active=True)
        .values('cast_id', 'cast__stage_name')
        .annotate(
            total_sales=Sum('sales_amount'),
            total_shimei=Sum('shimei_count'),
            total_dohan=Sum('dohan_count'),
            total_drinks=Sum('drink_count'),
            days_worked=Count('date', distinct=True),
        )
        .order_by('-total_sales', '-total_shimei', 'cast__stage_name')[:limit]
    )

    return [
        {
            'rank': index,
            'cast_id': str(row['cast_id']),
            'stage_name': row['cast__stage_name'],
            'total_sales': row['total_sales'],
            'total_shimei': row['total_shimei'],
            'total_dohan': row['total_dohan'],
            'total_drinks': row['total_drinks'],
            'days_worked': row['days_worked'],
        }
        for index, row in enumerate(rows, start=1)
    ]


def calculate_compensation(*, cast_id: UUID, start_date: date, end_date: date) -> dict:
    """
    Estimate a cast's pay from recorded performance.

    Each day with a performance row counts as one shift of
    ``CAST_SHIFT_HOURS`` hours. Pay is hourly wage plus the cast's back
    percentage of sales (floored to whole yen).

    Raises:
        CastNotFoundError: If the cast does not exist
    """
    cast = get_cast(cast_id=cast_id)
    totals = (
        CastPerformance.objects
        .filter(cast=cast, date__gte=start_date, date__lte=end_date)
        .aggregate(
            days=Count('date', distinct=True),
            sales=Sum('sales_amount'),
            shimei=Sum('shimei_count'),
            dohan=Sum('dohan_count'),
        )
    )
    days = totals['days'] or 0
    sales = totals['sales'] or Decimal('0')
    work_hours = days * settings.CAST_SHIFT_HOURS

    hourly_wage = cast.hourly_rate * work_hours
    back_amount = (sales * cast.back_percentage / Decimal('100')).quantize(Decimal('1'), rounding=ROUND_FLOOR)

    return {
        'cast_id': str(cast.id),
        'stage_name': cast.stage_name,
        'period_start': start_date,
        'period_end': end_date,
        'work_days': days,
        'work_hours': work_hours,
        'hourly_rate': cast.hourly_rate,
        'hourly_wage': hourly_wage,
        'total_sales': sales,
        'back_percentage': cast.back_percentage,
        'back_amount': back_amount,
        'shimei_count': totals['shimei'] or 0,
        'dohan_count': totals['dohan'] or 0,
        'total_amount': hourly_wage + back_amount,
    }


def calculate_all_compensations(*, start_date: date, end_date: date) -> list:
    results = []
    for cast in CastProfile.objects.filter(is_active=True).order_by('stage_name'):
        try:
            results.append(
                calculate_compensation(cast_id=cast.id, start_date=start_date, end_date=end_date)
            )
        except CastNotFoundError:
            logger.warning('Cast %s vanished during compensation run', cast.id)
    return results
