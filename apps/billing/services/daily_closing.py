"""Daily sales report and register close."""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from django.db import transaction

from apps.visits.models import PaymentMethod, Visit, VisitStatus
from ..models import DailyClosing, OrderItem
from .exceptions import DailyClosingError

logger = logging.getLogger(__name__)

TOP_N = 5


def _top(stats: dict) -> list:
    return sorted(stats.values(), key=lambda row: row['total_amount'], reverse=True)[:TOP_N]


def daily_report(*, report_date: date) -> dict:
    """Completed visits of the day with cash/card split and top sellers."""
    visits = list(
        Visit.objects.filter(check_in_at__date=report_date, status=VisitStatus.COMPLETED)
    )
    total_sales = sum((v.total_amount for v in visits), Decimal('0'))
    total_cash = sum((v.total_amount for v in visits if v.payment_method == PaymentMethod.CASH), Decimal('0'))
    total_card = sum((v.total_amount for v in visits if v.payment_method == PaymentMethod.CARD), Decimal('0'))

    items = OrderItem.objects.filter(
        visit__in=[v.id for v in visits]
    ).select_related('product', 'cast')

    products = defaultdict(lambda: {'quantity': 0, 'total_amount': Decimal('0')})
    casts = defaultdict(lambda: {'order_count': 0, 'total_amount': Decimal('0')})
    for item in items:
        row = products[item.product_id]
        row.update(product_id=item.product_id, product_name=item.product.name)
        row['quantity'] += item.quantity
        row['total_amount'] += item.total_price

        if item.cast_id:
            row = casts[item.cast_id]
            row.update(cast_id=item.cast_id, cast_name=item.cast.stage_name)
            row['order_count'] += 1
            row['total_amount'] += item.total_price

    return {
        'date': report_date,
        'total_visits': len(visits),
        'total_sales': total_sales,
        'total_cash': total_cash,
        'total_card': total_card,
        'top_products': _top(products),
        'top_casts': _top(casts),
    }


def open_visit_count(*, report_date: date) -> int:
    return Visit.objects.filter(check_in_at__date=report_date, status=VisitStatus.ACTIVE).count()


def is_closed(*, closing_date: date) -> bool:
    return DailyClosing.objects.filter(closing_date=closing_date).exists()


@transaction.atomic
def perform_daily_closing(*, closing_date: date, closed_by=None) -> DailyClosing:
    """
    Close the register for ``closing_date``.

    Raises:
        DailyClosingError: If visits are still open or the day is already closed
    """
    if is_closed(closing_date=closing_date):
        raise DailyClosingError(f"{closing_date} is already closed")

    open_count = open_visit_count(report_date=closing_date)
    if open_count:
        logger.warning('Daily closing for %s refused: %s open visits', closing_date, open_count)
        raise DailyClosingError(f"{open_count} visits are still open on {closing_date}")

    report = daily_report(report_date=closing_date)
    closing = DailyClosing.objects.create(
        closing_date=closing_date,
        total_visits=report['total_visits'],
        total_sales=report['total_sales'],
        total_cash=report['total_cash'],
        total_card=report['total_card'],
        closed_by=closed_by,
    )
    logger.info('Closed %s: %s visits, sales %s', closing_date, closing.total_visits, closing.total_sales)
    return closing
