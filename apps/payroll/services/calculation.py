"""
Payroll calculation for casts.

A calculation has three parts:

* base pay: whole hours worked times the rule's hourly rate
* back pay: a share of the cast's sales, either tiered (sales tiers on the
  rule) or a flat ``base_back_percentage``
* nomination pay: the cast's share of nomination fees on their visits

All money parts are floored to whole yen.
"""

import calendar
import logging
from datetime import date
from decimal import Decimal, ROUND_FLOOR
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet, Sum
from django.utils import timezone

from apps.attendance.models import AttendanceRecord
from apps.billing.models import OrderItem
from apps.casts.models import CastProfile
from apps.visits.models import Nomination, VisitStatus
from ..models import (
    CalculationStatus,
    DetailItemType,
    PayrollCalculation,
    PayrollCalculationDetail,
)
from .exceptions import (
    CalculationNotFoundError,
    CastNotFoundError,
    InvalidCalculationStatusError,
    PayrollServiceError,
)
from .rule_management import active_rule

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
HUNDRED = Decimal('100')


def _floor(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(Decimal('1'), rounding=ROUND_FLOOR)


def tiered_back_pay(total_sales: Decimal, tiers: Iterable, base_back_percentage: Decimal) -> Decimal:
    """
    Back pay for ``total_sales``.

    Each tier reached pays its percentage on the part of sales between its
    ``min_sales`` and ``max_sales`` (open ended when max is empty). With no
    tiers the flat base percentage applies to all sales.

    >>> tiered_back_pay(Decimal('150000'), [], Decimal('10'))
    Decimal('15000')
    """
    tiers = sorted(tiers, key=lambda t: t.min_sales)
    if not tiers:
        return _floor(total_sales * base_back_percentage / HUNDRED)

    back = ZERO
    for tier in tiers:
        if total_sales >= tier.min_sales:
            upper = tier.max_sales if tier.max_sales is not None else total_sales
            back += (min(total_sales, upper) - tier.min_sales) * tier.back_percentage / HUNDRED
    return _floor(back)


def work_hours(*, staff_id: UUID, start: date, end: date) -> int:
    """Whole hours per shift, summed over finished shifts in the period."""
    records = AttendanceRecord.objects.filter(
        staff_id=staff_id,
        attendance_date__range=(start, end),
        clock_in__isnull=False,
        clock_out__isnull=False,
    )
    return sum(
        int((r.clock_out - r.clock_in).total_seconds() // 3600) for r in records
    )


def cast_sales(*, cast_id: UUID, start: date, end: date) -> Decimal:
    """Order items credited to the cast on completed visits in the period."""
    total = OrderItem.objects.filter(
        cast_id=cast_id,
        visit__status=VisitStatus.COMPLETED,
        visit__check_in_at__date__range=(start, end),
    ).aggregate(total=Sum('total_price'))['total']
    return total or ZERO


def nomination_pay(*, cast_id: UUID, start: date, end: date) -> tuple:
    """Return (count, pay) for the cast's nominations in the period."""
    nominations = Nomination.objects.filter(
        cast_id=cast_id,
        started_at__date__range=(start, end),
    ).exclude(visit__status=VisitStatus.CANCELLED)

    pay = ZERO
    count = 0
    for nomination in nominations:
        pay += nomination.fee_amount * nomination.back_percentage / HUNDRED
        count += 1
    return count, _floor(pay)


def calculate_payroll(*, cast_id: UUID, period_start: date, period_end: date) -> dict:
    """
    Compute (without saving) a cast's pay for a period.

    The rule in force on ``period_end`` is used.

    Raises:
        CastNotFoundError: If the cast does not exist
        NoActiveRuleError: If the cast has no rule assigned
    """
    if period_start > period_end:
        raise PayrollServiceError('period_start must be on or before period_end')

    try:
        cast = CastProfile.objects.select_related('staff').get(id=cast_id)
    except CastProfile.DoesNotExist:
        raise CastNotFoundError(f"Cast {cast_id} not found")
    assignment = active_rule(cast_id=cast.id, on_date=period_end)
    rule = assignment.rule

    hours = work_hours(staff_id=cast.staff_id, start=period_start, end=period_end)
    total_sales = cast_sales(cast_id=cast.id, start=period_start, end=period_end)
    nomination_count, nomination_amount = nomination_pay(
        cast_id=cast.id, start=period_start, end=period_end
    )

    base = _floor(hours * rule.base_hourly_rate)
    back = tiered_back_pay(total_sales, rule.sales_tiers.all(), rule.base_back_percentage)
    total = base + back + nomination_amount

    return {
        'cast_id': cast.id,
        'rule_id': rule.id,
        'period_start': period_start,
        'period_end': period_end,
        'work_hours': hours,
        'total_sales': total_sales,
        'base_pay': base,
        'back_pay': back,
        'nomination_pay': nomination_amount,
        'total_pay': total,
        'items': [
            {
                'item_type': DetailItemType.BASE,
                'description': 'Base pay',
                'quantity': Decimal(hours),
                'rate': rule.base_hourly_rate,
                'amount': base,
            },
            {
                'item_type': DetailItemType.BACK,
                'description': 'Sales back',
                'quantity': total_sales,
                'rate': None if rule.sales_tiers.exists() else rule.base_back_percentage,
                'amount': back,
            },
            {
                'item_type': DetailItemType.NOMINATION,
                'description': 'Nomination back',
                'quantity': Decimal(nomination_count),
                'rate': None,
                'amount': nomination_amount,
            },
        ],
    }


@transaction.atomic
def save_calculation(*, result: dict, status: str = CalculationStatus.DRAFT) -> PayrollCalculation:
    """Persist a calculated result. Deductions start at zero so net equals gross."""
    calculation = PayrollCalculation.objects.create(
        cast_id=result['cast_id'],
        rule_id=result['rule_id'],
        period_start=result['period_start'],
        period_end=result['period_end'],
        work_hours=result['work_hours'],
        total_sales=result['total_sales'],
        base_pay=result['base_pay'],
        back_pay=result['back_pay'],
        nomination_pay=result['nomination_pay'],
        gross_amount=result['total_pay'],
        deductions=ZERO,
        net_amount=result['total_pay'],
        status=status,
    )
    PayrollCalculationDetail.objects.bulk_create([
        PayrollCalculationDetail(calculation=calculation, **item) for item in result['items']
    ])
    logger.info(
        'Payroll saved for cast %s %s..%s: %s',
        result['cast_id'], result['period_start'], result['period_end'], result['total_pay'],
    )
    return calculation


def get_calculation(*, calculation_id: UUID) -> PayrollCalculation:
    try:
        return PayrollCalculation.objects.prefetch_related('details').get(id=calculation_id)
    except PayrollCalculation.DoesNotExist:
        raise CalculationNotFoundError(f"Payroll calculation {calculation_id} not found")


@transaction.atomic
def approve_calculation(*, calculation_id: UUID, approved_by) -> PayrollCalculation:
    calculation = get_calculation(calculation_id=calculation_id)
    if calculation.status not in (CalculationStatus.DRAFT, CalculationStatus.CONFIRMED):
        raise InvalidCalculationStatusError(f"Calculation is already {calculation.status}")

    calculation.status = CalculationStatus.APPROVED
    calculation.approved_by = approved_by
    calculation.approved_at = timezone.now()
    calculation.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])
    logger.info('Payroll calculation %s approved', calculation.id)
    return calculation


def calculate_monthly_payroll(*, year: int, month: int) -> dict:
    """
    Calculate and save draft payroll for every active cast for a month.

    A cast that fails (for example with no rule assigned) is logged and
    skipped.
    """
    period_start = date(year, month, 1)
    period_end = date(year, month, calendar.monthrange(year, month)[1])

    saved, failed = [], []
    for cast in CastProfile.objects.filter(is_active=True):
        try:
            result = calculate_payroll(cast_id=cast.id, period_start=period_start, period_end=period_end)
            saved.append(save_calculation(result=result))
        except PayrollServiceError as e:
            logger.exception('Payroll failed for cast %s: %s', cast.id, e)
            failed.append({'cast_id': str(cast.id), 'error': str(e)})

    return {'calculations': saved, 'failed': failed}


def payroll_history(
    *,
    cast_id: Optional[UUID] = None,
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
    status: Optional[str] = None,
) -> QuerySet:
    qs = PayrollCalculation.objects.select_related('cast').prefetch_related('details')
    if cast_id:
        qs = qs.filter(cast_id=cast_id)
    if period_start:
        qs = qs.filter(period_start__gte=period_start)
    if period_end:
        qs = qs.filter(period_end__lte=period_end)
    if status:
        qs = qs.filter(status=status)
    return qs
