import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.accounts.models import StaffRole
from apps.attendance.models import AttendanceRecord
from apps.billing.models import OrderItem
from apps.casts.models import CastProfile
from apps.payroll.models import CalculationStatus, PayrollCalculation, SalesTier
from apps.payroll.services import (
    tiered_back_pay,
    create_rule,
    update_rule,
    assign_rule,
    active_rule,
    create_nomination_type,
    update_nomination_type,
    delete_nomination_type,
    calculate_payroll,
    save_calculation,
    approve_calculation,
    calculate_monthly_payroll,
    CastNotFoundError,
    NoActiveRuleError,
    DuplicateNominationTypeError,
    InvalidCalculationStatusError,
    PayrollServiceError,
)
from apps.visits.models import Visit, VisitStatus
from apps.visits.services import add_nomination


class TestTieredBackPay:

    def test_flat_percentage_without_tiers(self):
        assert tiered_back_pay(Decimal('150000'), [], Decimal('10')) == Decimal('15000')

    def test_each_tier_pays_its_slice(self):
        tiers = [
            SalesTier(min_sales=Decimal('100000'), max_sales=None, back_percentage=Decimal('20')),
            SalesTier(min_sales=Decimal('0'), max_sales=Decimal('100000'), back_percentage=Decimal('10')),
        ]

        # 100000 * 10% + 50000 * 20%
        assert tiered_back_pay(Decimal('150000'), tiers, Decimal('0')) == Decimal('20000')
        assert tiered_back_pay(Decimal('80000'), tiers, Decimal('0')) == Decimal('8000')

    def test_result_is_floored(self):
        assert tiered_back_pay(Decimal('999'), [], Decimal('15')) == Decimal('149')


# =============================================================================
# Rules and nomination types
# =============================================================================

@pytest.mark.django_db
class TestRules:

    def test_tiers_are_replaced_on_update(self, rule):
        update_rule(rule_id=rule.id, tiers=[
            {'min_sales': Decimal('0'), 'max_sales': Decimal('50000'), 'back_percentage': Decimal('5')},
        ])
        update_rule(rule_id=rule.id, tiers=[
            {'min_sales': Decimal('0'), 'max_sales': None, 'back_percentage': Decimal('12')},
        ])

        assert list(rule.sales_tiers.values_list('back_percentage', flat=True)) == [Decimal('12')]

    def test_new_assignment_closes_previous(self, rule, cast_profile):
        later = create_rule(
            rule_name='Senior', base_hourly_rate=Decimal('3000'), effective_from=date(2025, 1, 1)
        )
        first = assign_rule(cast_id=cast_profile.id, rule_id=rule.id, assigned_from=date(2024, 1, 1))
        assign_rule(cast_id=cast_profile.id, rule_id=later.id, assigned_from=date(2025, 4, 1))

        first.refresh_from_db()
        assert first.assigned_until == date(2025, 3, 31)
        assert active_rule(cast_id=cast_profile.id, on_date=date(2025, 3, 31)).rule == rule
        assert active_rule(cast_id=cast_profile.id, on_date=date(2025, 4, 1)).rule == later

    def test_no_rule_before_assignment(self, assigned_rule, cast_profile):
        with pytest.raises(NoActiveRuleError):
            active_rule(cast_id=cast_profile.id, on_date=date(2023, 12, 31))


@pytest.mark.django_db
class TestNominationTypes:

    def test_duplicate_type_name(self, nomination_type):
        with pytest.raises(DuplicateNominationTypeError):
            create_nomination_type(type_name='shimei', display_name='Again', price=Decimal('1000'))

    def test_rename_to_taken_name(self, nomination_type):
        other = create_nomination_type(type_name='jonai', display_name='In-house', price=Decimal('2000'))

        with pytest.raises(DuplicateNominationTypeError):
            update_nomination_type(nomination_type_id=other.id, type_name='shimei')

    def test_delete_deactivates(self, nomination_type):
        delete_nomination_type(nomination_type_id=nomination_type.id)

        nomination_type.refresh_from_db()
        assert nomination_type.is_active is False


# =============================================================================
# Calculation
# =============================================================================

@pytest.fixture
def period():
    today = timezone.localdate()
    return today - timedelta(days=1), today + timedelta(days=1)


@pytest.fixture
def worked_shift(cast_profile):
    clock_out = timezone.now()
    return AttendanceRecord.objects.create(
        staff=cast_profile.staff,
        attendance_date=timezone.localdate(),
        clock_in=clock_out - timedelta(hours=6, minutes=40),
        clock_out=clock_out,
    )


@pytest.mark.django_db
class TestCalculatePayroll:

    def test_breakdown(self, assigned_rule, cast_profile, visit, product, nomination_type, worked_shift, period):
        add_nomination(visit_id=visit.id, cast_id=cast_profile.id, nomination_type_id=nomination_type.id)
        OrderItem.objects.create(
            visit=visit,
            product=product,
            cast=cast_profile,
            quantity=2,
            unit_price=Decimal('20000'),
            total_price=Decimal('40000'),
        )
        Visit.objects.filter(id=visit.id).update(status=VisitStatus.COMPLETED)

        result = calculate_payroll(cast_id=cast_profile.id, period_start=period[0], period_end=period[1])

        assert result['work_hours'] == 6
        assert result['base_pay'] == Decimal('12000')
        assert result['total_sales'] == Decimal('40000')
        assert result['back_pay'] == Decimal('4000')
        assert result['nomination_pay'] == Decimal('1500')
        assert result['total_pay'] == Decimal('17500')
        assert [item['item_type'] for item in result['items']] == ['base', 'back', 'nomination']

    def test_cancelled_visit_nominations_excluded(self, assigned_rule, cast_profile, visit, nomination_type, period):
        add_nomination(visit_id=visit.id, cast_id=cast_profile.id, nomination_type_id=nomination_type.id)
        Visit.objects.filter(id=visit.id).update(status=VisitStatus.CANCELLED)

        result = calculate_payroll(cast_id=cast_profile.id, period_start=period[0], period_end=period[1])

        assert result['nomination_pay'] == Decimal('0')

    def test_active_visit_sales_not_counted(self, assigned_rule, cast_profile, visit, product, period):
        OrderItem.objects.create(
            visit=visit, product=product, cast=cast_profile,
            quantity=1, unit_price=Decimal('20000'), total_price=Decimal('20000'),
        )

        result = calculate_payroll(cast_id=cast_profile.id, period_start=period[0], period_end=period[1])

        assert result['total_sales'] == Decimal('0')

    def test_requires_rule(self, cast_profile, period):
        with pytest.raises(NoActiveRuleError):
            calculate_payroll(cast_id=cast_profile.id, period_start=period[0], period_end=period[1])

    def test_inverted_period(self, assigned_rule, cast_profile):
        with pytest.raises(PayrollServiceError):
            calculate_payroll(
                cast_id=cast_profile.id, period_start=date(2025, 2, 1), period_end=date(2025, 1, 1)
            )

    def test_unknown_cast(self, period):
        with pytest.raises(CastNotFoundError):
            calculate_payroll(cast_id=uuid.uuid4(), period_start=period[0], period_end=period[1])


@pytest.mark.django_db
class TestSaveAndApprove:

    def test_saved_with_details(self, assigned_rule, cast_profile, worked_shift, period):
        result = calculate_payroll(cast_id=cast_profile.id, period_start=period[0], period_end=period[1])
        calculation = save_calculation(result=result)

        assert calculation.status == CalculationStatus.DRAFT
        assert calculation.gross_amount == calculation.net_amount == Decimal('12000')
        assert calculation.details.count() == 3

    def test_approve_once(self, assigned_rule, cast_profile, manager_user, period):
        result = calculate_payroll(cast_id=cast_profile.id, period_start=period[0], period_end=period[1])
        calculation = save_calculation(result=result)

        approved = approve_calculation(calculation_id=calculation.id, approved_by=manager_user)

        assert approved.status == CalculationStatus.APPROVED
        assert approved.approved_by == manager_user
        with pytest.raises(InvalidCalculationStatusError):
            approve_calculation(calculation_id=calculation.id, approved_by=manager_user)


@pytest.mark.django_db
class TestMonthlyPayroll:

    def test_skips_casts_without_rule(self, assigned_rule, cast_profile, make_staff_user):
        other = make_staff_user(StaffRole.CAST)
        CastProfile.objects.create(staff=other.staff_profile, stage_name='Mio', hourly_rate=Decimal('2500'))

        outcome = calculate_monthly_payroll(year=2025, month=2)

        assert len(outcome['calculations']) == 1
        assert len(outcome['failed']) == 1
        saved = PayrollCalculation.objects.get()
        assert saved.period_start == date(2025, 2, 1)
        assert saved.period_end == date(2025, 2, 28)
