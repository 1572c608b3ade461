import uuid
from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from apps.payroll.models import CalculationStatus, NominationType, PayrollRule
from apps.payroll.services import calculate_payroll, save_calculation


# =============================================================================
# Rule Tests
# =============================================================================

@pytest.mark.django_db
class TestPayrollRules:
    """Tests for /api/payroll/rules/"""

    def test_create_rule_with_tiers(self, manager_client):
        data = {
            'rule_name': 'Tiered',
            'base_hourly_rate': '2500',
            'effective_from': '2025-01-01',
            'tiers': [
                {'min_sales': '0', 'max_sales': '100000', 'back_percentage': '10'},
                {'min_sales': '100000', 'max_sales': None, 'back_percentage': '20'},
            ],
        }
        response = manager_client.post(reverse('payroll:rule-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data['sales_tiers']) == 2

    def test_tier_bounds_validated(self, manager_client):
        data = {
            'rule_name': 'Broken',
            'base_hourly_rate': '2500',
            'effective_from': '2025-01-01',
            'tiers': [{'min_sales': '50000', 'max_sales': '1000', 'back_percentage': '10'}],
        }
        response = manager_client.post(reverse('payroll:rule-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_deactivates(self, manager_client, rule):
        url = reverse('payroll:rule-detail', kwargs={'pk': rule.id})

        assert manager_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        assert PayrollRule.objects.get(id=rule.id).is_active is False

    def test_hall_forbidden(self, hall_client):
        response = hall_client.get(reverse('payroll:rule-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Nomination Type Tests
# =============================================================================

@pytest.mark.django_db
class TestNominationTypes:

    def test_create(self, manager_client):
        data = {'type_name': 'douhan', 'display_name': 'Dinner date', 'price': '5000', 'back_percentage': '30'}
        response = manager_client.post(reverse('payroll:nomination-type-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert NominationType.objects.filter(type_name='douhan').exists()

    def test_duplicate_conflict(self, manager_client, nomination_type):
        data = {'type_name': 'shimei', 'display_name': 'Dup', 'price': '1000'}
        response = manager_client.post(reverse('payroll:nomination-type-list'), data, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_filter_active(self, manager_client, nomination_type):
        NominationType.objects.create(type_name='old', display_name='Old', price=Decimal('1'), is_active=False)

        response = manager_client.get(reverse('payroll:nomination-type-list'), {'is_active': 'true'})

        assert response.data['count'] == 1


# =============================================================================
# Assignment and Calculation Tests
# =============================================================================

@pytest.mark.django_db
class TestAssignments:

    def test_assign(self, manager_client, rule, cast_profile):
        data = {'cast': str(cast_profile.id), 'rule': str(rule.id), 'assigned_from': '2025-01-01'}
        response = manager_client.post(reverse('payroll:assignment-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['stage_name'] == 'Rina'


@pytest.mark.django_db
class TestCalculations:

    def test_preview_does_not_save(self, manager_client, assigned_rule, cast_profile):
        data = {'cast_id': str(cast_profile.id), 'period_start': '2025-01-01', 'period_end': '2025-01-31'}
        response = manager_client.post(reverse('payroll:calculation-calculate'), data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_pay'] == '0.00'
        assert len(response.data['items']) == 3
        assert not cast_profile.payroll_calculations.exists()

    def test_persist(self, manager_client, assigned_rule, cast_profile):
        data = {
            'cast_id': str(cast_profile.id),
            'period_start': '2025-01-01',
            'period_end': '2025-01-31',
            'persist': True,
        }
        response = manager_client.post(reverse('payroll:calculation-calculate'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == CalculationStatus.DRAFT

    def test_without_rule(self, manager_client, cast_profile):
        data = {'cast_id': str(cast_profile.id), 'period_start': '2025-01-01', 'period_end': '2025-01-31'}
        response = manager_client.post(reverse('payroll:calculation-calculate'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_cast(self, manager_client):
        data = {'cast_id': str(uuid.uuid4()), 'period_start': '2025-01-01', 'period_end': '2025-01-31'}
        response = manager_client.post(reverse('payroll:calculation-calculate'), data, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_monthly(self, manager_client, assigned_rule, cast_profile):
        response = manager_client.post(
            reverse('payroll:calculation-monthly'), {'year': 2025, 'month': 1}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['calculations']) == 1
        assert response.data['failed'] == []

    def test_approve_twice_conflicts(self, manager_client, assigned_rule, cast_profile):
        result = calculate_payroll(
            cast_id=cast_profile.id, period_start=date(2025, 1, 1), period_end=date(2025, 1, 31)
        )
        calculation = save_calculation(result=result)
        url = reverse('payroll:calculation-approve', kwargs={'pk': calculation.id})

        assert manager_client.post(url).status_code == status.HTTP_200_OK
        assert manager_client.post(url).status_code == status.HTTP_409_CONFLICT

    def test_cashier_cannot_calculate(self, cashier_client, cast_profile):
        data = {'cast_id': str(cast_profile.id), 'period_start': '2025-01-01', 'period_end': '2025-01-31'}
        response = cashier_client.post(reverse('payroll:calculation-calculate'), data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
