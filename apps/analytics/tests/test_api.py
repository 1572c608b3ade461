import uuid
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from apps.analytics.analytics import CustomerAnalytics
from apps.visits.models import VisitStatus
from apps.visits.services import start_visit


# =============================================================================
# Customer Metrics Tests
# =============================================================================

@pytest.mark.django_db
class TestCustomerMetrics:
    """Tests for /api/analytics/customers/"""

    def test_metrics_ordered_by_revenue(self, manager_client, regular_and_lapsed):
        response = manager_client.get(reverse('analytics:customer-metrics'))

        assert response.status_code == status.HTTP_200_OK
        first, second = response.data['results']
        assert first['customer_name'] == 'Yamada Taro'
        assert first['visit_count'] == 3
        assert first['avg_visit_interval_days'] == 45.0
        assert first['days_since_last_visit'] == 10
        assert first['segment'] == 'Premium'
        assert first['retention_status'] == 'active'
        assert second['risk_level'] == 'High Risk'

    def test_filter_by_retention(self, manager_client, regular_and_lapsed):
        response = manager_client.get(reverse('analytics:customer-metrics'), {'retention_status': 'churned'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['customer_name'] == 'Suzuki Hanako'

    def test_cancelled_visits_ignored(self, customer, make_visit):
        make_visit(customer, 5, '90000', status=VisitStatus.CANCELLED)

        row = CustomerAnalytics.metrics()[0]

        assert row['visit_count'] == 0
        assert row['segment'] == 'Prospect'
        assert row['retention_status'] is None

    def test_hall_forbidden(self, hall_client):
        response = hall_client.get(reverse('analytics:customer-metrics'))

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestCustomerDetail:

    def test_detail(self, cashier_client, regular_and_lapsed):
        customer = regular_and_lapsed[0]
        url = reverse('analytics:customer-detail', kwargs={'customer_id': customer.id})

        response = cashier_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['rfm']['rfm_segment'] == 'Potential Loyalists'
        assert 0 <= response.data['churn_probability'] <= 100
        assert len(response.data['trend']) == 6

    def test_customer_without_visits(self, manager_client, customer):
        url = reverse('analytics:customer-detail', kwargs={'customer_id': customer.id})

        response = manager_client.get(url)

        assert response.data['rfm'] is None
        assert response.data['churn_probability'] == 100
        assert response.data['risk_level'] is None

    def test_unknown_customer(self, manager_client):
        url = reverse('analytics:customer-detail', kwargs={'customer_id': uuid.uuid4()})

        response = manager_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Report Tests
# =============================================================================

@pytest.mark.django_db
class TestReports:

    def test_summary(self, manager_client, regular_and_lapsed):
        response = manager_client.get(reverse('analytics:summary'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_customers'] == 2
        assert response.data['active_customers'] == 1
        assert response.data['churned_customers'] == 1
        assert response.data['retention_rate'] == 50.0
        assert Decimal(response.data['total_revenue']) == Decimal('350000')
        assert response.data['at_risk_count'] == 1
        assert response.data['segment_counts'] == {'Premium': 1, 'New': 1}
        assert response.data['vip_count'] == 0

    def test_at_risk_and_vip(self, manager_client, regular_and_lapsed):
        at_risk = manager_client.get(reverse('analytics:at-risk'))
        vip = manager_client.get(reverse('analytics:vip'))

        assert [r['customer_name'] for r in at_risk.data['results']] == ['Suzuki Hanako']
        assert [r['customer_name'] for r in vip.data['results']] == ['Yamada Taro']

    def test_rfm_range_validated(self, manager_client):
        response = manager_client.get(
            reverse('analytics:rfm'), {'start_date': '2025-03-01', 'end_date': '2025-02-01'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cohort_of_this_month(self, manager_client, customer, make_visit):
        make_visit(customer, 0, '10000')

        response = manager_client.get(reverse('analytics:cohorts'), {'months': 1})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['month_index'] == 0
        assert response.data[0]['retention_rate'] == 100.0

    @pytest.mark.parametrize('months', [0, 13])
    def test_cohort_range(self, manager_client, months):
        response = manager_client.get(reverse('analytics:cohorts'), {'months': months})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_trends_include_empty_months(self, manager_client, customer, make_visit):
        make_visit(customer, 0, '10000')

        response = manager_client.get(reverse('analytics:trends'), {'months': 3})

        assert [p['visits'] for p in response.data] == [0, 0, 1]


# =============================================================================
# Dashboard Tests
# =============================================================================

@pytest.mark.django_db
class TestDashboard:

    def test_hall_sees_live_figures(self, hall_client, hall_user, customer, table, other_table):
        start_visit(customer_id=customer.id, table_id=table.id, num_guests=2, created_by=hall_user)

        response = hall_client.get(reverse('analytics:dashboard'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['active_visits'] == 1
        assert response.data['active_tables'] == 1
        assert response.data['total_tables'] == 2

    def test_cast_forbidden(self, cast_client):
        response = cast_client.get(reverse('analytics:dashboard'))

        assert response.status_code == status.HTTP_403_FORBIDDEN
