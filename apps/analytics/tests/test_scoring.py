"""Pure scoring rules; no database needed."""

from decimal import Decimal

import pytest

from apps.analytics.analytics import CustomerAnalytics


def metrics(days, visits, interval, avg_spend='0', revenue='0'):
    return {
        'days_since_last_visit': days,
        'visit_count': visits,
        'avg_visit_interval_days': interval,
        'avg_spend_per_visit': Decimal(avg_spend),
        'total_revenue': Decimal(revenue),
    }


class TestRetentionStatus:

    @pytest.mark.parametrize('days,expected', [
        (0, 'active'),
        (30, 'active'),
        (31, 'churning'),
        (90, 'churning'),
        (91, 'churned'),
        (None, None),
    ])
    def test_boundaries(self, days, expected):
        assert CustomerAnalytics.retention_status(days) == expected


class TestSegment:

    @pytest.mark.parametrize('revenue,visits,expected', [
        ('500000', 10, 'VIP'),
        ('500000', 9, 'Premium'),
        ('200000', 1, 'Premium'),
        ('199999', 3, 'Regular'),
        ('0', 1, 'New'),
        ('0', 0, 'Prospect'),
    ])
    def test_segments(self, revenue, visits, expected):
        assert CustomerAnalytics.segment(Decimal(revenue), visits) == expected


class TestRiskLevel:

    @pytest.mark.parametrize('days,expected', [
        (30, 'Healthy'),
        (31, 'Low Risk'),
        (61, 'Medium Risk'),
        (91, 'High Risk'),
        (180, 'High Risk'),
        (181, 'Lost'),
        (None, None),
    ])
    def test_levels(self, days, expected):
        assert CustomerAnalytics.risk_level(days) == expected


class TestRFMScores:

    def test_champion(self):
        scores = CustomerAnalytics.rfm_scores(5, 20, Decimal('1000000'))

        assert scores['rfm_score'] == '555'
        assert scores['rfm_segment'] == 'Champions'

    @pytest.mark.parametrize('recency,frequency,monetary,expected', [
        (100, 12, '0', 'Loyal Customers'),
        (20, 3, '0', 'Potential Loyalists'),
        (20, 1, '0', 'New Customers'),
        (75, 6, '100000', 'At Risk'),
        (100, 2, '600000', 'Cannot Lose Them'),
        (100, 1, '10000', 'Hibernating'),
        (45, 5, '100000', 'Need Attention'),
    ])
    def test_segments(self, recency, frequency, monetary, expected):
        assert CustomerAnalytics.rfm_scores(recency, frequency, Decimal(monetary))['rfm_segment'] == expected


class TestChurnProbability:

    def test_never_visited(self):
        assert CustomerAnalytics.churn_probability(metrics(None, 0, None)) == 100

    def test_loyal_recent_customer(self):
        assert CustomerAnalytics.churn_probability(metrics(0, 10, 7)) == 0

    def test_regular_on_schedule(self):
        # recency 10/180*50, no deviation, frequency (1 - 5/10) * 20
        assert CustomerAnalytics.churn_probability(metrics(10, 5, 20)) == 13

    def test_single_visit_gets_half_deviation(self):
        # 25 + 15 + 18
        assert CustomerAnalytics.churn_probability(metrics(90, 1, None)) == 58

    def test_long_overdue_saturates(self):
        assert CustomerAnalytics.churn_probability(metrics(400, 2, 30)) == 96


class TestLifetimeValue:

    def test_fully_retained(self):
        ltv = CustomerAnalytics.lifetime_value(metrics(0, 10, 30, avg_spend='30000', revenue='300000'))

        assert ltv['current_value'] == Decimal('300000')
        # 30000 * 365/30 visits a year * 3 years
        assert ltv['predicted_value'] == Decimal('1095000')
        assert ltv['retention_probability'] == 1.0

    def test_single_visit_assumes_yearly_return(self):
        ltv = CustomerAnalytics.lifetime_value(metrics(90, 1, None, avg_spend='50000', revenue='50000'))

        assert ltv['retention_probability'] == 0.42
        assert ltv['predicted_value'] == Decimal('63000')
