"""
Serializers for the analytics app.

Input serializers validate query parameters; response serializers shape
the plain dicts returned by ``apps.analytics.analytics`` and document
them in the schema.
"""

from rest_framework import serializers

RETENTION_CHOICES = ('active', 'churning', 'churned')
SEGMENT_CHOICES = ('VIP', 'Premium', 'Regular', 'New', 'Prospect')
RISK_CHOICES = ('Lost', 'High Risk', 'Medium Risk', 'Low Risk', 'Healthy')


def money():
    return serializers.DecimalField(max_digits=14, decimal_places=2)


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class CustomerMetricsQuerySerializer(serializers.Serializer):
    """
    Filters for the customer metrics list.

    Query Parameters:
        retention_status (str): active, churning or churned
        segment (str): VIP, Premium, Regular, New or Prospect
        risk_level (str): Lost, High Risk, Medium Risk, Low Risk or Healthy
        min_visits (int): Minimum number of visits
        min_revenue (decimal): Minimum total revenue
    """

    retention_status = serializers.ChoiceField(choices=RETENTION_CHOICES, required=False)
    segment = serializers.ChoiceField(choices=SEGMENT_CHOICES, required=False)
    risk_level = serializers.ChoiceField(choices=RISK_CHOICES, required=False)
    min_visits = serializers.IntegerField(min_value=0, required=False)
    min_revenue = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)


class RFMQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({'start_date': 'Start date must be before end date'})
        return attrs


class MonthsQuerySerializer(serializers.Serializer):
    months = serializers.IntegerField(min_value=1, max_value=24, default=6)


class CohortQuerySerializer(serializers.Serializer):
    months = serializers.IntegerField(min_value=1, max_value=12, default=12)


# =============================================================================
# Response Serializers
# =============================================================================

class CustomerMetricsSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    customer_name = serializers.CharField()
    phone_number = serializers.CharField(allow_blank=True)
    visit_count = serializers.IntegerField()
    first_visit = serializers.DateTimeField(allow_null=True)
    last_visit = serializers.DateTimeField(allow_null=True)
    avg_visit_interval_days = serializers.FloatField(allow_null=True)
    days_since_last_visit = serializers.IntegerField(allow_null=True)
    total_revenue = money()
    avg_spend_per_visit = money()
    active_bottle_count = serializers.IntegerField()
    retention_status = serializers.CharField(allow_null=True)
    segment = serializers.CharField()
    risk_level = serializers.CharField(allow_null=True)


class RFMScoreSerializer(serializers.Serializer):
    recency_score = serializers.IntegerField()
    frequency_score = serializers.IntegerField()
    monetary_score = serializers.IntegerField()
    rfm_score = serializers.CharField()
    rfm_segment = serializers.CharField()


class CustomerRFMSerializer(RFMScoreSerializer):
    customer_id = serializers.UUIDField()
    customer_name = serializers.CharField()
    recency_days = serializers.IntegerField()
    frequency = serializers.IntegerField()
    monetary = money()


class LifetimeValueSerializer(serializers.Serializer):
    current_value = money()
    predicted_value = money()
    retention_probability = serializers.FloatField()


class TrendPointSerializer(serializers.Serializer):
    month = serializers.CharField()
    visits = serializers.IntegerField()
    revenue = money()
    unique_customers = serializers.IntegerField()


class CustomerDetailSerializer(CustomerMetricsSerializer):
    rfm = RFMScoreSerializer(allow_null=True)
    churn_probability = serializers.IntegerField()
    lifetime_value = LifetimeValueSerializer()
    trend = TrendPointSerializer(many=True)


class AnalyticsSummarySerializer(serializers.Serializer):
    total_customers = serializers.IntegerField()
    active_customers = serializers.IntegerField()
    churning_customers = serializers.IntegerField()
    churned_customers = serializers.IntegerField()
    retention_rate = serializers.FloatField()
    avg_lifetime_value = money()
    total_revenue = money()
    vip_count = serializers.IntegerField()
    at_risk_count = serializers.IntegerField()
    segment_counts = serializers.DictField(child=serializers.IntegerField())


class CohortSerializer(serializers.Serializer):
    cohort_month = serializers.CharField()
    month_index = serializers.IntegerField()
    retained_customers = serializers.IntegerField()
    total_customers = serializers.IntegerField()
    retention_rate = serializers.FloatField()


class DashboardSerializer(serializers.Serializer):
    """Response serializer for the management dashboard."""
    date = serializers.DateField()
    today_sales = money()
    today_visits = serializers.IntegerField()
    active_visits = serializers.IntegerField()
    active_tables = serializers.IntegerField()
    total_tables = serializers.IntegerField()
    today_reservations = serializers.IntegerField()
    pending_reservations = serializers.IntegerField()
    low_stock_count = serializers.IntegerField()
    bottle_alert_count = serializers.IntegerField()


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
