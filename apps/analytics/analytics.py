"""
Analytics Module
================

Read-only customer and venue analytics computed from visits, bills and
bottle keeps.

Classes:
    CustomerAnalytics: Per-customer metrics, segmentation, RFM scoring,
        churn and lifetime value, plus cohort and trend reports.
    VenueAnalytics: Live figures for the management dashboard.

Scoring rules:
    - Retention: ``active`` up to 30 days since the last visit,
      ``churning`` up to 90, ``churned`` beyond that.
    - Segment: VIP (revenue >= 500,000 and visits >= 10), Premium
      (revenue >= 200,000), Regular (visits >= 3), New (visits >= 1),
      Prospect otherwise.
    - Risk: Lost (> 180 days), High Risk (> 90), Medium Risk (> 60),
      Low Risk (> 30), Healthy otherwise.

Example:
    Listing customers who need a call::

        from apps.analytics.analytics import CustomerAnalytics

        for row in CustomerAnalytics.at_risk_customers():
            print(row['customer_name'], row['risk_level'], row['total_revenue'])

Note:
    Cancelled visits never count. Revenue comes from completed visits only.
    Every method returns plain dicts and lists ready for serialization.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal

from django.db.models import Count, Max, Min, Q, Sum
from django.db.models.functions import TruncMonth
from django.utils import timezone

from apps.billing.services import floor_yen
from apps.bottle_keeps.models import BottleKeep, BottleStatus
from apps.bottle_keeps.services import bottle_alert_count
from apps.customers.models import Customer
from apps.inventory.services import low_stock_count
from apps.reservations.models import Reservation, ReservationStatus
from apps.tables.models import Table, TableStatus
from apps.visits.models import Visit, VisitStatus
from .exceptions import CustomerNotFoundError, InvalidRangeError

ACTIVE_DAYS = 30
CHURNING_DAYS = 90

VIP_REVENUE = Decimal('500000')
VIP_VISITS = 10
PREMIUM_REVENUE = Decimal('200000')
REGULAR_VISITS = 3

RISK_LEVELS = [
    (180, 'Lost'),
    (90, 'High Risk'),
    (60, 'Medium Risk'),
    (30, 'Low Risk'),
]
AT_RISK_LEVELS = ('High Risk', 'Medium Risk')
VIP_SEGMENTS = ('VIP', 'Premium')

RECENCY_SCORES = [(7, 5), (30, 4), (60, 3), (90, 2)]
FREQUENCY_SCORES = [(20, 5), (10, 4), (5, 3), (2, 2)]
MONETARY_SCORES = [
    (Decimal('1000000'), 5),
    (Decimal('500000'), 4),
    (Decimal('200000'), 3),
    (Decimal('50000'), 2),
]

LTV_YEARS = 3
MAX_COHORT_MONTHS = 12


def _month_key(value):
    return value.year * 12 + value.month - 1


def _month_label(key):
    return f"{key // 12:04d}-{key % 12 + 1:02d}"


class CustomerAnalytics:
    """
    Customer value and retention analytics.

    ``metrics`` is the building block; the scoring helpers take one
    metrics dict and are pure, so they can be tested without a database.
    """

    # ------------------------------------------------------------------
    # Scoring helpers
    # ------------------------------------------------------------------

    @staticmethod
    def retention_status(days_since_last_visit):
        if days_since_last_visit is None:
            return None
        if days_since_last_visit <= ACTIVE_DAYS:
            return 'active'
        if days_since_last_visit <= CHURNING_DAYS:
            return 'churning'
        return 'churned'

    @staticmethod
    def segment(total_revenue, visit_count):
        if total_revenue >= VIP_REVENUE and visit_count >= VIP_VISITS:
            return 'VIP'
        if total_revenue >= PREMIUM_REVENUE:
            return 'Premium'
        if visit_count >= REGULAR_VISITS:
            return 'Regular'
        if visit_count >= 1:
            return 'New'
        return 'Prospect'

    @staticmethod
    def risk_level(days_since_last_visit):
        """Risk bucket by days since the last visit; None for customers who never visited."""
        if days_since_last_visit is None:
            return None
        for threshold, level in RISK_LEVELS:
            if days_since_last_visit > threshold:
                return level
        return 'Healthy'

    @staticmethod
    def rfm_scores(recency_days, frequency, monetary):
        """
        Score recency, frequency and monetary value from 1 to 5.

        Returns:
            dict: recency_score, frequency_score, monetary_score,
            rfm_score (e.g. ``"545"``) and rfm_segment.
        """
        r = next((score for limit, score in RECENCY_SCORES if recency_days <= limit), 1)
        f = next((score for limit, score in FREQUENCY_SCORES if frequency >= limit), 1)
        m = next((score for limit, score in MONETARY_SCORES if monetary >= limit), 1)

        if r >= 4 and f >= 4 and m >= 4:
            rfm_segment = 'Champions'
        elif f >= 4:
            rfm_segment = 'Loyal Customers'
        elif r >= 4 and f >= 2:
            rfm_segment = 'Potential Loyalists'
        elif r >= 4:
            rfm_segment = 'New Customers'
        elif r <= 2 and f >= 3:
            rfm_segment = 'At Risk'
        elif r <= 2 and m >= 4:
            rfm_segment = 'Cannot Lose Them'
        elif r <= 2:
            rfm_segment = 'Hibernating'
        else:
            rfm_segment = 'Need Attention'

        return {
            'recency_score': r,
            'frequency_score': f,
            'monetary_score': m,
            'rfm_score': f"{r}{f}{m}",
            'rfm_segment': rfm_segment,
        }

    @staticmethod
    def churn_probability(metrics):
        """
        Churn likelihood from 0 to 100.

        Three parts are summed:
            - recency, up to 50: days since the last visit over 180 days;
            - interval deviation, up to 30: how far the current gap exceeds
              the customer's own average gap, saturating at four times it.
              Customers with a single visit get half of it;
            - frequency, up to 20: falls to zero at 10 visits.

        A customer who never visited scores 100.
        """
        days = metrics['days_since_last_visit']
        visits = metrics['visit_count']
        if days is None or visits == 0:
            return 100

        recency = min(days / 180, 1) * 50

        interval = metrics['avg_visit_interval_days']
        if interval is not None:
            overdue = max(days / max(interval, 1) - 1, 0)
            deviation = min(overdue / 3, 1) * 30
        else:
            deviation = 15

        frequency = max(1 - visits / 10, 0) * 20

        return int(round(min(recency + deviation + frequency, 100)))

    @staticmethod
    def lifetime_value(metrics):
        """
        Current and predicted customer value.

        ``predicted_value = avg spend * visits per year * 3 years * retention``
        where visits per year is ``365 / max(avg interval, 1)``. Customers
        with one visit are assumed to come back once a year.
        """
        churn = CustomerAnalytics.churn_probability(metrics)
        retention = Decimal(100 - churn) / Decimal(100)
        interval = metrics['avg_visit_interval_days']
        if interval is None:
            interval = 365
        visits_per_year = Decimal(365) / Decimal(max(interval, 1))

        predicted = metrics['avg_spend_per_visit'] * visits_per_year * LTV_YEARS * retention
        return {
            'current_value': metrics['total_revenue'],
            'predicted_value': floor_yen(predicted),
            'retention_probability': round(float(retention), 2),
        }

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    @staticmethod
    def _customer_rows(queryset, start_date=None, end_date=None):
        visit_filter = ~Q(visits__status=VisitStatus.CANCELLED)
        if start_date:
            visit_filter &= Q(visits__check_in_at__date__gte=start_date)
        if end_date:
            visit_filter &= Q(visits__check_in_at__date__lte=end_date)
        revenue_filter = visit_filter & Q(visits__status=VisitStatus.COMPLETED)

        return queryset.annotate(
            visit_count=Count('visits', filter=visit_filter),
            first_visit=Min('visits__check_in_at', filter=visit_filter),
            last_visit=Max('visits__check_in_at', filter=visit_filter),
            total_revenue=Sum('visits__total_amount', filter=revenue_filter),
        )

    @staticmethod
    def _build_metrics(customer, bottle_counts, today):
        visit_count = customer.visit_count
        revenue = customer.total_revenue or Decimal('0')

        days_since = None
        interval = None
        if customer.last_visit:
            days_since = (today - timezone.localtime(customer.last_visit).date()).days
            if visit_count > 1:
                span = (customer.last_visit - customer.first_visit).days
                interval = round(span / (visit_count - 1), 1)

        metrics = {
            'customer_id': customer.id,
            'customer_name': customer.name,
            'phone_number': customer.phone_number,
            'visit_count': visit_count,
            'first_visit': customer.first_visit,
            'last_visit': customer.last_visit,
            'avg_visit_interval_days': interval,
            'days_since_last_visit': days_since,
            'total_revenue': revenue,
            'avg_spend_per_visit': floor_yen(revenue / visit_count) if visit_count else Decimal('0'),
            'active_bottle_count': bottle_counts.get(customer.id, 0),
            'retention_status': CustomerAnalytics.retention_status(days_since),
        }
        metrics['segment'] = CustomerAnalytics.segment(revenue, visit_count)
        metrics['risk_level'] = CustomerAnalytics.risk_level(days_since)
        return metrics

    @staticmethod
    def metrics(retention_status=None, segment=None, risk_level=None, min_visits=None, min_revenue=None):
        """
        Metrics for every customer, highest revenue first.

        Args:
            retention_status (str, optional): ``active``, ``churning`` or ``churned``.
            segment (str, optional): Segment name, e.g. ``VIP``.
            risk_level (str, optional): Risk bucket, e.g. ``High Risk``.
            min_visits (int, optional): Minimum visit count.
            min_revenue (Decimal, optional): Minimum total revenue.

        Returns:
            list[dict]: One metrics dict per customer.
        """
        today = timezone.localdate()
        bottle_counts = dict(
            BottleKeep.objects.filter(status=BottleStatus.ACTIVE)
            .values_list('customer_id')
            .annotate(count=Count('id'))
            .order_by()
        )

        rows = [
            CustomerAnalytics._build_metrics(customer, bottle_counts, today)
            for customer in CustomerAnalytics._customer_rows(Customer.objects.all())
        ]

        if retention_status:
            rows = [r for r in rows if r['retention_status'] == retention_status]
        if segment:
            rows = [r for r in rows if r['segment'] == segment]
        if risk_level:
            rows = [r for r in rows if r['risk_level'] == risk_level]
        if min_visits:
            rows = [r for r in rows if r['visit_count'] >= min_visits]
        if min_revenue:
            rows = [r for r in rows if r['total_revenue'] >= min_revenue]

        rows.sort(key=lambda r: (r['total_revenue'], r['visit_count']), reverse=True)
        return rows

    @staticmethod
    def customer_detail(customer_id, months=6):
        """
        Full profile of one customer: metrics, RFM, churn, LTV and a
        month-by-month visit/spend trend.

        Raises:
            CustomerNotFoundError: If the customer does not exist.
        """
        rows = CustomerAnalytics._customer_rows(Customer.objects.filter(id=customer_id))
        customer = rows.first()
        if customer is None:
            raise CustomerNotFoundError(f"Customer {customer_id} not found")

        bottle_counts = {
            customer.id: BottleKeep.objects.filter(customer_id=customer.id, status=BottleStatus.ACTIVE).count()
        }
        metrics = CustomerAnalytics._build_metrics(customer, bottle_counts, timezone.localdate())

        detail = dict(metrics)
        if metrics['days_since_last_visit'] is not None:
            detail['rfm'] = CustomerAnalytics.rfm_scores(
                metrics['days_since_last_visit'], metrics['visit_count'], metrics['total_revenue']
            )
        else:
            detail['rfm'] = None
        detail['churn_probability'] = CustomerAnalytics.churn_probability(metrics)
        detail['lifetime_value'] = CustomerAnalytics.lifetime_value(metrics)
        detail['trend'] = CustomerAnalytics.monthly_trends(months=months, customer_id=customer.id)
        return detail

    @staticmethod
    def rfm_analysis(start_date=None, end_date=None):
        """RFM scores for customers with at least one visit in the range, best first."""
        if start_date and end_date and start_date > end_date:
            raise InvalidRangeError('start_date must be on or before end_date')

        today = timezone.localdate()
        results = []
        rows = CustomerAnalytics._customer_rows(Customer.objects.all(), start_date, end_date)
        for customer in rows.filter(visit_count__gt=0):
            recency = (today - timezone.localtime(customer.last_visit).date()).days
            monetary = customer.total_revenue or Decimal('0')
            results.append({
                'customer_id': customer.id,
                'customer_name': customer.name,
                'recency_days': recency,
                'frequency': customer.visit_count,
                'monetary': monetary,
                **CustomerAnalytics.rfm_scores(recency, customer.visit_count, monetary),
            })

        results.sort(key=lambda r: (r['rfm_score'], r['monetary']), reverse=True)
        return results

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    @staticmethod
    def summary():
        """
        Headline numbers for the customer analytics dashboard.

        Returns:
            dict: total_customers, active/churning/churned counts,
            retention_rate (% of visiting customers who are active),
            avg_lifetime_value, total_revenue, vip_count, at_risk_count
            and segment_counts.
        """
        rows = CustomerAnalytics.metrics()
        visiting = [r for r in rows if r['visit_count'] > 0]

        status_counts = defaultdict(int)
        segment_counts = defaultdict(int)
        for row in rows:
            segment_counts[row['segment']] += 1
            if row['retention_status']:
                status_counts[row['retention_status']] += 1

        total_revenue = sum((r['total_revenue'] for r in rows), Decimal('0'))
        ltv_total = sum(
            (CustomerAnalytics.lifetime_value(r)['predicted_value'] for r in visiting), Decimal('0')
        )

        return {
            'total_customers': len(rows),
            'active_customers': status_counts['active'],
            'churning_customers': status_counts['churning'],
            'churned_customers': status_counts['churned'],
            'retention_rate': round(status_counts['active'] / len(visiting) * 100, 2) if visiting else 0.0,
            'avg_lifetime_value': floor_yen(ltv_total / len(visiting)) if visiting else Decimal('0'),
            'total_revenue': total_revenue,
            'vip_count': segment_counts.get('VIP', 0),
            'at_risk_count': sum(1 for r in rows if r['risk_level'] in AT_RISK_LEVELS),
            'segment_counts': dict(segment_counts),
        }

    @staticmethod
    def at_risk_customers():
        return [r for r in CustomerAnalytics.metrics() if r['risk_level'] in AT_RISK_LEVELS]

    @staticmethod
    def vip_customers():
        return [r for r in CustomerAnalytics.metrics() if r['segment'] in VIP_SEGMENTS]

    @staticmethod
    def cohort_analysis(months=MAX_COHORT_MONTHS):
        """
        Retention of first-visit cohorts.

        Customers are grouped by the month of their first visit, over the
        last ``months`` months (at most 12). For each cohort and each month
        offset up to the current month, the result says how many of the
        cohort visited in that month.

        Returns:
            list[dict]: cohort_month (``YYYY-MM``), month_index,
            retained_customers, total_customers, retention_rate (%).
        """
        if not 1 <= months <= MAX_COHORT_MONTHS:
            raise InvalidRangeError(f"months must be between 1 and {MAX_COHORT_MONTHS}")

        current = _month_key(timezone.localdate())
        first_cohort = current - months + 1

        visits = Visit.objects.exclude(status=VisitStatus.CANCELLED).values_list('customer_id', 'check_in_at')
        months_by_customer = defaultdict(set)
        for customer_id, check_in_at in visits:
            months_by_customer[customer_id].add(_month_key(timezone.localtime(check_in_at)))

        cohorts = defaultdict(list)
        for customer_id, visit_months in months_by_customer.items():
            cohort = min(visit_months)
            if cohort >= first_cohort:
                cohorts[cohort].append(visit_months)

        results = []
        for cohort in sorted(cohorts):
            members = cohorts[cohort]
            for index in range(current - cohort + 1):
                retained = sum(1 for visit_months in members if cohort + index in visit_months)
                results.append({
                    'cohort_month': _month_label(cohort),
                    'month_index': index,
                    'retained_customers': retained,
                    'total_customers': len(members),
                    'retention_rate': round(retained / len(members) * 100, 2),
                })
        return results

    @staticmethod
    def monthly_trends(months=6, customer_id=None):
        """
        Visits, revenue and unique customers per month, oldest first.

        Months without visits are included with zeros.
        """
        if months < 1:
            raise InvalidRangeError('months must be at least 1')

        current = _month_key(timezone.localdate())
        first = current - months + 1
        start = timezone.make_aware(datetime(first // 12, first % 12 + 1, 1))

        qs = Visit.objects.exclude(status=VisitStatus.CANCELLED).filter(check_in_at__gte=start)
        if customer_id:
            qs = qs.filter(customer_id=customer_id)

        rows = (
            qs.annotate(month=TruncMonth('check_in_at'))
            .values('month')
            .annotate(
                visits=Count('id'),
                revenue=Sum('total_amount', filter=Q(status=VisitStatus.COMPLETED)),
                unique_customers=Count('customer', distinct=True),
            )
            .order_by('month')
        )
        by_month = {_month_key(row['month']): row for row in rows}

        trend = []
        for key in range(first, current + 1):
            row = by_month.get(key, {})
            trend.append({
                'month': _month_label(key),
                'visits': row.get('visits', 0),
                'revenue': row.get('revenue') or Decimal('0'),
                'unique_customers': row.get('unique_customers', 0),
            })
        return trend


class VenueAnalytics:
    """Live operational figures."""

    @staticmethod
    def dashboard_summary():
        """
        Today's sales and visits, occupied tables, bookings and the
        inventory and bottle-keep alert counts.
        """
        today = timezone.localdate()
        visits = Visit.objects.filter(check_in_at__date=today).exclude(status=VisitStatus.CANCELLED)
        sales = visits.filter(status=VisitStatus.COMPLETED).aggregate(total=Sum('total_amount'))['total']
        reservations = Reservation.objects.filter(reservation_date=today).exclude(
            status__in=[ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW]
        )

        return {
            'date': today,
            'today_sales': sales or Decimal('0'),
            'today_visits': visits.count(),
            'active_visits': visits.filter(status=VisitStatus.ACTIVE).count(),
            'active_tables': Table.objects.filter(is_active=True, current_status=TableStatus.OCCUPIED).count(),
            'total_tables': Table.objects.filter(is_active=True).count(),
            'today_reservations': reservations.count(),
            'pending_reservations': reservations.filter(status=ReservationStatus.PENDING).count(),
            'low_stock_count': low_stock_count(),
            'bottle_alert_count': bottle_alert_count(),
        }
