from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from rest_framework import status
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import require_permission
from .analytics import CustomerAnalytics, VenueAnalytics
from .serializers import (
    # Input serializers
    CustomerMetricsQuerySerializer,
    RFMQuerySerializer,
    MonthsQuerySerializer,
    CohortQuerySerializer,
    # Response serializers
    CustomerMetricsSerializer,
    CustomerDetailSerializer,
    CustomerRFMSerializer,
    AnalyticsSummarySerializer,
    CohortSerializer,
    TrendPointSerializer,
    DashboardSerializer,
    ErrorSerializer,
)
from .exceptions import CustomerNotFoundError, InvalidRangeError

CanViewReports = require_permission('reports', 'view')

# Every role that runs the floor sees the dashboard.
CanViewDashboard = require_permission(('reports', 'bookings', 'billing', 'tables', 'inventory'), 'view')


class AnalyticsPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _paginated(request, rows, serializer_class):
    paginator = AnalyticsPagination()
    page = paginator.paginate_queryset(rows, request)
    return paginator.get_paginated_response(serializer_class(page, many=True).data)


@extend_schema(
    parameters=[CustomerMetricsQuerySerializer],
    responses={200: CustomerMetricsSerializer(many=True)},
    description='Per-customer visit, revenue and retention metrics, highest revenue first.',
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def customer_metrics(request):
    query = CustomerMetricsQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    rows = CustomerAnalytics.metrics(**query.validated_data)
    return _paginated(request, rows, CustomerMetricsSerializer)


@extend_schema(
    parameters=[MonthsQuerySerializer],
    responses={200: CustomerDetailSerializer, 404: ErrorSerializer},
    description='Metrics, RFM score, churn probability, lifetime value and monthly trend of one customer.',
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def customer_detail(request, customer_id):
    query = MonthsQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    try:
        detail = CustomerAnalytics.customer_detail(customer_id, months=query.validated_data['months'])
    except CustomerNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(CustomerDetailSerializer(detail).data)


@extend_schema(
    parameters=[RFMQuerySerializer],
    responses={200: CustomerRFMSerializer(many=True)},
    description='RFM scores of customers who visited in the period.',
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def rfm(request):
    query = RFMQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    rows = CustomerAnalytics.rfm_analysis(**query.validated_data)
    return _paginated(request, rows, CustomerRFMSerializer)


@extend_schema(responses={200: AnalyticsSummarySerializer}, tags=['analytics'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def summary(request):
    return Response(AnalyticsSummarySerializer(CustomerAnalytics.summary()).data)


@extend_schema(
    responses={200: CustomerMetricsSerializer(many=True)},
    description='Customers in the High Risk or Medium Risk bucket.',
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def at_risk(request):
    return _paginated(request, CustomerAnalytics.at_risk_customers(), CustomerMetricsSerializer)


@extend_schema(
    responses={200: CustomerMetricsSerializer(many=True)},
    description='VIP and Premium customers.',
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def vip(request):
    return _paginated(request, CustomerAnalytics.vip_customers(), CustomerMetricsSerializer)


@extend_schema(
    parameters=[CohortQuerySerializer],
    responses={200: CohortSerializer(many=True), 400: ErrorSerializer},
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def cohorts(request):
    query = CohortQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    try:
        rows = CustomerAnalytics.cohort_analysis(months=query.validated_data['months'])
    except InvalidRangeError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(CohortSerializer(rows, many=True).data)


@extend_schema(
    parameters=[MonthsQuerySerializer],
    responses={200: TrendPointSerializer(many=True)},
    description='Visits, revenue and unique customers per month.',
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def trends(request):
    query = MonthsQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    rows = CustomerAnalytics.monthly_trends(months=query.validated_data['months'])
    return Response(TrendPointSerializer(rows, many=True).data)


@extend_schema(
    responses={200: DashboardSerializer},
    description="Today's sales, visits, occupied tables, bookings and stock/bottle alert counts.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewDashboard])
def dashboard(request):
    return Response(DashboardSerializer(VenueAnalytics.dashboard_summary()).data)
