from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.accounts.permissions import HasResourcePermission, require_permission, role_allows
from apps.visits.serializers import VisitSerializer
from apps.visits.services import GuestNotFoundError, VisitNotFoundError
from .models import OrderItem
from .serializers import (
    OrderItemSerializer,
    OrderItemCreateSerializer,
    OrderItemUpdateSerializer,
    OrderItemFilterSerializer,
    BillSerializer,
    PaymentSerializer,
    DateQuerySerializer,
    DailyReportSerializer,
    DailyClosingSerializer,
    GuestOrderSerializer,
    SplitOrderItemSerializer,
    GuestBillSerializer,
    SplitBillSerializer,
)
from .services import (
    add_order_item,
    update_order_item,
    remove_order_item,
    visit_order_items,
    calculate_bill,
    process_payment,
    daily_report,
    open_visit_count,
    is_closed,
    perform_daily_closing,
    split_order_item,
    clear_order_item_shares,
    guest_bill,
    split_bill,
    OrderItemNotFoundError,
    VisitClosedError,
    ProductUnavailableError,
    DailyClosingError,
    InvalidSplitError,
)


def _report_date(request):
    query = DateQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    return query.validated_data.get('date') or timezone.localdate()


class OrderItemViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       viewsets.GenericViewSet):
    """
    Items ordered on a visit. Listing requires ``?visit_id=``.

    split: POST charges the item to guests by percentage, DELETE hands it
    back to the primary payer.
    """

    queryset = OrderItem.objects.select_related('product', 'cast')
    serializer_class = OrderItemSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    permission_resource = 'billing'
    permission_action_map = {
        'create': 'manage',
        'partial_update': 'manage',
        'destroy': 'manage',
        'split': 'manage',
    }

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = OrderItemFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return visit_order_items(**filters.validated_data)

    @extend_schema(request=OrderItemCreateSerializer, responses={201: OrderItemSerializer})
    def create(self, request, *args, **kwargs):
        serializer = OrderItemCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            order_item = add_order_item(
                visit_id=data['visit_id'],
                product_id=data['product'].id,
                quantity=data['quantity'],
                unit_price=data.get('unit_price'),
                cast_id=data['cast'].id if data.get('cast') else None,
                notes=data.get('notes', ''),
                created_by=request.user,
            )
        except VisitNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (VisitClosedError, ProductUnavailableError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderItemSerializer(order_item).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=OrderItemUpdateSerializer, responses={200: OrderItemSerializer})
    def partial_update(self, request, *args, **kwargs):
        serializer = OrderItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order_item = update_order_item(
                order_item_id=kwargs['pk'], updated_by=request.user, **serializer.validated_data
            )
        except OrderItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (VisitClosedError, ProductUnavailableError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderItemSerializer(order_item).data)

    def destroy(self, request, *args, **kwargs):
        try:
            remove_order_item(order_item_id=kwargs['pk'], removed_by=request.user)
        except OrderItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (VisitClosedError, ProductUnavailableError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=SplitOrderItemSerializer, responses={200: GuestOrderSerializer(many=True)})
    @action(detail=True, methods=['post', 'delete'])
    def split(self, request, pk=None):
        if request.method == 'DELETE':
            try:
                clear_order_item_shares(order_item_id=pk)
            except OrderItemNotFoundError as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            except VisitClosedError as e:
                return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = SplitOrderItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        shares = [
            {'guest_id': share['guest'], 'percentage': share['percentage']}
            for share in serializer.validated_data['shares']
        ]

        try:
            created = split_order_item(order_item_id=pk, shares=shares)
        except OrderItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (VisitClosedError, InvalidSplitError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(GuestOrderSerializer(created, many=True).data)


@extend_schema(responses={200: BillSerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated, require_permission('billing', 'view')])
def visit_bill(request, visit_id):
    """Current bill of a visit."""
    try:
        bill = calculate_bill(visit_id=visit_id)
    except VisitNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(BillSerializer(bill).data)


@extend_schema(responses={200: SplitBillSerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated, require_permission('billing', 'view')])
def visit_split_bill(request, visit_id):
    """Individual bills for every guest of a visit."""
    try:
        bill = split_bill(visit_id=visit_id)
    except VisitNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(SplitBillSerializer(bill).data)


@extend_schema(responses={200: GuestBillSerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated, require_permission('billing', 'view')])
def get_guest_bill(request, guest_id):
    """One guest's share of the bill."""
    try:
        bill = guest_bill(guest_id=guest_id)
    except GuestNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(GuestBillSerializer(bill).data)


@extend_schema(request=PaymentSerializer, responses={200: VisitSerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated, require_permission('billing', 'process')])
def pay_visit(request, visit_id):
    """Settle a visit and free its table."""
    serializer = PaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        visit = process_payment(visit_id=visit_id, **serializer.validated_data)
    except VisitNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except VisitClosedError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(VisitSerializer(visit).data)


@extend_schema(parameters=[DateQuerySerializer], responses={200: DailyReportSerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated, require_permission(('billing', 'reports'), 'view')])
def get_daily_report(request):
    """Sales report for ``?date=`` (today by default)."""
    report = daily_report(report_date=_report_date(request))
    return Response(DailyReportSerializer(report).data)


@extend_schema(parameters=[DateQuerySerializer])
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, require_permission('billing', 'view')])
def daily_closing(request):
    """
    GET: closing status for a date.
    POST: close the register (billing manage required).
    """
    closing_date = _report_date(request)

    if request.method == 'GET':
        return Response({
            'date': closing_date,
            'is_closed': is_closed(closing_date=closing_date),
            'open_visits': open_visit_count(report_date=closing_date),
        })

    if not role_allows(request.user, 'billing', 'manage'):
        return Response(
            {'error': 'Your role does not allow this operation.'},
            status=status.HTTP_403_FORBIDDEN,
        )

    try:
        closing = perform_daily_closing(closing_date=closing_date, closed_by=request.user)
    except DailyClosingError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(DailyClosingSerializer(closing).data, status=status.HTTP_201_CREATED)
