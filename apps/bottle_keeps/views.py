from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import HasResourcePermission
from .models import BottleKeep
from .serializers import (
    BottleKeepSerializer,
    BottleKeepDetailSerializer,
    BottleKeepInputSerializer,
    BottleKeepFilterSerializer,
    ServeBottleSerializer,
    MoveBottleSerializer,
    CustomerQuerySerializer,
    BottleKeepStatsSerializer,
    BottleKeepAlertSerializer,
    CustomerSummarySerializer,
    ExpiryManagementSerializer,
    LocationInventorySerializer,
)
from .services import (
    create_bottle_keep,
    update_bottle_keep,
    delete_bottle_keep,
    serve_bottle,
    move_bottle,
    update_expired_bottles,
    search_bottle_keeps,
    storage_locations,
    bottle_keep_stats,
    bottle_keep_alerts,
    customer_summary,
    expiry_management,
    inventory_by_location,
    BottleKeepNotFoundError,
    BottleNotActiveError,
)


class BottleKeepPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class BottleKeepViewSet(viewsets.ModelViewSet):
    """
    Customer bottles kept at the venue.

    Access is granted through either the inventory or the customers
    resource of the role matrix.
    """

    queryset = BottleKeep.objects.select_related('customer', 'product')
    serializer_class = BottleKeepSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = BottleKeepPagination
    permission_resource = ('inventory', 'customers')
    permission_action_map = {
        'serve': 'edit',
        'move': 'edit',
        'update_expired': 'edit',
        'stats': 'view',
        'alerts': 'view',
        'expiry': 'view',
        'locations': 'view',
        'by_location': 'view',
        'customer_summary': 'view',
    }

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return BottleKeepDetailSerializer
        return BottleKeepSerializer

    def get_queryset(self):
        if self.action == 'retrieve':
            return super().get_queryset().prefetch_related('usages', 'movements')
        if self.action != 'list':
            return super().get_queryset()
        filters = BottleKeepFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return search_bottle_keeps(**filters.validated_data)

    @extend_schema(request=BottleKeepInputSerializer, responses={201: BottleKeepSerializer})
    def create(self, request, *args, **kwargs):
        serializer = BottleKeepInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        bottle = create_bottle_keep(**serializer.to_service_kwargs())
        return Response(BottleKeepSerializer(bottle).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=BottleKeepInputSerializer, responses={200: BottleKeepSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = BottleKeepInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            bottle = update_bottle_keep(bottle_keep_id=kwargs['pk'], **serializer.to_service_kwargs())
        except BottleKeepNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(BottleKeepSerializer(bottle).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_bottle_keep(bottle_keep_id=kwargs['pk'])
        except BottleKeepNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ServeBottleSerializer, responses={200: BottleKeepSerializer})
    @action(detail=True, methods=['post'])
    def serve(self, request, pk=None):
        serializer = ServeBottleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            bottle = serve_bottle(bottle_keep_id=pk, served_by=request.user, **serializer.validated_data)
        except BottleKeepNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except BottleNotActiveError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(BottleKeepSerializer(bottle).data)

    @extend_schema(request=MoveBottleSerializer, responses={200: BottleKeepSerializer})
    @action(detail=True, methods=['post'])
    def move(self, request, pk=None):
        serializer = MoveBottleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            bottle = move_bottle(bottle_keep_id=pk, moved_by=request.user, **serializer.validated_data)
        except BottleKeepNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except BottleNotActiveError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(BottleKeepSerializer(bottle).data)

    @extend_schema(responses={200: BottleKeepStatsSerializer})
    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response(BottleKeepStatsSerializer(bottle_keep_stats()).data)

    @extend_schema(responses={200: BottleKeepAlertSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def alerts(self, request):
        return Response(BottleKeepAlertSerializer(bottle_keep_alerts(), many=True).data)

    @extend_schema(responses={200: ExpiryManagementSerializer})
    @action(detail=False, methods=['get'])
    def expiry(self, request):
        return Response(ExpiryManagementSerializer(expiry_management()).data)

    @action(detail=False, methods=['get'])
    def locations(self, request):
        return Response(storage_locations())

    @extend_schema(responses={200: LocationInventorySerializer(many=True)})
    @action(detail=False, methods=['get'], url_path='by-location')
    def by_location(self, request):
        return Response(LocationInventorySerializer(inventory_by_location(), many=True).data)

    @extend_schema(parameters=[CustomerQuerySerializer], responses={200: CustomerSummarySerializer})
    @action(detail=False, methods=['get'], url_path='customer-summary')
    def customer_summary(self, request):
        query = CustomerQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        summary = customer_summary(customer_id=query.validated_data['customer_id'])
        return Response(CustomerSummarySerializer(summary).data)

    @action(detail=False, methods=['post'], url_path='update-expired')
    def update_expired(self, request):
        return Response({'updated': update_expired_bottles()})
