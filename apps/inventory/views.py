from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import HasResourcePermission
from .models import Product, InventoryMovement
from .serializers import (
    ProductSerializer,
    ProductInputSerializer,
    ProductFilterSerializer,
    InventoryMovementSerializer,
    MovementInputSerializer,
    MovementFilterSerializer,
    BulkMovementSerializer,
    BulkDeleteSerializer,
    BulkResultSerializer,
    PeriodQuerySerializer,
    InventoryAlertSerializer,
    ReorderSuggestionSerializer,
    ProductReportSerializer,
    InventoryStatsSerializer,
)
from .services import (
    create_product,
    update_product,
    delete_product,
    bulk_delete_products,
    search_products,
    product_categories,
    record_movement,
    bulk_movement,
    movement_history,
    inventory_stats,
    inventory_alerts,
    product_report,
    movement_report,
    reorder_suggestions,
    ProductNotFoundError,
    InsufficientStockError,
    InvalidMovementError,
)


class InventoryPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product catalogue and stock.

    Deleting a product deactivates it. Stock only changes through the
    ``movements`` action or the bulk endpoints.
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = InventoryPagination
    permission_resource = 'inventory'
    permission_action_map = {
        'create': 'manage',
        'destroy': 'manage',
        'movements': 'edit',
        'report': 'view',
        'stats': 'view',
        'alerts': 'view',
        'reorder': 'view',
        'categories': 'view',
        'movement_report': 'view',
        'bulk_movement': 'edit',
        'bulk_delete': 'manage',
    }

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = ProductFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        params = dict(filters.validated_data)
        if params.get('is_active') is None:
            params['is_active'] = True
        return search_products(**params)

    @extend_schema(request=ProductInputSerializer, responses={201: ProductSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = create_product(created_by=request.user, **serializer.validated_data)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ProductInputSerializer, responses={200: ProductSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = ProductInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            product = update_product(
                product_id=kwargs['pk'], updated_by=request.user, **serializer.validated_data
            )
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(ProductSerializer(product).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_product(product_id=kwargs['pk'], updated_by=request.user)
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        methods=['POST'], request=MovementInputSerializer, responses={201: InventoryMovementSerializer}
    )
    @action(detail=True, methods=['get', 'post'])
    def movements(self, request, pk=None):
        """GET: movement history of the product. POST: record a movement."""
        if request.method == 'GET':
            product = self.get_object()
            qs = movement_history(product_id=product.id)
            page = self.paginate_queryset(qs)
            if page is not None:
                return self.get_paginated_response(InventoryMovementSerializer(page, many=True).data)
            return Response(InventoryMovementSerializer(qs, many=True).data)

        serializer = MovementInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            movement = record_movement(
                product_id=pk, created_by=request.user, **serializer.validated_data
            )
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (InsufficientStockError, InvalidMovementError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(InventoryMovementSerializer(movement).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ProductReportSerializer})
    @action(detail=True, methods=['get'])
    def report(self, request, pk=None):
        try:
            data = product_report(product_id=pk)
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(ProductReportSerializer(data).data)

    @extend_schema(responses={200: InventoryStatsSerializer})
    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response(InventoryStatsSerializer(inventory_stats()).data)

    @extend_schema(responses={200: InventoryAlertSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def alerts(self, request):
        return Response(InventoryAlertSerializer(inventory_alerts(), many=True).data)

    @extend_schema(responses={200: ReorderSuggestionSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def reorder(self, request):
        return Response(ReorderSuggestionSerializer(reorder_suggestions(), many=True).data)

    @action(detail=False, methods=['get'])
    def categories(self, request):
        return Response(product_categories())

    @extend_schema(parameters=[PeriodQuerySerializer])
    @action(detail=False, methods=['get'], url_path='movement-report')
    def movement_report(self, request):
        query = PeriodQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(movement_report(**query.validated_data))

    @extend_schema(request=BulkMovementSerializer, responses={200: BulkResultSerializer})
    @action(detail=False, methods=['post'], url_path='bulk-movement')
    def bulk_movement(self, request):
        serializer = BulkMovementSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = bulk_movement(rows=serializer.validated_data['movements'], created_by=request.user)
        return Response(result)

    @extend_schema(request=BulkDeleteSerializer, responses={200: BulkResultSerializer})
    @action(detail=False, methods=['post'], url_path='bulk-delete')
    def bulk_delete(self, request):
        serializer = BulkDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = bulk_delete_products(
            product_ids=serializer.validated_data['product_ids'], updated_by=request.user
        )
        return Response(result)


class InventoryMovementViewSet(viewsets.ReadOnlyModelViewSet):
    """Stock movement log across all products."""

    queryset = InventoryMovement.objects.select_related('product')
    serializer_class = InventoryMovementSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = InventoryPagination
    permission_resource = 'inventory'

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = MovementFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return movement_history(**filters.validated_data)
