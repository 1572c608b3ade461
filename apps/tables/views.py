from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import HasResourcePermission
from .models import Table
from .serializers import (
    TableSerializer,
    TableInputSerializer,
    TableFilterSerializer,
    TableStatusSerializer,
    AvailableTablesQuerySerializer,
)
from .services import (
    create_table,
    update_table,
    delete_table,
    update_table_status,
    search_tables,
    available_tables,
    TableNotFoundError,
    DuplicateTableNameError,
    TableOccupiedError,
    InvalidTableStatusError,
)


class TableViewSet(viewsets.ModelViewSet):
    """
    Floor tables.

    list: Filter by status, VIP, active and capacity range
    set_status: Manual status change (available/reserved/cleaning)
    available: Tables free for a party size and optional slot
    """

    queryset = Table.objects.select_related('current_visit')
    serializer_class = TableSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    # Managers reach tables through their bookings grant
    permission_resource = ('tables', 'bookings')
    permission_action_map = {
        'create': 'manage',
        'update': 'manage',
        'partial_update': 'manage',
        'destroy': 'manage',
        'set_status': 'manage',
        'available': 'view',
    }

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = TableFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return search_tables(**filters.validated_data)

    def create(self, request, *args, **kwargs):
        serializer = TableInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            table = create_table(**serializer.validated_data)
        except DuplicateTableNameError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(TableSerializer(table).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = TableInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            table = update_table(table_id=kwargs['pk'], **serializer.validated_data)
        except TableNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateTableNameError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except TableOccupiedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TableSerializer(table).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_table(table_id=kwargs['pk'])
        except TableNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except TableOccupiedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=TableStatusSerializer, responses={200: TableSerializer})
    @action(detail=True, methods=['post'])
    def set_status(self, request, pk=None):
        serializer = TableStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            table = update_table_status(table_id=pk, status=serializer.validated_data['status'])
        except TableNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (TableOccupiedError, InvalidTableStatusError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TableSerializer(table).data)

    @extend_schema(parameters=[AvailableTablesQuerySerializer], responses={200: TableSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def available(self, request):
        query = AvailableTablesQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        tables = available_tables(
            capacity=params['capacity'],
            reservation_date=params.get('date'),
            reservation_time=params.get('time'),
        )
        return Response(TableSerializer(tables, many=True).data)
