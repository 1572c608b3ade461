from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import serializers as drf_serializers

from apps.accounts.permissions import HasResourcePermission
from .models import Reservation
from .serializers import (
    ReservationSerializer,
    ReservationInputSerializer,
    ReservationFilterSerializer,
    CheckInSerializer,
    CancelSerializer,
    AvailabilityQuerySerializer,
)
from .services import (
    create_reservation,
    update_reservation,
    confirm_reservation,
    check_in_reservation,
    complete_reservation,
    cancel_reservation,
    mark_no_show,
    search_reservations,
    today_reservations,
    check_availability,
    ReservationNotFoundError,
    TableNotAvailableError,
    InvalidReservationTransitionError,
    CapacityExceededError,
)


class ReservationPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _error_response(exc):
    if isinstance(exc, ReservationNotFoundError):
        return Response({'error': str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, TableNotAvailableError):
        return Response({'error': str(exc)}, status=status.HTTP_409_CONFLICT)
    return Response({'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class ReservationViewSet(mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    """
    Table bookings.

    Status flow: pending -> confirmed -> checked_in -> completed, with
    cancel (any open state) and no_show (pending/confirmed) side exits.
    """

    queryset = Reservation.objects.select_related('customer', 'table', 'assigned_cast')
    serializer_class = ReservationSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = ReservationPagination
    permission_resource = 'bookings'
    permission_action_map = {
        'confirm': 'edit',
        'check_in': 'edit',
        'complete': 'edit',
        'cancel': 'edit',
        'no_show': 'edit',
        'availability': 'view',
        'today': 'view',
        'create': 'manage',
    }

    ERRORS = (
        ReservationNotFoundError,
        TableNotAvailableError,
        InvalidReservationTransitionError,
        CapacityExceededError,
    )

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = ReservationFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return search_reservations(**filters.validated_data)

    @extend_schema(request=ReservationInputSerializer, responses={201: ReservationSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ReservationInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            reservation = create_reservation(created_by=request.user, **serializer.to_service_kwargs())
        except self.ERRORS as e:
            return _error_response(e)

        return Response(ReservationSerializer(reservation).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ReservationInputSerializer, responses={200: ReservationSerializer})
    def partial_update(self, request, *args, **kwargs):
        serializer = ReservationInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            reservation = update_reservation(
                reservation_id=kwargs['pk'], updated_by=request.user, **serializer.to_service_kwargs()
            )
        except self.ERRORS as e:
            return _error_response(e)

        return Response(ReservationSerializer(reservation).data)

    @action(detail=True, methods=['post'])
    def confirm(self, request, pk=None):
        try:
            reservation = confirm_reservation(reservation_id=pk, updated_by=request.user)
        except self.ERRORS as e:
            return _error_response(e)
        return Response(ReservationSerializer(reservation).data)

    @extend_schema(request=CheckInSerializer, responses={200: ReservationSerializer})
    @action(detail=True, methods=['post'])
    def check_in(self, request, pk=None):
        serializer = CheckInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            reservation = check_in_reservation(
                reservation_id=pk,
                table_id=serializer.validated_data['table'].id,
                updated_by=request.user,
            )
        except self.ERRORS as e:
            return _error_response(e)
        return Response(ReservationSerializer(reservation).data)

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        try:
            reservation = complete_reservation(reservation_id=pk, updated_by=request.user)
        except self.ERRORS as e:
            return _error_response(e)
        return Response(ReservationSerializer(reservation).data)

    @extend_schema(request=CancelSerializer, responses={200: ReservationSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        serializer = CancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            reservation = cancel_reservation(
                reservation_id=pk,
                reason=serializer.validated_data['reason'],
                updated_by=request.user,
            )
        except self.ERRORS as e:
            return _error_response(e)
        return Response(ReservationSerializer(reservation).data)

    @action(detail=True, methods=['post'])
    def no_show(self, request, pk=None):
        try:
            reservation = mark_no_show(reservation_id=pk, updated_by=request.user)
        except self.ERRORS as e:
            return _error_response(e)
        return Response(ReservationSerializer(reservation).data)

    @extend_schema(
        parameters=[AvailabilityQuerySerializer],
        responses={200: inline_serializer('AvailabilityResponse', {'available': drf_serializers.BooleanField()})},
    )
    @action(detail=False, methods=['get'])
    def availability(self, request):
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        available = check_availability(
            table_id=params['table_id'],
            reservation_date=params['date'],
            reservation_time=params['time'],
            exclude_id=params.get('exclude_id'),
        )
        return Response({'available': available})

    @action(detail=False, methods=['get'])
    def today(self, request):
        return Response(ReservationSerializer(today_reservations(), many=True).data)
