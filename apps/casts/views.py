from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import HasResourcePermission, IsCastUser, require_permission
from .models import CastProfile
from .serializers import (
    CastProfileSerializer,
    CastOwnProfileSerializer,
    CastInputSerializer,
    CastPerformanceSerializer,
    PerformanceInputSerializer,
    PeriodQuerySerializer,
    HistoryQuerySerializer,
    CastRankingSerializer,
    CompensationSerializer,
)
from .services import (
    get_cast_for_user,
    create_cast_profile,
    update_cast_profile,
    deactivate_cast,
    search_casts,
    record_performance,
    performance_history,
    cast_ranking,
    calculate_compensation,
    calculate_all_compensations,
    CastNotFoundError,
    CastProfileExistsError,
    NotCastStaffError,
)


class CastPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class CastViewSet(mixins.ListModelMixin,
                  mixins.RetrieveModelMixin,
                  viewsets.GenericViewSet):
    """
    Cast profiles, performance and pay estimates.

    Management endpoints are gated by the staff resource; ranking is also
    open to casts, and ``me`` is the cast's own profile.
    """

    queryset = CastProfile.objects.select_related('staff')
    serializer_class = CastProfileSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = CastPagination
    permission_resource = 'staff'
    permission_action_map = {
        'create': 'manage',
        'destroy': 'manage',
        'performances': 'view',
        'compensation': 'view',
        'compensations': 'view',
    }

    def get_permissions(self):
        if self.action == 'ranking':
            return [IsAuthenticated(), require_permission(('staff', 'performance', 'reports'), 'view')()]
        if self.action in ('me', 'my_performance'):
            return [IsAuthenticated(), IsCastUser()]
        if self.action == 'performances' and self.request.method == 'POST':
            return [IsAuthenticated(), require_permission('staff', 'edit')()]
        return super().get_permissions()

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        query = self.request.query_params.get('query', '')
        is_active = self.request.query_params.get('is_active')
        return search_casts(
            query=query,
            is_active=None if is_active is None else is_active in ('true', '1'),
        )

    @extend_schema(request=CastInputSerializer, responses={201: CastProfileSerializer})
    def create(self, request, *args, **kwargs):
        serializer = CastInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        staff = data.pop('staff', None)
        if staff is None:
            return Response({'error': 'staff is required'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            cast = create_cast_profile(staff_id=staff.id, created_by=request.user, **data)
        except NotCastStaffError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except CastProfileExistsError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(CastProfileSerializer(cast).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=CastInputSerializer, responses={200: CastProfileSerializer})
    def partial_update(self, request, *args, **kwargs):
        serializer = CastInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('staff', None)

        try:
            cast = update_cast_profile(cast_id=kwargs['pk'], updated_by=request.user, **data)
        except CastNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(CastProfileSerializer(cast).data)

    def destroy(self, request, *args, **kwargs):
        try:
            deactivate_cast(cast_id=kwargs['pk'], updated_by=request.user)
        except CastNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=PerformanceInputSerializer, responses={200: CastPerformanceSerializer(many=True)})
    @action(detail=True, methods=['get', 'post'])
    def performances(self, request, pk=None):
        """GET: performance history. POST: record (upsert) a day's figures."""
        if request.method == 'POST':
            serializer = PerformanceInputSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            try:
                performance = record_performance(
                    cast_id=pk, created_by=request.user, **serializer.validated_data
                )
            except CastNotFoundError as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            return Response(CastPerformanceSerializer(performance).data, status=status.HTTP_201_CREATED)

        cast = self.get_object()
        query = HistoryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        history = performance_history(cast_id=cast.id, **query.validated_data)
        return Response(CastPerformanceSerializer(history, many=True).data)

    @extend_schema(parameters=[PeriodQuerySerializer], responses={200: CastRankingSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def ranking(self, request):
        query = PeriodQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        rows = cast_ranking(**query.validated_data)
        return Response(CastRankingSerializer(rows, many=True).data)

    @extend_schema(parameters=[PeriodQuerySerializer], responses={200: CompensationSerializer})
    @action(detail=True, methods=['get'])
    def compensation(self, request, pk=None):
        query = PeriodQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        try:
            result = calculate_compensation(
                cast_id=pk,
                start_date=query.validated_data['start_date'],
                end_date=query.validated_data['end_date'],
            )
        except CastNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(CompensationSerializer(result).data)

    @extend_schema(parameters=[PeriodQuerySerializer], responses={200: CompensationSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def compensations(self, request):
        query = PeriodQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        results = calculate_all_compensations(
            start_date=query.validated_data['start_date'],
            end_date=query.validated_data['end_date'],
        )
        return Response(CompensationSerializer(results, many=True).data)

    @extend_schema(request=CastOwnProfileSerializer, responses={200: CastProfileSerializer})
    @action(detail=False, methods=['get', 'patch'])
    def me(self, request):
        """The signed-in cast's own profile."""
        try:
            cast = get_cast_for_user(request.user)
        except CastNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        if request.method == 'PATCH':
            serializer = CastOwnProfileSerializer(data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            cast = update_cast_profile(
                cast_id=cast.id, updated_by=request.user, own_profile=True, **serializer.validated_data
            )

        return Response(CastProfileSerializer(cast).data)

    @action(detail=False, methods=['get'], url_path='me/performance')
    def my_performance(self, request):
        try:
            cast = get_cast_for_user(request.user)
        except CastNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        history = performance_history(cast_id=cast.id)[:60]
        return Response(CastPerformanceSerializer(history, many=True).data)
