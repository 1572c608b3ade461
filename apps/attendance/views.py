from datetime import timedelta

from django.utils import timezone
from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import HasResourcePermission, HasStaffProfile, require_permission, role_allows
from .models import AttendanceRecord, ConfirmedShift, ShiftRequest
from .serializers import (
    AttendanceRecordSerializer,
    AttendanceCorrectionSerializer,
    AttendanceFilterSerializer,
    ClockActionSerializer,
    MonthlySummaryQuerySerializer,
    MonthlySummarySerializer,
    ShiftRequestSerializer,
    ShiftRequestInputSerializer,
    ShiftRequestFilterSerializer,
    RejectShiftSerializer,
    ConfirmedShiftSerializer,
    ConfirmedShiftInputSerializer,
    ShiftFilterSerializer,
    WeekQuerySerializer,
    ScheduleDaySerializer,
    QRCodeSerializer,
    GenerateQRSerializer,
    QRScanSerializer,
    QRAttendanceLogSerializer,
    QRHistoryFilterSerializer,
    QRStatsSerializer,
)
from .services import (
    clock_action,
    today_record,
    update_record,
    attendance_records,
    monthly_summary,
    submit_shift_request,
    approve_shift_request,
    reject_shift_request,
    shift_requests,
    create_confirmed_shift,
    confirmed_shifts,
    weekly_schedule,
    generate_qr_code,
    record_qr_attendance,
    qr_stats,
    qr_history,
    active_qr_code,
    AttendanceRecordNotFoundError,
    InvalidClockActionError,
    ShiftRequestNotFoundError,
    InvalidShiftError,
    QRAttendanceError,
    QRCodeExpiredError,
    DuplicateAttendanceError,
)


class AttendancePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


# Staff members act on their own rows; managers (staff resource) on anyone's.
StaffOrManager = HasStaffProfile | require_permission('staff', 'view')


def _is_manager(user, action='view'):
    return role_allows(user, 'staff', action)


def _scoped_staff_id(request, requested):
    """Managers may look at anyone; everyone else only at themselves."""
    if _is_manager(request.user):
        return requested
    return request.user.staff.id


# ============== Clock in/out ==============

@extend_schema(request=ClockActionSerializer, responses={200: AttendanceRecordSerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated, HasStaffProfile])
def clock(request):
    """Clock in/out or start/end a break for the signed-in staff member."""
    serializer = ClockActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        record = clock_action(staff_id=request.user.staff.id, action=serializer.validated_data['action'])
    except InvalidClockActionError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(AttendanceRecordSerializer(record).data)


@extend_schema(responses={200: AttendanceRecordSerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated, HasStaffProfile])
def today(request):
    record = today_record(staff_id=request.user.staff.id)
    if record is None:
        return Response({'error': 'Not clocked in today'}, status=status.HTTP_404_NOT_FOUND)
    return Response(AttendanceRecordSerializer(record).data)


@extend_schema(parameters=[MonthlySummaryQuerySerializer], responses={200: MonthlySummarySerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated, StaffOrManager])
def summary(request):
    query = MonthlySummaryQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    data = query.validated_data

    staff_id = _scoped_staff_id(request, data.get('staff_id'))
    if staff_id is None:
        if request.user.staff is None:
            return Response({'error': 'staff_id is required'}, status=status.HTTP_400_BAD_REQUEST)
        staff_id = request.user.staff.id
    result = monthly_summary(staff_id=staff_id, year=data['year'], month=data['month'])
    return Response(MonthlySummarySerializer(result).data)


class AttendanceRecordViewSet(mixins.ListModelMixin,
                              mixins.RetrieveModelMixin,
                              viewsets.GenericViewSet):
    """
    Attendance records.

    Managers see everybody and may correct records; other staff see only
    their own.
    """

    queryset = AttendanceRecord.objects.select_related('staff')
    serializer_class = AttendanceRecordSerializer
    permission_classes = [IsAuthenticated, StaffOrManager]
    pagination_class = AttendancePagination
    permission_resource = 'staff'

    def get_permissions(self):
        if self.action == 'partial_update':
            return [IsAuthenticated(), HasResourcePermission()]
        return super().get_permissions()

    def get_queryset(self):
        if self.action == 'list':
            filters = AttendanceFilterSerializer(data=self.request.query_params)
            filters.is_valid(raise_exception=True)
            data = dict(filters.validated_data)
            data['staff_id'] = _scoped_staff_id(self.request, data.get('staff_id'))
            return attendance_records(**data)

        qs = super().get_queryset()
        if not _is_manager(self.request.user):
            qs = qs.filter(staff=self.request.user.staff)
        return qs

    @extend_schema(request=AttendanceCorrectionSerializer, responses={200: AttendanceRecordSerializer})
    def partial_update(self, request, *args, **kwargs):
        serializer = AttendanceCorrectionSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            record = update_record(record_id=kwargs['pk'], **serializer.validated_data)
        except AttendanceRecordNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(AttendanceRecordSerializer(record).data)


# ============== Shifts ==============

class ShiftRequestViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          viewsets.GenericViewSet):
    """Staff submit availability; managers approve or reject it."""

    queryset = ShiftRequest.objects.select_related('staff')
    serializer_class = ShiftRequestSerializer
    permission_classes = [IsAuthenticated, StaffOrManager]
    pagination_class = AttendancePagination
    permission_resource = 'staff'
    permission_action_map = {'approve': 'edit', 'reject': 'edit'}

    def get_permissions(self):
        if self.action in ('approve', 'reject'):
            return [IsAuthenticated(), HasResourcePermission()]
        if self.action == 'create':
            return [IsAuthenticated(), HasStaffProfile()]
        return super().get_permissions()

    def get_queryset(self):
        if self.action == 'list':
            filters = ShiftRequestFilterSerializer(data=self.request.query_params)
            filters.is_valid(raise_exception=True)
            data = dict(filters.validated_data)
            data['staff_id'] = _scoped_staff_id(self.request, data.get('staff_id'))
            return shift_requests(**data)

        qs = super().get_queryset()
        if self.action == 'retrieve' and not _is_manager(self.request.user):
            qs = qs.filter(staff=self.request.user.staff)
        return qs

    @extend_schema(request=ShiftRequestInputSerializer, responses={201: ShiftRequestSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ShiftRequestInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            shift_request = submit_shift_request(staff_id=request.user.staff.id, **serializer.validated_data)
        except InvalidShiftError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ShiftRequestSerializer(shift_request).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: ConfirmedShiftSerializer})
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        try:
            shift = approve_shift_request(request_id=pk, reviewed_by=request.user)
        except ShiftRequestNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidShiftError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(ConfirmedShiftSerializer(shift).data)

    @extend_schema(request=RejectShiftSerializer, responses={200: ShiftRequestSerializer})
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        serializer = RejectShiftSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            shift_request = reject_shift_request(
                request_id=pk, reason=serializer.validated_data['reason'], reviewed_by=request.user
            )
        except ShiftRequestNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidShiftError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(ShiftRequestSerializer(shift_request).data)


class ConfirmedShiftViewSet(mixins.ListModelMixin,
                            mixins.RetrieveModelMixin,
                            viewsets.GenericViewSet):
    queryset = ConfirmedShift.objects.select_related('staff')
    serializer_class = ConfirmedShiftSerializer
    permission_classes = [IsAuthenticated, StaffOrManager]
    pagination_class = AttendancePagination
    permission_resource = 'staff'
    permission_action_map = {'create': 'edit'}

    def get_permissions(self):
        if self.action == 'create':
            return [IsAuthenticated(), HasResourcePermission()]
        return super().get_permissions()

    def get_queryset(self):
        if self.action == 'list':
            filters = ShiftFilterSerializer(data=self.request.query_params)
            filters.is_valid(raise_exception=True)
            data = dict(filters.validated_data)
            data['staff_id'] = _scoped_staff_id(self.request, data.get('staff_id'))
            return confirmed_shifts(**data)
        return super().get_queryset()

    @extend_schema(request=ConfirmedShiftInputSerializer, responses={201: ConfirmedShiftSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ConfirmedShiftInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        staff = data.pop('staff')

        try:
            shift = create_confirmed_shift(staff_id=staff.id, **data)
        except InvalidShiftError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(ConfirmedShiftSerializer(shift).data, status=status.HTTP_201_CREATED)

    @extend_schema(parameters=[WeekQuerySerializer], responses={200: ScheduleDaySerializer(many=True)})
    @action(detail=False, methods=['get'])
    def weekly(self, request):
        """Seven-day schedule; defaults to the current week starting Monday."""
        query = WeekQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        week_start = query.validated_data.get('week_start')
        if week_start is None:
            today_date = timezone.localdate()
            week_start = today_date - timedelta(days=today_date.weekday())
        days = weekly_schedule(week_start=week_start)
        return Response(ScheduleDaySerializer(days, many=True).data)


# ============== QR attendance ==============

@extend_schema(request=GenerateQRSerializer, responses={201: QRCodeSerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated, StaffOrManager])
def generate_qr(request):
    """Issue a QR code. Managers may issue one for any staff member."""
    serializer = GenerateQRSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    own = request.user.staff
    target = data.get('staff') or own
    if target is None:
        return Response({'error': 'staff is required'}, status=status.HTTP_400_BAD_REQUEST)
    if target != own and not _is_manager(request.user, 'edit'):
        return Response(
            {'error': 'Your role does not allow this operation.'}, status=status.HTTP_403_FORBIDDEN
        )

    qr_code = generate_qr_code(
        staff_id=target.id,
        expires_in_minutes=data.get('expires_in_minutes'),
        created_by=request.user,
    )
    return Response(QRCodeSerializer(qr_code).data, status=status.HTTP_201_CREATED)


@extend_schema(responses={200: QRCodeSerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated, HasStaffProfile])
def my_qr(request):
    qr_code = active_qr_code(staff_id=request.user.staff.id)
    if qr_code is None:
        return Response({'error': 'No active QR code'}, status=status.HTTP_404_NOT_FOUND)
    return Response(QRCodeSerializer(qr_code).data)


@extend_schema(request=QRScanSerializer, responses={200: AttendanceRecordSerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def scan_qr(request):
    """Apply a clock action from a scanned code (scanner terminal)."""
    serializer = QRScanSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        record = record_qr_attendance(**serializer.validated_data)
    except QRCodeExpiredError as e:
        return Response({'error': str(e)}, status=status.HTTP_410_GONE)
    except DuplicateAttendanceError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
    except QRAttendanceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(AttendanceRecordSerializer(record).data)


@extend_schema(responses={200: QRStatsSerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated, require_permission('staff', 'view')])
def get_qr_stats(request):
    return Response(QRStatsSerializer(qr_stats()).data)


@extend_schema(parameters=[QRHistoryFilterSerializer], responses={200: QRAttendanceLogSerializer(many=True)})
@api_view(['GET'])
@permission_classes([IsAuthenticated, StaffOrManager])
def get_qr_history(request):
    filters = QRHistoryFilterSerializer(data=request.query_params)
    filters.is_valid(raise_exception=True)
    data = dict(filters.validated_data)
    data['staff_id'] = _scoped_staff_id(request, data.get('staff_id'))

    paginator = AttendancePagination()
    page = paginator.paginate_queryset(qr_history(**data), request)
    return paginator.get_paginated_response(QRAttendanceLogSerializer(page, many=True).data)
