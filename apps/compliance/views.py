from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import HasResourcePermission
from .models import Complaint, ComplianceReport, IdVerification, ReportType
from .serializers import (
    IdVerificationSerializer,
    IdVerificationInputSerializer,
    IdVerificationFilterSerializer,
    ComplaintSerializer,
    ComplaintInputSerializer,
    ComplaintFilterSerializer,
    ResolveComplaintSerializer,
    ComplianceReportSerializer,
    GenerateReportSerializer,
    ReportStatusSerializer,
    ReportFilterSerializer,
    ComplianceStatsSerializer,
)
from .services import (
    create_id_verification,
    verify_id,
    id_verifications,
    create_complaint,
    resolve_complaint,
    complaints,
    generate_employee_list,
    generate_complaint_log,
    update_report_status,
    list_reports,
    compliance_stats,
    VerificationNotFoundError,
    AlreadyVerifiedError,
    ComplaintNotFoundError,
    ComplaintAlreadyResolvedError,
    ReportNotFoundError,
    InvalidReportStatusError,
)

GENERATORS = {
    ReportType.EMPLOYEE_LIST.value: generate_employee_list,
    ReportType.COMPLAINT_LOG.value: generate_complaint_log,
}


class CompliancePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class IdVerificationViewSet(mixins.ListModelMixin,
                            mixins.RetrieveModelMixin,
                            viewsets.GenericViewSet):
    """Identity document checks. Door staff record them, anyone with customer edit rights verifies."""

    queryset = IdVerification.objects.select_related('customer', 'verified_by')
    serializer_class = IdVerificationSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = CompliancePagination
    permission_resource = 'customers'
    permission_action_map = {'create': 'edit', 'verify': 'edit'}

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = IdVerificationFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return id_verifications(**filters.validated_data)

    @extend_schema(request=IdVerificationInputSerializer, responses={201: IdVerificationSerializer})
    def create(self, request, *args, **kwargs):
        serializer = IdVerificationInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        verification = create_id_verification(**serializer.to_service_kwargs())
        return Response(IdVerificationSerializer(verification).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: IdVerificationSerializer})
    @action(detail=True, methods=['post'])
    def verify(self, request, pk=None):
        try:
            verification = verify_id(verification_id=pk, verified_by=request.user)
        except VerificationNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AlreadyVerifiedError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(IdVerificationSerializer(verification).data)


class ComplaintViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       viewsets.GenericViewSet):
    queryset = Complaint.objects.select_related('customer', 'handled_by')
    serializer_class = ComplaintSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = CompliancePagination
    permission_resource = 'customers'
    permission_action_map = {'create': 'edit', 'resolve': 'edit'}

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = ComplaintFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return complaints(**filters.validated_data)

    @extend_schema(request=ComplaintInputSerializer, responses={201: ComplaintSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ComplaintInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = create_complaint(handled_by=request.user, **serializer.to_service_kwargs())
        return Response(ComplaintSerializer(complaint).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ResolveComplaintSerializer, responses={200: ComplaintSerializer})
    @action(detail=True, methods=['post'])
    def resolve(self, request, pk=None):
        serializer = ResolveComplaintSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            complaint = resolve_complaint(
                complaint_id=pk, resolution=serializer.validated_data['resolution'], handled_by=request.user
            )
        except ComplaintNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ComplaintAlreadyResolvedError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(ComplaintSerializer(complaint).data)


class ComplianceReportViewSet(mixins.ListModelMixin,
                              mixins.RetrieveModelMixin,
                              viewsets.GenericViewSet):
    """
    Regulatory reports.

    Reading needs ``reports:view``; generating and advancing a report's
    status need ``reports:export``.
    """

    queryset = ComplianceReport.objects.select_related('generated_by')
    serializer_class = ComplianceReportSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = CompliancePagination
    permission_resource = 'reports'
    permission_action_map = {
        'generate': 'export',
        'set_status': 'export',
        'stats': 'view',
    }

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = ReportFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_reports(**filters.validated_data)

    @extend_schema(request=GenerateReportSerializer, responses={201: ComplianceReportSerializer})
    @action(detail=False, methods=['post'])
    def generate(self, request):
        serializer = GenerateReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        report = GENERATORS[data['report_type']](
            period_start=data['period_start'],
            period_end=data['period_end'],
            generated_by=request.user,
        )
        return Response(ComplianceReportSerializer(report).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ReportStatusSerializer, responses={200: ComplianceReportSerializer})
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        serializer = ReportStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            report = update_report_status(report_id=pk, **serializer.validated_data)
        except ReportNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidReportStatusError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(ComplianceReportSerializer(report).data)

    @extend_schema(responses={200: ComplianceStatsSerializer})
    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response(ComplianceStatsSerializer(compliance_stats()).data)
