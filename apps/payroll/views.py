from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination

from apps.accounts.permissions import HasResourcePermission
from .models import PayrollRule, NominationType, PayrollRuleAssignment, PayrollCalculation
from .serializers import (
    PayrollRuleSerializer,
    PayrollRuleInputSerializer,
    NominationTypeSerializer,
    NominationTypeInputSerializer,
    AssignmentSerializer,
    AssignmentInputSerializer,
    AssignmentFilterSerializer,
    PayrollCalculationSerializer,
    CalculateRequestSerializer,
    CalculationResultSerializer,
    MonthlyRequestSerializer,
    CalculationFilterSerializer,
    ActiveFilterSerializer,
)
from .services import (
    create_rule,
    update_rule,
    deactivate_rule,
    list_rules,
    assign_rule,
    list_assignments,
    create_nomination_type,
    update_nomination_type,
    delete_nomination_type,
    list_nomination_types,
    calculate_payroll,
    save_calculation,
    approve_calculation,
    calculate_monthly_payroll,
    payroll_history,
    PayrollServiceError,
    PayrollRuleNotFoundError,
    NoActiveRuleError,
    CalculationNotFoundError,
    CastNotFoundError,
    InvalidCalculationStatusError,
    NominationTypeNotFoundError,
    DuplicateNominationTypeError,
)


class PayrollPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class PayrollBaseViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = PayrollPagination
    permission_resource = 'staff'
    permission_action_map = {'create': 'manage', 'destroy': 'manage'}


class PayrollRuleViewSet(mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         PayrollBaseViewSet):
    """Payroll rules with their sales tiers."""

    queryset = PayrollRule.objects.prefetch_related('sales_tiers')
    serializer_class = PayrollRuleSerializer

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = ActiveFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_rules(**filters.validated_data)

    @extend_schema(request=PayrollRuleInputSerializer, responses={201: PayrollRuleSerializer})
    def create(self, request):
        serializer = PayrollRuleInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rule = create_rule(**serializer.validated_data)
        return Response(PayrollRuleSerializer(rule).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=PayrollRuleInputSerializer, responses={200: PayrollRuleSerializer})
    def partial_update(self, request, pk=None):
        serializer = PayrollRuleInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            rule = update_rule(rule_id=pk, **serializer.validated_data)
        except PayrollRuleNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(PayrollRuleSerializer(rule).data)

    def destroy(self, request, pk=None):
        try:
            deactivate_rule(rule_id=pk)
        except PayrollRuleNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class NominationTypeViewSet(mixins.ListModelMixin,
                            mixins.RetrieveModelMixin,
                            PayrollBaseViewSet):
    """Nomination types and their prices. Delete deactivates."""

    queryset = NominationType.objects.all()
    serializer_class = NominationTypeSerializer

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = ActiveFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_nomination_types(**filters.validated_data)

    @extend_schema(request=NominationTypeInputSerializer, responses={201: NominationTypeSerializer})
    def create(self, request):
        serializer = NominationTypeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            nomination_type = create_nomination_type(**serializer.validated_data)
        except DuplicateNominationTypeError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(NominationTypeSerializer(nomination_type).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=NominationTypeInputSerializer, responses={200: NominationTypeSerializer})
    def partial_update(self, request, pk=None):
        serializer = NominationTypeInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            nomination_type = update_nomination_type(nomination_type_id=pk, **serializer.validated_data)
        except NominationTypeNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateNominationTypeError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(NominationTypeSerializer(nomination_type).data)

    def destroy(self, request, pk=None):
        try:
            delete_nomination_type(nomination_type_id=pk)
        except NominationTypeNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AssignmentViewSet(mixins.ListModelMixin, PayrollBaseViewSet):
    """Which rule applies to which cast, and from when."""

    queryset = PayrollRuleAssignment.objects.select_related('rule', 'cast')
    serializer_class = AssignmentSerializer

    def get_queryset(self):
        filters = AssignmentFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_assignments(**filters.validated_data)

    @extend_schema(request=AssignmentInputSerializer, responses={201: AssignmentSerializer})
    def create(self, request):
        serializer = AssignmentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        assignment = assign_rule(
            cast_id=data['cast'].id,
            rule_id=data['rule'].id,
            assigned_from=data['assigned_from'],
            assigned_until=data.get('assigned_until'),
        )
        return Response(AssignmentSerializer(assignment).data, status=status.HTTP_201_CREATED)


class PayrollCalculationViewSet(mixins.ListModelMixin,
                                mixins.RetrieveModelMixin,
                                PayrollBaseViewSet):
    """
    Payroll calculations.

    calculate: compute a period for one cast, optionally saving it
    monthly: compute and save drafts for every active cast
    approve: approve a draft or confirmed calculation
    """

    queryset = PayrollCalculation.objects.select_related('cast').prefetch_related('details')
    serializer_class = PayrollCalculationSerializer
    permission_action_map = {
        'calculate': 'manage',
        'monthly': 'manage',
        'approve': 'manage',
    }

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = CalculationFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return payroll_history(**filters.validated_data)

    @extend_schema(request=CalculateRequestSerializer, responses={200: CalculationResultSerializer})
    @action(detail=False, methods=['post'])
    def calculate(self, request):
        serializer = CalculateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = calculate_payroll(
                cast_id=data['cast_id'],
                period_start=data['period_start'],
                period_end=data['period_end'],
            )
        except CastNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NoActiveRuleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except PayrollServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        if data['persist']:
            calculation = save_calculation(result=result, status=data['status'])
            return Response(PayrollCalculationSerializer(calculation).data, status=status.HTTP_201_CREATED)
        return Response(CalculationResultSerializer(result).data)

    @extend_schema(request=MonthlyRequestSerializer)
    @action(detail=False, methods=['post'])
    def monthly(self, request):
        serializer = MonthlyRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = calculate_monthly_payroll(**serializer.validated_data)
        return Response({
            'calculations': PayrollCalculationSerializer(outcome['calculations'], many=True).data,
            'failed': outcome['failed'],
        })

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        try:
            calculation = approve_calculation(calculation_id=pk, approved_by=request.user)
        except CalculationNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidCalculationStatusError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(PayrollCalculationSerializer(calculation).data)
