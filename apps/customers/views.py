from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import HasResourcePermission
from apps.visits.models import Visit
from apps.visits.serializers import VisitSerializer
from .models import Customer
from .serializers import (
    CustomerSerializer,
    CustomerInputSerializer,
    CustomerFilterSerializer,
    BulkStatusSerializer,
    BulkResultSerializer,
)
from .services import (
    create_customer,
    update_customer,
    delete_customer,
    search_customers,
    bulk_update_status,
    CustomerNotFoundError,
    DuplicatePhoneNumberError,
    CustomerHasHistoryError,
)


class CustomerPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class CustomerViewSet(viewsets.ModelViewSet):
    """
    Customer CRM records.

    list: Search by name, kana, phone or LINE id and status
    create: Register a customer
    retrieve: Customer detail
    update/partial_update: Edit a customer
    destroy: Delete a customer
    visits: Visit history of a customer
    bulk_status: Change status of many customers
    """

    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = CustomerPagination
    permission_resource = 'customers'
    permission_action_map = {'visits': 'view', 'bulk_status': 'edit'}

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = CustomerFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return search_customers(**filters.validated_data)

    def create(self, request, *args, **kwargs):
        serializer = CustomerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            customer = create_customer(created_by=request.user, **serializer.validated_data)
        except DuplicatePhoneNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = CustomerInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            customer = update_customer(
                customer_id=kwargs['pk'],
                updated_by=request.user,
                **serializer.validated_data
            )
        except CustomerNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicatePhoneNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(CustomerSerializer(customer).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_customer(customer_id=kwargs['pk'])
        except CustomerNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except CustomerHasHistoryError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def visits(self, request, pk=None):
        """Visit history, newest first."""
        customer = self.get_object()
        visits = (
            Visit.objects
            .filter(customer=customer)
            .select_related('table')
            .order_by('-check_in_at')
        )
        page = self.paginate_queryset(visits)
        if page is not None:
            return self.get_paginated_response(VisitSerializer(page, many=True).data)
        return Response(VisitSerializer(visits, many=True).data)

    @extend_schema(request=BulkStatusSerializer, responses={200: BulkResultSerializer})
    @action(detail=False, methods=['post'])
    def bulk_status(self, request):
        """Change the status of many customers; per-row results."""
        serializer = BulkStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = bulk_update_status(
            customer_ids=serializer.validated_data['customer_ids'],
            status=serializer.validated_data['status'],
            updated_by=request.user,
        )
        return Response(result)
