from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination

from apps.accounts.permissions import HasResourcePermission
from .models import Staff
from .serializers import (
    StaffSerializer,
    StaffCreateSerializer,
    StaffUpdateSerializer,
    StaffFilterSerializer,
)
from .services import (
    create_staff,
    update_staff,
    deactivate_staff,
    search_staff,
    unregistered_casts,
    StaffNotFoundError,
    DuplicateStaffAccountError,
    InvalidStaffOperationError,
)


class StaffPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class StaffViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   viewsets.GenericViewSet):
    """
    Staff roster.

    list: Search staff by name/kana, role and active flag
    create: Register a staff member (optionally with login)
    retrieve: Get one staff member
    partial_update: Update fields
    destroy: Deactivate (soft delete)
    unregistered_casts: Cast-role staff without a cast profile
    """

    queryset = Staff.objects.select_related('user')
    serializer_class = StaffSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = StaffPagination
    permission_resource = 'staff'
    permission_action_map = {'create': 'manage', 'unregistered_casts': 'view', 'destroy': 'manage'}

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filters = StaffFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return search_staff(**filters.validated_data)

    def create(self, request, *args, **kwargs):
        serializer = StaffCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            staff = create_staff(**serializer.validated_data)
        except DuplicateStaffAccountError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(StaffSerializer(staff).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = StaffUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            staff = update_staff(staff_id=kwargs['pk'], **serializer.validated_data)
        except StaffNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(StaffSerializer(staff).data)

    def destroy(self, request, *args, **kwargs):
        try:
            deactivate_staff(staff_id=kwargs['pk'], performed_by=request.user)
        except StaffNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidStaffOperationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def unregistered_casts(self, request):
        """Cast-role staff still missing a cast profile."""
        return Response(StaffSerializer(unregistered_casts(), many=True).data)
