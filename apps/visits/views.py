from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import HasResourcePermission
from apps.customers.services import DuplicatePhoneNumberError
from .models import Visit
from .serializers import (
    VisitSerializer,
    VisitDetailSerializer,
    NominationSerializer,
    StartVisitSerializer,
    MoveTableSerializer,
    CancelVisitSerializer,
    AddNominationSerializer,
    VisitGuestSerializer,
    AddGuestSerializer,
    TransferGuestSerializer,
)
from .services import (
    start_visit,
    move_table,
    cancel_visit,
    active_visits,
    add_nomination,
    end_nomination,
    visit_guests,
    add_guest,
    check_out_guest,
    transfer_guest,
    set_primary_payer,
    VisitServiceError,
    VisitNotFoundError,
    NominationNotFoundError,
    CastAlreadyEngagedError,
    TableUnavailableError,
    GuestNotFoundError,
    GuestAlreadyPresentError,
)


class VisitPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class VisitViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   viewsets.GenericViewSet):
    """
    Visit sessions.

    list: Visits, optionally only active ones (?active=true)
    create: Seat a customer at a table
    retrieve: Visit with table segments, guests and nominations
    move_table: Move the party to another table
    cancel: Cancel the visit
    nominations: Add a cast engagement
    end_nomination: Close a cast engagement
    guests: List the party or add a guest
    check_out_guest: A guest leaves early
    transfer_guest: Move a guest to another visit
    primary_payer: Make a guest the payer for unclaimed items
    """

    queryset = Visit.objects.select_related('customer', 'table')
    serializer_class = VisitSerializer
    permission_classes = [IsAuthenticated, HasResourcePermission]
    pagination_class = VisitPagination
    permission_resource = ('tables', 'bookings', 'billing')
    permission_action_map = {
        'create': 'manage',
        'move_table': 'manage',
        'cancel': 'manage',
        'nominations': 'manage',
        'end_nomination': 'manage',
        'check_out_guest': 'manage',
        'transfer_guest': 'manage',
        'primary_payer': 'manage',
    }

    def get_queryset(self):
        if self.action == 'list' and self.request.query_params.get('active') in ('true', '1'):
            return active_visits()
        if self.action == 'retrieve':
            return super().get_queryset().prefetch_related(
                'table_segments__table', 'guests__customer', 'nominations__cast',
                'nominations__nomination_type',
            )
        return super().get_queryset()

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return VisitDetailSerializer
        return VisitSerializer

    @extend_schema(request=StartVisitSerializer, responses={201: VisitDetailSerializer})
    def create(self, request, *args, **kwargs):
        serializer = StartVisitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            visit = start_visit(
                customer_id=data['customer'].id,
                table_id=data['table'].id,
                num_guests=data['num_guests'],
                notes=data.get('notes', ''),
                created_by=request.user,
            )
        except TableUnavailableError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(VisitDetailSerializer(visit).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=MoveTableSerializer, responses={200: VisitDetailSerializer})
    @action(detail=True, methods=['post'])
    def move_table(self, request, pk=None):
        serializer = MoveTableSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            visit = move_table(
                visit_id=pk,
                to_table_id=serializer.validated_data['table'].id,
                reason=serializer.validated_data['reason'],
            )
        except VisitNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except TableUnavailableError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except VisitServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VisitDetailSerializer(visit).data)

    @extend_schema(request=CancelVisitSerializer, responses={200: VisitSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        serializer = CancelVisitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            visit = cancel_visit(visit_id=pk, reason=serializer.validated_data.get('reason', ''))
        except VisitNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except VisitServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VisitSerializer(visit).data)

    @extend_schema(request=AddNominationSerializer, responses={201: NominationSerializer})
    @action(detail=True, methods=['post'])
    def nominations(self, request, pk=None):
        serializer = AddNominationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        nomination_type = data.get('nomination_type')

        try:
            nomination = add_nomination(
                visit_id=pk,
                cast_id=data['cast'].id,
                role=data['role'],
                nomination_type_id=nomination_type.id if nomination_type else None,
            )
        except VisitNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except CastAlreadyEngagedError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except VisitServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(NominationSerializer(nomination).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path=r'nominations/(?P<nomination_id>[^/.]+)/end')
    def end_nomination(self, request, nomination_id=None):
        try:
            nomination = end_nomination(nomination_id=nomination_id)
        except NominationNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(NominationSerializer(nomination).data)

    @extend_schema(
        request=AddGuestSerializer,
        responses={200: VisitGuestSerializer(many=True), 201: VisitGuestSerializer},
    )
    @action(detail=True, methods=['get', 'post'])
    def guests(self, request, pk=None):
        if request.method == 'GET':
            return Response(VisitGuestSerializer(visit_guests(visit_id=pk), many=True).data)

        serializer = AddGuestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        customer = data.get('customer')

        try:
            guest = add_guest(
                visit_id=pk,
                customer_id=customer.id if customer else None,
                name=data.get('name', ''),
                phone_number=data.get('phone_number', ''),
                guest_type=data['guest_type'],
                seat_position=data.get('seat_position'),
                is_primary_payer=data['is_primary_payer'],
                created_by=request.user,
            )
        except VisitNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (GuestAlreadyPresentError, DuplicatePhoneNumberError) as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except VisitServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VisitGuestSerializer(guest).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path=r'guests/(?P<guest_id>[^/.]+)/check_out')
    def check_out_guest(self, request, guest_id=None):
        try:
            guest = check_out_guest(guest_id=guest_id)
        except GuestNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except VisitServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(VisitGuestSerializer(guest).data)

    @extend_schema(request=TransferGuestSerializer, responses={200: VisitGuestSerializer})
    @action(detail=False, methods=['post'], url_path=r'guests/(?P<guest_id>[^/.]+)/transfer')
    def transfer_guest(self, request, guest_id=None):
        serializer = TransferGuestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            guest = transfer_guest(guest_id=guest_id, to_visit_id=serializer.validated_data['visit'].id)
        except GuestNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except GuestAlreadyPresentError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except VisitServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(VisitGuestSerializer(guest).data)

    @action(detail=False, methods=['post'], url_path=r'guests/(?P<guest_id>[^/.]+)/primary_payer')
    def primary_payer(self, request, guest_id=None):
        try:
            guest = set_primary_payer(guest_id=guest_id)
        except GuestNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(VisitGuestSerializer(guest).data)
