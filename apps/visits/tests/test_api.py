import pytest
from django.urls import reverse
from rest_framework import status

from apps.customers.models import CustomerStatus
from apps.visits.services import start_visit, cancel_visit


# =============================================================================
# Visit Session Tests
# =============================================================================

@pytest.mark.django_db
class TestVisitCreate:
    """Tests for POST /api/visits/"""

    def test_seat_customer(self, hall_client, customer, table):
        url = reverse('visits:visit-list')
        response = hall_client.post(url, {'customer': str(customer.id), 'table': str(table.id), 'num_guests': 3})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'active'
        assert response.data['num_guests'] == 3
        assert len(response.data['table_segments']) == 1

    def test_occupied_table_conflict(self, hall_client, visit, other_customer, table):
        url = reverse('visits:visit-list')
        response = hall_client.post(url, {'customer': str(other_customer.id), 'table': str(table.id)})

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_blocked_customer_rejected(self, hall_client, customer, table):
        customer.status = CustomerStatus.BLOCKED
        customer.save()

        url = reverse('visits:visit-list')
        response = hall_client.post(url, {'customer': str(customer.id), 'table': str(table.id)})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'customer' in response.data

    def test_cast_forbidden(self, cast_client, customer, table):
        url = reverse('visits:visit-list')
        response = cast_client.post(url, {'customer': str(customer.id), 'table': str(table.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestVisitList:
    """Tests for GET /api/visits/"""

    def test_active_only(self, cashier_client, visit, other_customer, other_table):
        gone = start_visit(customer_id=other_customer.id, table_id=other_table.id)
        cancel_visit(visit_id=gone.id)

        response = cashier_client.get(reverse('visits:visit-list'), {'active': 'true'})

        assert response.status_code == status.HTTP_200_OK
        assert [row['id'] for row in response.data['results']] == [str(visit.id)]

    def test_detail_has_segments_and_nominations(self, hall_client, visit):
        response = hall_client.get(reverse('visits:visit-detail', kwargs={'pk': visit.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['customer_name'] == 'Yamada Taro'
        assert response.data['nominations'] == []


@pytest.mark.django_db
class TestVisitActions:

    def test_move_table(self, hall_client, visit, other_table):
        url = reverse('visits:visit-move-table', kwargs={'pk': visit.id})
        response = hall_client.post(url, {'table': str(other_table.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['table_name'] == 'A2'
        assert len(response.data['table_segments']) == 2

    def test_cancel(self, hall_client, visit):
        url = reverse('visits:visit-cancel', kwargs={'pk': visit.id})
        response = hall_client.post(url, {'reason': 'no show'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'cancelled'

        response = hall_client.post(url, {})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_add_and_end_nomination(self, hall_client, visit, cast_profile, shimei):
        url = reverse('visits:visit-nominations', kwargs={'pk': visit.id})
        response = hall_client.post(
            url, {'cast': str(cast_profile.id), 'nomination_type': str(shimei.id)}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['stage_name'] == 'Rina'
        assert response.data['fee_amount'] == '3000.00'

        duplicate = hall_client.post(url, {'cast': str(cast_profile.id)}, format='json')
        assert duplicate.status_code == status.HTTP_409_CONFLICT

        end_url = reverse('visits:visit-end-nomination', kwargs={'nomination_id': response.data['id']})
        ended = hall_client.post(end_url)
        assert ended.status_code == status.HTTP_200_OK
        assert ended.data['is_active'] is False

    def test_end_unknown_nomination(self, hall_client):
        url = reverse(
            'visits:visit-end-nomination',
            kwargs={'nomination_id': '00000000-0000-0000-0000-000000000000'},
        )
        response = hall_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Visit Guest Tests
# =============================================================================

@pytest.mark.django_db
class TestVisitGuests:

    def test_list_and_add(self, hall_client, visit, other_customer):
        url = reverse('visits:visit-guests', kwargs={'pk': visit.id})
        response = hall_client.post(url, {'customer': str(other_customer.id), 'seat_position': 2}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['customer_name'] == 'Suzuki Hanako'
        assert response.data['guest_type'] == 'companion'

        listing = hall_client.get(url)
        assert [g['customer_name'] for g in listing.data] == ['Yamada Taro', 'Suzuki Hanako']

        duplicate = hall_client.post(url, {'customer': str(other_customer.id)}, format='json')
        assert duplicate.status_code == status.HTTP_409_CONFLICT

    def test_add_requires_customer_or_name(self, hall_client, visit):
        url = reverse('visits:visit-guests', kwargs={'pk': visit.id})
        response = hall_client.post(url, {'guest_type': 'companion'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_check_out_and_primary_payer(self, hall_client, companion):
        payer_url = reverse('visits:visit-primary-payer', kwargs={'guest_id': companion.id})
        response = hall_client.post(payer_url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_primary_payer'] is True

        check_out_url = reverse('visits:visit-check-out-guest', kwargs={'guest_id': companion.id})
        response = hall_client.post(check_out_url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['check_out_at'] is not None

        again = hall_client.post(check_out_url)
        assert again.status_code == status.HTTP_400_BAD_REQUEST

    def test_transfer(self, hall_client, companion, customer, other_table):
        other_visit = start_visit(customer_id=customer.id, table_id=other_table.id)
        url = reverse('visits:visit-transfer-guest', kwargs={'guest_id': companion.id})
        response = hall_client.post(url, {'visit': str(other_visit.id)}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert str(response.data['visit']) == str(other_visit.id)

    def test_unknown_guest(self, hall_client):
        url = reverse(
            'visits:visit-check-out-guest',
            kwargs={'guest_id': '00000000-0000-0000-0000-000000000000'},
        )
        response = hall_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_cast_cannot_add_guests(self, cast_client, visit):
        url = reverse('visits:visit-guests', kwargs={'pk': visit.id})
        response = cast_client.post(url, {'name': 'Ito Ken'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
