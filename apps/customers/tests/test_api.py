import pytest
from django.urls import reverse
from rest_framework import status

from apps.customers.models import Customer, CustomerStatus
from apps.visits.services import start_visit


# =============================================================================
# Customer CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestCustomerCreate:
    """Tests for POST /api/customers/"""

    def test_hall_cannot_create(self, hall_client):
        url = reverse('customers:customer-list')
        data = {
            'name': 'Tanaka Ichiro',
            'name_kana': 'タナカイチロウ',
            'phone_number': '090-9999-0000',
            'birthday': '1985-06-01',
        }
        response = hall_client.post(url, data)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_creates_customer(self, manager_client, manager_user):
        url = reverse('customers:customer-list')
        data = {
            'name': 'Tanaka Ichiro',
            'name_kana': 'タナカイチロウ',
            'phone_number': '090-9999-0000',
        }
        response = manager_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == CustomerStatus.ACTIVE
        assert Customer.objects.get(id=response.data['id']).created_by == manager_user

    def test_duplicate_phone_number(self, manager_client, customer):
        url = reverse('customers:customer-list')
        response = manager_client.post(url, {'name': 'Copy', 'phone_number': customer.phone_number})

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_invalid_phone_number(self, manager_client):
        url = reverse('customers:customer-list')
        response = manager_client.post(url, {'name': 'Bad', 'phone_number': '12345'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'phone_number' in response.data

    def test_kana_must_be_katakana(self, manager_client):
        url = reverse('customers:customer-list')
        response = manager_client.post(url, {'name': 'Bad', 'name_kana': 'たなか'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'name_kana' in response.data

    def test_future_birthday_rejected(self, manager_client):
        url = reverse('customers:customer-list')
        response = manager_client.post(url, {'name': 'Later', 'birthday': '2999-01-01'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestCustomerSearch:
    """Tests for GET /api/customers/"""

    def test_search_by_phone(self, cashier_client, customer, other_customer):
        url = reverse('customers:customer-list')
        response = cashier_client.get(url, {'query': '1234'})

        assert response.status_code == status.HTTP_200_OK
        assert [row['name'] for row in response.data['results']] == ['Yamada Taro']

    def test_filter_by_status(self, hall_client, customer, other_customer):
        other_customer.status = CustomerStatus.VIP
        other_customer.save()

        response = hall_client.get(reverse('customers:customer-list'), {'status': 'vip'})
        assert [row['name'] for row in response.data['results']] == ['Suzuki Hanako']

    def test_cast_forbidden(self, cast_client):
        response = cast_client.get(reverse('customers:customer-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestCustomerUpdate:
    """Tests for PATCH/DELETE /api/customers/{id}/"""

    def test_partial_update_keeps_status(self, hall_client, customer):
        customer.status = CustomerStatus.VIP
        customer.save()

        url = reverse('customers:customer-detail', kwargs={'pk': customer.id})
        response = hall_client.patch(url, {'memo': 'Prefers the window seat'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['memo'] == 'Prefers the window seat'
        assert response.data['status'] == 'vip'

    def test_phone_taken_by_other_customer(self, hall_client, customer, other_customer):
        url = reverse('customers:customer-detail', kwargs={'pk': customer.id})
        response = hall_client.patch(url, {'phone_number': other_customer.phone_number}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_delete_requires_delete_grant(self, hall_client, manager_client, customer):
        url = reverse('customers:customer-detail', kwargs={'pk': customer.id})

        assert hall_client.delete(url).status_code == status.HTTP_403_FORBIDDEN
        assert manager_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        assert not Customer.objects.filter(id=customer.id).exists()

    def test_customer_with_visits_cannot_be_deleted(self, manager_client, customer, table):
        start_visit(customer_id=customer.id, table_id=table.id)
        url = reverse('customers:customer-detail', kwargs={'pk': customer.id})

        assert manager_client.delete(url).status_code == status.HTTP_409_CONFLICT
        assert Customer.objects.filter(id=customer.id).exists()


@pytest.mark.django_db
class TestCustomerVisitsAndBulk:

    def test_visit_history(self, hall_client, customer, table):
        start_visit(customer_id=customer.id, table_id=table.id, num_guests=2)

        url = reverse('customers:customer-visits', kwargs={'pk': customer.id})
        response = hall_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['table_name'] == 'A1'

    def test_bulk_status_reports_each_row(self, hall_client, customer, other_customer):
        missing = '00000000-0000-0000-0000-000000000000'
        url = reverse('customers:customer-bulk-status')
        response = hall_client.post(
            url,
            {'customer_ids': [str(customer.id), missing, str(other_customer.id)], 'status': 'blocked'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert set(response.data['succeeded']) == {str(customer.id), str(other_customer.id)}
        assert response.data['failed'][0]['id'] == missing
        assert Customer.objects.filter(status='blocked').count() == 2
