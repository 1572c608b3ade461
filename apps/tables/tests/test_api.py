from datetime import date, time, timedelta

import pytest
from django.urls import reverse
from rest_framework import status

from apps.reservations.services import create_reservation
from apps.tables.models import Table, TableStatus
from apps.visits.services import start_visit


# =============================================================================
# Table CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestTableCrud:
    """Tests for /api/tables/"""

    def test_create_table(self, hall_client):
        url = reverse('tables:table-list')
        response = hall_client.post(url, {'table_name': 'VIP-1', 'capacity': 8, 'is_vip': True})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['current_status'] == TableStatus.AVAILABLE
        assert response.data['is_vip'] is True

    def test_duplicate_name(self, hall_client, table):
        url = reverse('tables:table-list')
        response = hall_client.post(url, {'table_name': table.table_name, 'capacity': 2})

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_invalid_name(self, hall_client):
        url = reverse('tables:table-list')
        response = hall_client.post(url, {'table_name': 'A 1', 'capacity': 2})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_capacity_range(self, hall_client):
        url = reverse('tables:table-list')
        response = hall_client.post(url, {'table_name': 'Z9', 'capacity': 51})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'capacity' in response.data

    def test_cashier_cannot_list(self, cashier_client):
        response = cashier_client.get(reverse('tables:table-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_lists_through_bookings_grant(self, manager_client, table, other_table):
        response = manager_client.get(reverse('tables:table-list'), {'min_capacity': 5})

        assert response.status_code == status.HTTP_200_OK
        assert [row['table_name'] for row in response.data] == ['A2']

    def test_capacity_range_filter_validated(self, hall_client):
        response = hall_client.get(reverse('tables:table-list'), {'min_capacity': 8, 'max_capacity': 2})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cannot_delete_table_with_active_visit(self, hall_client, customer, table):
        start_visit(customer_id=customer.id, table_id=table.id)

        url = reverse('tables:table-detail', kwargs={'pk': table.id})
        response = hall_client.delete(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Table.objects.filter(id=table.id).exists()

    def test_cannot_deactivate_table_with_active_visit(self, hall_client, customer, table):
        start_visit(customer_id=customer.id, table_id=table.id)

        url = reverse('tables:table-detail', kwargs={'pk': table.id})
        response = hall_client.patch(url, {'is_active': False}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Status / Availability Tests
# =============================================================================

@pytest.mark.django_db
class TestTableStatus:
    """Tests for POST /api/tables/{id}/set_status/"""

    def test_set_cleaning(self, hall_client, table):
        url = reverse('tables:table-set-status', kwargs={'pk': table.id})
        response = hall_client.post(url, {'status': 'cleaning'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['current_status'] == 'cleaning'

    def test_occupied_only_through_visits(self, hall_client, table):
        url = reverse('tables:table-set-status', kwargs={'pk': table.id})
        response = hall_client.post(url, {'status': 'occupied'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cannot_release_table_with_active_visit(self, hall_client, customer, table):
        start_visit(customer_id=customer.id, table_id=table.id)

        url = reverse('tables:table-set-status', kwargs={'pk': table.id})
        response = hall_client.post(url, {'status': 'available'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        table.refresh_from_db()
        assert table.current_status == TableStatus.OCCUPIED


@pytest.mark.django_db
class TestAvailableTables:
    """Tests for GET /api/tables/available/"""

    def test_filters_by_capacity(self, hall_client, table, other_table):
        response = hall_client.get(reverse('tables:table-available'), {'capacity': 5})

        assert [row['table_name'] for row in response.data] == ['A2']

    def test_skips_occupied_and_inactive(self, hall_client, customer, table, other_table):
        start_visit(customer_id=customer.id, table_id=table.id)
        Table.objects.create(table_name='OFF', capacity=4, is_active=False)

        response = hall_client.get(reverse('tables:table-available'))

        assert [row['table_name'] for row in response.data] == ['A2']

    def test_skips_tables_booked_in_slot(self, hall_client, customer, table, other_table):
        day = date.today() + timedelta(days=3)
        create_reservation(
            customer_id=customer.id,
            table_id=table.id,
            reservation_date=day,
            reservation_time=time(20, 0),
            number_of_guests=2,
        )

        url = reverse('tables:table-available')
        response = hall_client.get(url, {'date': day.isoformat(), 'time': '21:00'})
        assert [row['table_name'] for row in response.data] == ['A2']

        # two hours later the slot is free again
        response = hall_client.get(url, {'date': day.isoformat(), 'time': '22:00'})
        assert [row['table_name'] for row in response.data] == ['A1', 'A2']

    def test_date_requires_time(self, hall_client):
        response = hall_client.get(reverse('tables:table-available'), {'date': '2030-01-01'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
