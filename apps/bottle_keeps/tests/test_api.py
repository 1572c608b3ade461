import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from apps.bottle_keeps.models import BottleKeep, BottleStatus


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegisterBottle:
    """Tests for POST /api/bottle-keeps/"""

    def test_manager_registers_bottle(self, manager_client, customer, product):
        url = reverse('bottle_keeps:bottle-keep-list')
        data = {'customer': str(customer.id), 'product': str(product.id), 'storage_location': 'cellar-A'}
        response = manager_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['bottle_number'] == 'BK000001'
        assert response.data['customer_name'] == 'Yamada Taro'
        assert response.data['status'] == BottleStatus.ACTIVE

    def test_expiry_before_opening_rejected(self, manager_client, customer, product):
        today = timezone.localdate()
        data = {
            'customer': str(customer.id),
            'product': str(product.id),
            'opened_date': str(today),
            'expiry_date': str(today - timedelta(days=1)),
        }
        response = manager_client.post(reverse('bottle_keeps:bottle-keep-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'expiry_date' in response.data

    def test_hall_cannot_register(self, hall_client, customer, product):
        data = {'customer': str(customer.id), 'product': str(product.id)}
        response = hall_client.post(reverse('bottle_keeps:bottle-keep-list'), data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_cast_cannot_list(self, cast_client):
        response = cast_client.get(reverse('bottle_keeps:bottle-keep-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Listing and Detail Tests
# =============================================================================

@pytest.mark.django_db
class TestListBottles:

    def test_cashier_lists_with_filters(self, cashier_client, bottle, make_bottle):
        make_bottle(status=BottleStatus.CONSUMED, remaining_percentage=Decimal('0'))
        url = reverse('bottle_keeps:bottle-keep-list')

        response = cashier_client.get(url, {'status': 'active'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['id'] == str(bottle.id)

    def test_detail_includes_usage(self, hall_client, bottle):
        hall_client.post(
            reverse('bottle_keeps:bottle-keep-serve', kwargs={'pk': bottle.id}),
            {'served_amount': '0.250'},
            format='json',
        )

        response = hall_client.get(reverse('bottle_keeps:bottle-keep-detail', kwargs={'pk': bottle.id}))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['usages']) == 1
        assert response.data['movements'] == []

    def test_update_unknown_bottle(self, manager_client):
        url = reverse('bottle_keeps:bottle-keep-detail', kwargs={'pk': uuid.uuid4()})
        response = manager_client.patch(url, {'notes': 'x'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Serve and Move Tests
# =============================================================================

@pytest.mark.django_db
class TestServeAndMove:

    def test_hall_serves(self, hall_client, hall_user, bottle):
        url = reverse('bottle_keeps:bottle-keep-serve', kwargs={'pk': bottle.id})
        response = hall_client.post(url, {'served_amount': '0.4', 'notes': 'table A1'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        bottle.refresh_from_db()
        assert bottle.remaining_percentage == Decimal('0.600')
        assert bottle.usages.get().served_by == hall_user

    def test_serve_amount_validated(self, hall_client, bottle):
        url = reverse('bottle_keeps:bottle-keep-serve', kwargs={'pk': bottle.id})
        response = hall_client.post(url, {'served_amount': '1.5'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_serve_consumed_bottle(self, hall_client, bottle):
        BottleKeep.objects.filter(id=bottle.id).update(status=BottleStatus.CONSUMED)
        url = reverse('bottle_keeps:bottle-keep-serve', kwargs={'pk': bottle.id})

        response = hall_client.post(url, {'served_amount': '0.1'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cashier_cannot_serve(self, cashier_client, bottle):
        url = reverse('bottle_keeps:bottle-keep-serve', kwargs={'pk': bottle.id})
        response = cashier_client.post(url, {'served_amount': '0.1'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_move(self, manager_client, bottle):
        url = reverse('bottle_keeps:bottle-keep-move', kwargs={'pk': bottle.id})
        response = manager_client.post(url, {'to_location': 'vip-shelf'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['storage_location'] == 'vip-shelf'


# =============================================================================
# Report Tests
# =============================================================================

@pytest.mark.django_db
class TestBottleReports:

    def test_stats(self, manager_client, bottle):
        response = manager_client.get(reverse('bottle_keeps:bottle-keep-stats'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['active_bottles'] == 1
        assert Decimal(response.data['total_value']) == Decimal('20000')

    def test_alerts(self, manager_client, make_bottle):
        make_bottle(days_to_expiry=1)

        response = manager_client.get(reverse('bottle_keeps:bottle-keep-alerts'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['alert_type'] == 'expiring'
        assert response.data[0]['severity'] == 'critical'

    def test_customer_summary_requires_customer(self, manager_client):
        response = manager_client.get(reverse('bottle_keeps:bottle-keep-customer-summary'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_customer_summary(self, manager_client, customer, bottle):
        url = reverse('bottle_keeps:bottle-keep-customer-summary')
        response = manager_client.get(url, {'customer_id': str(customer.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_bottles'] == 1

    def test_update_expired(self, manager_client, make_bottle):
        make_bottle(days_to_expiry=-2)

        response = manager_client.post(reverse('bottle_keeps:bottle-keep-update-expired'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'updated': 1}

    def test_locations(self, manager_client, bottle):
        response = manager_client.get(reverse('bottle_keeps:bottle-keep-locations'))

        assert response.data == ['cellar-A']
