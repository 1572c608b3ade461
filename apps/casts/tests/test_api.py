from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from apps.casts.services import record_performance


# =============================================================================
# Cast Management Tests
# =============================================================================

@pytest.mark.django_db
class TestCastManagement:
    """Tests for /api/casts/"""

    def test_create_profile(self, manager_client, make_staff_user):
        staff = make_staff_user('cast', full_name='Sakura').staff_profile
        url = reverse('casts:cast-list')
        response = manager_client.post(
            url, {'staff': str(staff.id), 'stage_name': 'Sakura', 'hourly_rate': '2500'}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['full_name'] == 'Sakura'
        assert response.data['hourly_rate'] == '2500.00'

    def test_create_for_non_cast(self, manager_client, hall_user):
        url = reverse('casts:cast-list')
        response = manager_client.post(
            url, {'staff': str(hall_user.staff_profile.id), 'stage_name': 'X'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_twice(self, manager_client, cast_profile, cast_user):
        url = reverse('casts:cast-list')
        response = manager_client.post(
            url, {'staff': str(cast_user.staff_profile.id), 'stage_name': 'Again'}, format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_hall_cannot_list(self, hall_client):
        response = hall_client.get(reverse('casts:cast-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_deactivate(self, manager_client, cast_profile):
        url = reverse('casts:cast-detail', kwargs={'pk': cast_profile.id})

        assert manager_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        cast_profile.refresh_from_db()
        assert cast_profile.is_active is False


@pytest.mark.django_db
class TestCastPerformanceApi:

    def test_record_and_read_history(self, manager_client, cast_profile):
        url = reverse('casts:cast-performances', kwargs={'pk': cast_profile.id})

        response = manager_client.post(url, {'date': '2025-01-10', 'sales_amount': '50000', 'shimei_count': 2})
        assert response.status_code == status.HTTP_201_CREATED

        response = manager_client.get(url, {'start_date': '2025-01-01', 'end_date': '2025-01-31'})
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['shimei_count'] == 2

    def test_ranking_open_to_casts(self, cast_client, cast_profile):
        record_performance(cast_id=cast_profile.id, date=date(2025, 1, 10), sales_amount=Decimal('1000'))

        url = reverse('casts:cast-ranking')
        response = cast_client.get(url, {'start_date': '2025-01-01', 'end_date': '2025-01-31'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['stage_name'] == 'Rina'

    def test_ranking_needs_period(self, manager_client):
        response = manager_client.get(reverse('casts:cast-ranking'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_compensation(self, manager_client, cast_profile):
        url = reverse('casts:cast-compensation', kwargs={'pk': cast_profile.id})
        response = manager_client.get(url, {'start_date': '2025-01-01', 'end_date': '2025-01-31'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['work_days'] == 0
        assert response.data['total_amount'] == '0.00'


# =============================================================================
# Own Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestOwnProfile:
    """Tests for /api/casts/me/"""

    def test_get_own_profile(self, cast_client, cast_profile):
        response = cast_client.get(reverse('casts:cast-me'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['stage_name'] == 'Rina'

    def test_edit_own_profile(self, cast_client, cast_profile):
        response = cast_client.patch(reverse('casts:cast-me'), {'hobby': 'Tennis', 'blood_type': 'AB'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['hobby'] == 'Tennis'

    def test_cast_without_profile(self, cast_client):
        response = cast_client.get(reverse('casts:cast-me'))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_other_roles_forbidden(self, manager_client):
        response = manager_client.get(reverse('casts:cast-me'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_own_performance(self, cast_client, cast_profile):
        record_performance(cast_id=cast_profile.id, date=date(2025, 1, 10), sales_amount=Decimal('1000'))

        response = cast_client.get(reverse('casts:cast-my-performance'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
