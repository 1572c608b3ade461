from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from apps.attendance.models import AttendanceRecord, ClockAction, ShiftRequest
from apps.attendance.services import generate_qr_code


# =============================================================================
# Clock Tests
# =============================================================================

@pytest.mark.django_db
class TestClock:
    """Tests for /api/attendance/clock/ and /api/attendance/today/"""

    def test_clock_in_then_today(self, hall_client, hall_user):
        response = hall_client.post(reverse('attendance:clock'), {'action': 'clock_in'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['clock_in'] is not None

        today = hall_client.get(reverse('attendance:today'))
        assert today.status_code == status.HTTP_200_OK
        assert today.data['staff_name'] == 'Hall User'

    def test_today_before_clock_in(self, hall_client):
        response = hall_client.get(reverse('attendance:today'))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_clock_out_first_is_rejected(self, hall_client):
        response = hall_client.post(reverse('attendance:clock'), {'action': 'clock_out'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_staff_profile(self, make_staff_user, client_for):
        client = client_for(make_staff_user(role=None))

        response = client.post(reverse('attendance:clock'), {'action': 'clock_in'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestSummaryAndRecords:

    def test_staff_sees_only_own_summary(self, hall_client, hall_user, manager_user):
        today = timezone.localdate()
        url = reverse('attendance:summary')

        response = hall_client.get(url, {
            'year': today.year, 'month': today.month, 'staff_id': str(manager_user.staff_profile.id),
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['staff_id'] == str(hall_user.staff_profile.id)

    def test_admin_without_profile_needs_staff_id(self, client_for, make_staff_user):
        admin = make_staff_user(role=None, is_superuser=True, is_staff=True)
        client = client_for(admin)
        today = timezone.localdate()

        response = client.get(reverse('attendance:summary'), {'year': today.year, 'month': today.month})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_records_scoped_to_own(self, hall_client, hall_user, cast_user):
        today = timezone.localdate()
        AttendanceRecord.objects.create(staff=hall_user.staff_profile, attendance_date=today)
        AttendanceRecord.objects.create(staff=cast_user.staff_profile, attendance_date=today)

        response = hall_client.get(reverse('attendance:record-list'))

        assert response.data['count'] == 1

    def test_manager_corrects_record(self, manager_client, hall_user):
        record = AttendanceRecord.objects.create(staff=hall_user.staff_profile, attendance_date=timezone.localdate())
        url = reverse('attendance:record-detail', kwargs={'pk': record.id})

        response = manager_client.patch(url, {'status': 'absent', 'notes': 'Called in sick'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'absent'

    def test_staff_cannot_correct(self, hall_client, hall_user):
        record = AttendanceRecord.objects.create(staff=hall_user.staff_profile, attendance_date=timezone.localdate())
        url = reverse('attendance:record-detail', kwargs={'pk': record.id})

        response = hall_client.patch(url, {'status': 'present'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Shift Tests
# =============================================================================

@pytest.mark.django_db
class TestShiftRequests:

    def _submit(self, client, days_ahead=3):
        shift_date = timezone.localdate() + timedelta(days=days_ahead)
        return client.post(
            reverse('attendance:shift-request-list'),
            {'request_date': str(shift_date), 'start_time': '19:00', 'end_time': '23:30'},
            format='json',
        )

    def test_cast_submits(self, cast_client):
        response = self._submit(cast_client)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['start_time'] == '19:00'

    def test_end_before_start(self, cast_client):
        response = cast_client.post(
            reverse('attendance:shift-request-list'),
            {'request_date': str(timezone.localdate()), 'start_time': '23:00', 'end_time': '19:00'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_manager_approves(self, cast_client, manager_client):
        request_id = self._submit(cast_client).data['id']
        url = reverse('attendance:shift-request-approve', kwargs={'pk': request_id})

        response = manager_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['end_time'] == '23:30'
        assert manager_client.post(url).status_code == status.HTTP_409_CONFLICT

    def test_cast_cannot_approve(self, cast_client):
        request_id = self._submit(cast_client).data['id']
        url = reverse('attendance:shift-request-approve', kwargs={'pk': request_id})

        assert cast_client.post(url).status_code == status.HTTP_403_FORBIDDEN

    def test_reject(self, cast_client, manager_client):
        request_id = self._submit(cast_client).data['id']
        url = reverse('attendance:shift-request-reject', kwargs={'pk': request_id})

        response = manager_client.post(url, {'reason': 'Fully staffed'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert ShiftRequest.objects.get(id=request_id).rejection_reason == 'Fully staffed'


@pytest.mark.django_db
class TestConfirmedShifts:

    def test_manager_schedules_and_week_view(self, manager_client, cast_user):
        shift_date = timezone.localdate() + timedelta(days=1)
        data = {
            'staff': str(cast_user.staff_profile.id),
            'shift_date': str(shift_date),
            'start_time': '18:00',
            'end_time': '23:00',
        }
        created = manager_client.post(reverse('attendance:shift-list'), data, format='json')
        assert created.status_code == status.HTTP_201_CREATED

        duplicate = manager_client.post(reverse('attendance:shift-list'), data, format='json')
        assert duplicate.status_code == status.HTTP_409_CONFLICT

        week = manager_client.get(reverse('attendance:shift-weekly'), {'week_start': str(shift_date)})
        assert len(week.data) == 7
        assert len(week.data[0]['shifts']) == 1


# =============================================================================
# QR Tests
# =============================================================================

@pytest.mark.django_db
class TestQRAttendance:

    def test_generate_own_and_mine(self, hall_client):
        created = hall_client.post(reverse('attendance:qr-generate'), {}, format='json')

        assert created.status_code == status.HTTP_201_CREATED
        mine = hall_client.get(reverse('attendance:qr-mine'))
        assert mine.data['id'] == created.data['id']

    def test_staff_cannot_issue_for_others(self, hall_client, cast_user):
        response = hall_client.post(
            reverse('attendance:qr-generate'), {'staff': str(cast_user.staff_profile.id)}, format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_issues_for_others(self, manager_client, cast_user):
        response = manager_client.post(
            reverse('attendance:qr-generate'), {'staff': str(cast_user.staff_profile.id)}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_scan(self, hall_client, cast_user):
        qr_code = generate_qr_code(staff_id=cast_user.staff_profile.id)
        data = {'qr_data': qr_code.qr_data, 'signature': qr_code.signature, 'action': ClockAction.CLOCK_IN}

        response = hall_client.post(reverse('attendance:qr-scan'), data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['staff_name'] == 'Cast User'

    def test_scan_expired(self, hall_client, cast_user):
        qr_code = generate_qr_code(staff_id=cast_user.staff_profile.id)
        qr_code.expires_at = timezone.now() - timedelta(seconds=1)
        qr_code.save()
        data = {'qr_data': qr_code.qr_data, 'signature': qr_code.signature, 'action': ClockAction.CLOCK_IN}

        response = hall_client.post(reverse('attendance:qr-scan'), data, format='json')

        assert response.status_code == status.HTTP_410_GONE

    def test_stats_and_history(self, manager_client, hall_client, cast_user):
        hall_client.post(
            reverse('attendance:qr-scan'),
            {'qr_data': 'bogus', 'signature': 'bad', 'action': ClockAction.CLOCK_IN},
            format='json',
        )

        stats = manager_client.get(reverse('attendance:qr-stats'))
        history = manager_client.get(reverse('attendance:qr-history'), {'success': 'false'})

        assert stats.data['failed_scans'] == 1
        assert history.data['count'] == 1

    def test_stats_forbidden_for_hall(self, hall_client):
        assert hall_client.get(reverse('attendance:qr-stats')).status_code == status.HTTP_403_FORBIDDEN
