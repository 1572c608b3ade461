from datetime import date

import pytest

from apps.accounts.models import StaffRole
from apps.staff.services import (
    create_staff,
    update_staff,
    search_staff,
    DuplicateStaffAccountError,
)


@pytest.mark.django_db
class TestStaffServices:

    def test_create_links_login_account(self):
        staff = create_staff(
            full_name='Kimura Aoi',
            role=StaffRole.CASHIER,
            hire_date=date(2024, 5, 1),
            email='kimura@example.com',
            password='SecurePass123!',
        )

        assert staff.user.email == 'kimura@example.com'
        assert staff.user.role == 'cashier'

    def test_duplicate_email_is_case_insensitive(self):
        create_staff(full_name='A', role=StaffRole.HALL, hire_date=date(2024, 5, 1),
                     email='dup@example.com', password='SecurePass123!')

        with pytest.raises(DuplicateStaffAccountError):
            create_staff(full_name='B', role=StaffRole.HALL, hire_date=date(2024, 5, 1),
                         email='DUP@example.com', password='SecurePass123!')

    def test_update_ignores_unknown_fields(self, hall_user):
        staff = update_staff(staff_id=hall_user.staff_profile.id, full_name='Renamed', user=None)

        assert staff.full_name == 'Renamed'
        assert staff.user_id == hall_user.id

    def test_search_by_kana(self):
        create_staff(full_name='Ito Ken', full_name_kana='イトウケン', role=StaffRole.HALL,
                     hire_date=date(2024, 5, 1))

        assert search_staff(query='イトウ').count() == 1
