from datetime import date, datetime, timedelta

import pytest
from dateutil.relativedelta import relativedelta
from django.utils import timezone

from apps.attendance.models import AttendanceRecord
from apps.compliance.models import ComplaintStatus, IdType, ReportStatus, ReportType
from apps.compliance.services import (
    age_on,
    create_id_verification,
    verify_id,
    create_complaint,
    resolve_complaint,
    generate_employee_list,
    generate_complaint_log,
    update_report_status,
    compliance_stats,
    AlreadyVerifiedError,
    ComplaintAlreadyResolvedError,
    InvalidPeriodError,
    InvalidReportStatusError,
)


class TestAge:

    def test_birthday_boundary(self):
        assert age_on(date(2005, 6, 15), date(2025, 6, 14)) == 19
        assert age_on(date(2005, 6, 15), date(2025, 6, 15)) == 20

    def test_leap_day_birthday(self):
        assert age_on(date(2004, 2, 29), date(2024, 2, 28)) == 19
        assert age_on(date(2004, 2, 29), date(2024, 2, 29)) == 20


# =============================================================================
# ID verification
# =============================================================================

@pytest.mark.django_db
class TestIdVerification:

    def test_adult_with_valid_document(self, customer):
        verification = create_id_verification(
            customer_id=customer.id,
            id_type=IdType.LICENSE,
            birth_date=date(1990, 1, 1),
            expiry_date=timezone.localdate() + timedelta(days=365),
            notes='Checked at door',
        )

        assert verification.notes == 'Checked at door'
        assert verification.is_verified is False

    def test_underage_is_flagged_not_rejected(self, customer):
        verification = create_id_verification(
            customer_id=customer.id,
            id_type=IdType.PASSPORT,
            birth_date=timezone.localdate() - relativedelta(years=18),
        )

        assert verification.notes.startswith('[UNDERAGE]')

    def test_expired_document_is_flagged(self, customer):
        verification = create_id_verification(
            customer_id=customer.id,
            id_type=IdType.MYNUMBER,
            birth_date=date(1990, 1, 1),
            expiry_date=timezone.localdate() - timedelta(days=1),
            notes='Old card',
        )

        lines = verification.notes.split('\n')
        assert lines[0].startswith('[EXPIRED]')
        assert lines[-1] == 'Old card'

    def test_verify_once(self, customer, hall_user):
        verification = create_id_verification(customer_id=customer.id, id_type=IdType.LICENSE)

        verified = verify_id(verification_id=verification.id, verified_by=hall_user)

        assert verified.is_verified is True
        assert verified.verified_by == hall_user
        with pytest.raises(AlreadyVerifiedError):
            verify_id(verification_id=verification.id, verified_by=hall_user)


# =============================================================================
# Complaints
# =============================================================================

@pytest.mark.django_db
class TestComplaints:

    def test_resolve_once(self, customer, manager_user):
        complaint = create_complaint(description='Too loud', category='noise', customer_id=customer.id)

        resolved = resolve_complaint(complaint_id=complaint.id, resolution='Moved table', handled_by=manager_user)

        assert resolved.status == ComplaintStatus.RESOLVED
        assert resolved.resolved_at is not None
        with pytest.raises(ComplaintAlreadyResolvedError):
            resolve_complaint(complaint_id=complaint.id, resolution='Again')


# =============================================================================
# Reports
# =============================================================================

@pytest.mark.django_db
class TestReports:

    def test_employee_list(self, hall_user, cast_user, manager_user):
        start = timezone.make_aware(datetime(2025, 3, 1, 18))
        for user in (hall_user, cast_user):
            AttendanceRecord.objects.create(
                staff=user.staff_profile,
                attendance_date=start.date(),
                clock_in=start,
                clock_out=start + timedelta(hours=5),
            )

        report = generate_employee_list(period_start=date(2025, 3, 1), period_end=date(2025, 3, 31))
        employees = report.report_data['employees']

        assert report.report_type == ReportType.EMPLOYEE_LIST
        assert report.report_data['total_employees'] == 2
        assert [e['full_name'] for e in employees] == ['Cast User', 'Hall User']
        assert employees[0]['work_minutes'] == 300
        assert employees[0]['days_worked'] == 1

    def test_complaint_log(self, customer):
        create_complaint(
            description='Wrong bill',
            category='billing',
            customer_id=customer.id,
            received_at=timezone.make_aware(datetime(2025, 3, 10, 22)),
        )
        create_complaint(
            description='Outside period',
            category='other',
            received_at=timezone.make_aware(datetime(2025, 4, 2, 22)),
        )

        report = generate_complaint_log(period_start=date(2025, 3, 1), period_end=date(2025, 3, 31))

        assert report.report_data['total'] == 1
        assert report.report_data['open'] == 1
        assert report.report_data['complaints'][0]['customer_name'] == 'Yamada Taro'

    def test_inverted_period(self, db):
        with pytest.raises(InvalidPeriodError):
            generate_complaint_log(period_start=date(2025, 3, 31), period_end=date(2025, 3, 1))

    def test_status_moves_one_step_forward(self, db):
        report = generate_complaint_log(period_start=date(2025, 3, 1), period_end=date(2025, 3, 31))

        with pytest.raises(InvalidReportStatusError):
            update_report_status(report_id=report.id, status=ReportStatus.APPROVED)

        update_report_status(report_id=report.id, status=ReportStatus.SUBMITTED, file_path='/reports/march.pdf')
        report = update_report_status(report_id=report.id, status=ReportStatus.APPROVED)

        assert report.status == ReportStatus.APPROVED
        assert report.file_path == '/reports/march.pdf'
        with pytest.raises(InvalidReportStatusError):
            update_report_status(report_id=report.id, status=ReportStatus.SUBMITTED)

    def test_stats(self, customer):
        create_id_verification(customer_id=customer.id, id_type=IdType.LICENSE)
        verification = create_id_verification(customer_id=customer.id, id_type=IdType.PASSPORT)
        verify_id(verification_id=verification.id)
        generate_complaint_log(period_start=date(2025, 3, 1), period_end=date(2025, 3, 31))

        stats = compliance_stats()

        assert stats['verifications']['total'] == 2
        assert stats['verifications']['pending'] == 1
        assert stats['verifications']['by_type'] == {'license': 1, 'passport': 1}
        assert stats['reports']['by_status'] == {'generated': 1}
