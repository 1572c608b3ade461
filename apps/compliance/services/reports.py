"""Regulatory report generation."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Count, QuerySet

from apps.attendance.models import AttendanceRecord
from apps.attendance.services import calculate_work_minutes
from apps.staff.models import Staff
from ..models import ComplianceReport, IdVerification, ReportStatus, ReportType
from .exceptions import InvalidPeriodError, InvalidReportStatusError, ReportNotFoundError
from .verification import complaints

logger = logging.getLogger(__name__)

STATUS_ORDER = [ReportStatus.GENERATED, ReportStatus.SUBMITTED, ReportStatus.APPROVED]


def _check_period(period_start: date, period_end: date) -> None:
    if period_end < period_start:
        raise InvalidPeriodError('period_end must be on or after period_start')


@transaction.atomic
def generate_employee_list(*, period_start: date, period_end: date, generated_by=None) -> ComplianceReport:
    """
    Employee register for the period.

    Lists active staff with at least one attendance record in the period,
    ordered by role then name, with days and minutes worked.
    """
    _check_period(period_start, period_end)

    records = AttendanceRecord.objects.filter(
        attendance_date__gte=period_start,
        attendance_date__lte=period_end,
        staff__is_active=True,
    )
    by_staff = {}
    for record in records:
        by_staff.setdefault(record.staff_id, []).append(record)

    employees = []
    for staff in Staff.objects.filter(id__in=by_staff.keys()).order_by('role', 'full_name'):
        staff_records = by_staff[staff.id]
        employees.append({
            'staff_id': str(staff.id),
            'full_name': staff.full_name,
            'role': staff.role,
            'hire_date': staff.hire_date.isoformat(),
            'days_worked': sum(1 for r in staff_records if r.clock_in),
            'work_minutes': sum(calculate_work_minutes(r) for r in staff_records),
        })

    report = ComplianceReport.objects.create(
        report_type=ReportType.EMPLOYEE_LIST,
        period_start=period_start,
        period_end=period_end,
        generated_by=generated_by,
        report_data={'employees': employees, 'total_employees': len(employees)},
    )
    logger.info('Employee list %s generated with %d rows', report.id, len(employees))
    return report


@transaction.atomic
def generate_complaint_log(*, period_start: date, period_end: date, generated_by=None) -> ComplianceReport:
    _check_period(period_start, period_end)

    entries = [
        {
            'complaint_id': str(c.id),
            'received_at': c.received_at.isoformat(),
            'customer_name': c.customer.name if c.customer else None,
            'category': c.category,
            'description': c.description,
            'status': c.status,
            'resolution': c.resolution,
        }
        for c in complaints(start_date=period_start, end_date=period_end).order_by('received_at')
    ]

    report = ComplianceReport.objects.create(
        report_type=ReportType.COMPLAINT_LOG,
        period_start=period_start,
        period_end=period_end,
        generated_by=generated_by,
        report_data={
            'complaints': entries,
            'total': len(entries),
            'open': sum(1 for e in entries if e['status'] == 'open'),
        },
    )
    logger.info('Complaint log %s generated with %d rows', report.id, len(entries))
    return report


def get_report(*, report_id: UUID) -> ComplianceReport:
    try:
        return ComplianceReport.objects.select_related('generated_by').get(id=report_id)
    except ComplianceReport.DoesNotExist:
        raise ReportNotFoundError(f"Report {report_id} not found")


@transaction.atomic
def update_report_status(*, report_id: UUID, status: str, file_path: Optional[str] = None) -> ComplianceReport:
    """Advance a report one step: generated -> submitted -> approved."""
    report = get_report(report_id=report_id)

    current = STATUS_ORDER.index(report.status)
    if status not in STATUS_ORDER or STATUS_ORDER.index(status) != current + 1:
        raise InvalidReportStatusError(f"Cannot change report from {report.status} to {status}")

    report.status = status
    if file_path is not None:
        report.file_path = file_path
    report.save(update_fields=['status', 'file_path'])
    logger.info('Report %s is now %s', report.id, status)
    return report


def list_reports(
    *,
    report_type: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> QuerySet:
    qs = ComplianceReport.objects.select_related('generated_by')
    if report_type:
        qs = qs.filter(report_type=report_type)
    if status:
        qs = qs.filter(status=status)
    if start_date:
        qs = qs.filter(generated_at__date__gte=start_date)
    if end_date:
        qs = qs.filter(generated_at__date__lte=end_date)
    return qs


def compliance_stats() -> dict:
    verifications = IdVerification.objects.all()
    total = verifications.count()
    verified = verifications.filter(is_verified=True).count()

    def counts(qs, field):
        return {
            row[field]: row['count']
            for row in qs.values(field).annotate(count=Count('id')).order_by(field)
        }

    reports = ComplianceReport.objects.all()
    return {
        'verifications': {
            'total': total,
            'verified': verified,
            'pending': total - verified,
            'by_type': counts(verifications, 'id_type'),
        },
        'reports': {
            'total': reports.count(),
            'by_type': counts(reports, 'report_type'),
            'by_status': counts(reports, 'status'),
        },
    }
