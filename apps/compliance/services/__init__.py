"""Services for ID checks, complaints and regulatory reports."""

from .exceptions import (
    ComplianceServiceError,
    VerificationNotFoundError,
    AlreadyVerifiedError,
    ComplaintNotFoundError,
    ComplaintAlreadyResolvedError,
    ReportNotFoundError,
    InvalidReportStatusError,
    InvalidPeriodError,
)
from .verification import (
    age_on,
    create_id_verification,
    get_id_verification,
    verify_id,
    id_verifications,
    create_complaint,
    resolve_complaint,
    complaints,
)
from .reports import (
    generate_employee_list,
    generate_complaint_log,
    get_report,
    update_report_status,
    list_reports,
    compliance_stats,
)

__all__ = [
    # Exceptions
    'ComplianceServiceError',
    'VerificationNotFoundError',
    'AlreadyVerifiedError',
    'ComplaintNotFoundError',
    'ComplaintAlreadyResolvedError',
    'ReportNotFoundError',
    'InvalidReportStatusError',
    'InvalidPeriodError',
    # ID verification
    'age_on',
    'create_id_verification',
    'get_id_verification',
    'verify_id',
    'id_verifications',
    # Complaints
    'create_complaint',
    'resolve_complaint',
    'complaints',
    # Reports
    'generate_employee_list',
    'generate_complaint_log',
    'get_report',
    'update_report_status',
    'list_reports',
    'compliance_stats',
]
