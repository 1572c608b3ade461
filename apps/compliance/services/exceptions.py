"""Domain-specific exceptions for compliance services."""


class ComplianceServiceError(Exception):
    """Base exception for compliance services."""
    pass


class VerificationNotFoundError(ComplianceServiceError):
    """Raised when an ID verification does not exist."""
    pass


class AlreadyVerifiedError(ComplianceServiceError):
    """Raised when verifying a record that is already verified."""
    pass


class ComplaintNotFoundError(ComplianceServiceError):
    """Raised when a complaint does not exist."""
    pass


class ComplaintAlreadyResolvedError(ComplianceServiceError):
    """Raised when resolving a complaint twice."""
    pass


class ReportNotFoundError(ComplianceServiceError):
    """Raised when a compliance report does not exist."""
    pass


class InvalidReportStatusError(ComplianceServiceError):
    """Raised when a report status change goes backwards or skips a step."""
    pass


class InvalidPeriodError(ComplianceServiceError):
    """Raised when a report period ends before it starts."""
    pass
