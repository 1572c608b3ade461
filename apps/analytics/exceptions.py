"""
Domain exceptions for the analytics app.

Exception Hierarchy:
    AnalyticsServiceError (base)
    ├── InvalidRangeError
    └── CustomerNotFoundError

Usage:
    try:
        detail = CustomerAnalytics.customer_detail(customer_id)
    except CustomerNotFoundError as e:
        return Response({'error': str(e)}, status=404)
"""


class AnalyticsServiceError(Exception):
    """Base exception for all analytics errors."""

    pass


class InvalidRangeError(AnalyticsServiceError):
    """
    Raised when a date range or month window is out of bounds.

    Example:
        raise InvalidRangeError("months must be between 1 and 12")
    """

    pass


class CustomerNotFoundError(AnalyticsServiceError):
    """Raised when the requested customer does not exist."""

    pass
