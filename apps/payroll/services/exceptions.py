"""Domain-specific exceptions for payroll services."""


class PayrollServiceError(Exception):
    """Base exception for payroll services."""
    pass


class PayrollRuleNotFoundError(PayrollServiceError):
    """Raised when payroll rule does not exist."""
    pass


class NoActiveRuleError(PayrollServiceError):
    """Raised when a cast has no rule assigned for the date."""
    pass


class CalculationNotFoundError(PayrollServiceError):
    """Raised when payroll calculation does not exist."""
    pass


class InvalidCalculationStatusError(PayrollServiceError):
    """Raised when a calculation cannot move to the requested status."""
    pass


class NominationTypeNotFoundError(PayrollServiceError):
    """Raised when nomination type does not exist."""
    pass


class DuplicateNominationTypeError(PayrollServiceError):
    """Raised when the type name is already taken."""
    pass


class CastNotFoundError(PayrollServiceError):
    """Raised when the cast to pay does not exist."""
    pass
