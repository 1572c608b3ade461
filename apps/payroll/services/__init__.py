"""Services for payroll business logic."""

from .exceptions import (
    PayrollServiceError,
    PayrollRuleNotFoundError,
    NoActiveRuleError,
    CalculationNotFoundError,
    CastNotFoundError,
    InvalidCalculationStatusError,
    NominationTypeNotFoundError,
    DuplicateNominationTypeError,
)
from .rule_management import (
    get_rule,
    create_rule,
    update_rule,
    deactivate_rule,
    list_rules,
    assign_rule,
    active_rule,
    list_assignments,
    get_nomination_type,
    create_nomination_type,
    update_nomination_type,
    delete_nomination_type,
    list_nomination_types,
)
from .calculation import (
    tiered_back_pay,
    work_hours,
    cast_sales,
    nomination_pay,
    calculate_payroll,
    save_calculation,
    get_calculation,
    approve_calculation,
    calculate_monthly_payroll,
    payroll_history,
)

__all__ = [
    # Exceptions
    'PayrollServiceError',
    'PayrollRuleNotFoundError',
    'NoActiveRuleError',
    'CalculationNotFoundError',
    'CastNotFoundError',
    'InvalidCalculationStatusError',
    'NominationTypeNotFoundError',
    'DuplicateNominationTypeError',
    # Rules
    'get_rule',
    'create_rule',
    'update_rule',
    'deactivate_rule',
    'list_rules',
    'assign_rule',
    'active_rule',
    'list_assignments',
    # Nomination types
    'get_nomination_type',
    'create_nomination_type',
    'update_nomination_type',
    'delete_nomination_type',
    'list_nomination_types',
    # Calculation
    'tiered_back_pay',
    'work_hours',
    'cast_sales',
    'nomination_pay',
    'calculate_payroll',
    'save_calculation',
    'get_calculation',
    'approve_calculation',
    'calculate_monthly_payroll',
    'payroll_history',
]
