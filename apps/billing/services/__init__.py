"""Services for billing business logic."""

from .exceptions import (
    BillingServiceError,
    OrderItemNotFoundError,
    VisitClosedError,
    ProductUnavailableError,
    DailyClosingError,
    InvalidSplitError,
)
from .order_management import (
    get_order_item,
    add_order_item,
    update_order_item,
    remove_order_item,
    visit_order_items,
    share_amounts,
)
from .payment import floor_yen, calculate_bill, process_payment
from .guest_billing import (
    unassigned_total,
    split_order_item,
    assign_order_item,
    clear_order_item_shares,
    guest_bill,
    split_bill,
)
from .daily_closing import (
    daily_report,
    open_visit_count,
    is_closed,
    perform_daily_closing,
)

__all__ = [
    # Exceptions
    'BillingServiceError',
    'OrderItemNotFoundError',
    'VisitClosedError',
    'ProductUnavailableError',
    'DailyClosingError',
    'InvalidSplitError',
    # Orders
    'get_order_item',
    'add_order_item',
    'update_order_item',
    'remove_order_item',
    'visit_order_items',
    'share_amounts',
    # Payment
    'floor_yen',
    'calculate_bill',
    'process_payment',
    # Guests
    'unassigned_total',
    'split_order_item',
    'assign_order_item',
    'clear_order_item_shares',
    'guest_bill',
    'split_bill',
    # Closing
    'daily_report',
    'open_visit_count',
    'is_closed',
    'perform_daily_closing',
]
