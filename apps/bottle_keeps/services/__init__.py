"""Services for bottle-keep business logic."""

from .exceptions import (
    BottleKeepServiceError,
    BottleKeepNotFoundError,
    BottleNotActiveError,
)
from .bottle_management import (
    next_bottle_number,
    default_expiry,
    get_bottle_keep,
    create_bottle_keep,
    update_bottle_keep,
    delete_bottle_keep,
    serve_bottle,
    move_bottle,
    update_expired_bottles,
    search_bottle_keeps,
    storage_locations,
)
from .reporting import (
    bottle_value,
    bottle_keep_stats,
    bottle_keep_alerts,
    bottle_alert_count,
    customer_summary,
    expiry_management,
    inventory_by_location,
)

__all__ = [
    # Exceptions
    'BottleKeepServiceError',
    'BottleKeepNotFoundError',
    'BottleNotActiveError',
    # Bottles
    'next_bottle_number',
    'default_expiry',
    'get_bottle_keep',
    'create_bottle_keep',
    'update_bottle_keep',
    'delete_bottle_keep',
    'serve_bottle',
    'move_bottle',
    'update_expired_bottles',
    'search_bottle_keeps',
    'storage_locations',
    # Reports
    'bottle_value',
    'bottle_keep_stats',
    'bottle_keep_alerts',
    'bottle_alert_count',
    'customer_summary',
    'expiry_management',
    'inventory_by_location',
]
