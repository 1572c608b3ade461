"""Services for inventory business logic."""

from .exceptions import (
    InventoryServiceError,
    ProductNotFoundError,
    InsufficientStockError,
    InvalidMovementError,
)
from .product_management import (
    get_product,
    create_product,
    update_product,
    delete_product,
    bulk_delete_products,
    search_products,
    product_categories,
)
from .stock_movement import (
    apply_movement,
    record_movement,
    bulk_movement,
    movement_history,
)
from .reporting import (
    inventory_stats,
    inventory_alerts,
    low_stock_count,
    product_report,
    movement_report,
    reorder_suggestions,
)

__all__ = [
    # Exceptions
    'InventoryServiceError',
    'ProductNotFoundError',
    'InsufficientStockError',
    'InvalidMovementError',
    # Products
    'get_product',
    'create_product',
    'update_product',
    'delete_product',
    'bulk_delete_products',
    'search_products',
    'product_categories',
    # Movements
    'apply_movement',
    'record_movement',
    'bulk_movement',
    'movement_history',
    # Reports
    'inventory_stats',
    'inventory_alerts',
    'low_stock_count',
    'product_report',
    'movement_report',
    'reorder_suggestions',
]
