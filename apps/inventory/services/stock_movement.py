"""Stock movements. Every stock change goes through ``record_movement``."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from ..models import InventoryMovement, MovementType
from .exceptions import InsufficientStockError, InvalidMovementError, InventoryServiceError
from .product_management import get_product

logger = logging.getLogger(__name__)


def apply_movement(current: int, movement_type: str, quantity: int) -> int:
    """
    Stock level after a movement.

    ``in`` adds, ``out`` subtracts and ``adjustment`` replaces the level.

    Raises:
        InvalidMovementError: Unknown type or negative quantity
        InsufficientStockError: Result would be below zero
    """
    if quantity < 0:
        raise InvalidMovementError('Quantity must not be negative')

    if movement_type == MovementType.IN:
        new_stock = current + quantity
    elif movement_type == MovementType.OUT:
        new_stock = current - quantity
    elif movement_type == MovementType.ADJUSTMENT:
        new_stock = quantity
    else:
        raise InvalidMovementError(f"Unknown movement type: {movement_type}")

    if new_stock < 0:
        raise InsufficientStockError(f"Only {current} in stock, cannot remove {quantity}")
    return new_stock


@transaction.atomic
def record_movement(
    *,
    product_id: UUID,
    movement_type: str,
    quantity: int,
    unit_cost: Optional[Decimal] = None,
    reason: str = '',
    reference_id: str = '',
    created_by=None,
) -> InventoryMovement:
    """Lock the product row, apply the movement and log it."""
    product = get_product(product_id=product_id, lock=True)
    new_stock = apply_movement(product.stock_quantity, movement_type, quantity)

    movement = InventoryMovement.objects.create(
        product=product,
        movement_type=movement_type,
        quantity=quantity,
        unit_cost=unit_cost,
        reason=reason,
        reference_id=reference_id,
        created_by=created_by,
    )
    product.stock_quantity = new_stock
    product.save(update_fields=['stock_quantity', 'updated_at'])

    logger.info(
        'Stock %s %s x%s -> %s', product.name, movement_type, quantity, new_stock
    )
    return movement


def bulk_movement(*, rows: Iterable[dict], created_by=None) -> dict:
    """
    Apply many movements one at a time.

    Returns:
        dict with 'succeeded' movement ids and 'failed' rows with errors
    """
    succeeded, failed = [], []
    for row in rows:
        try:
            movement = record_movement(created_by=created_by, **row)
        except InventoryServiceError as e:
            logger.warning('Bulk movement failed for %s: %s', row.get('product_id'), e)
            failed.append({'product_id': str(row.get('product_id')), 'error': str(e)})
        else:
            succeeded.append(str(movement.id))
    return {'succeeded': succeeded, 'failed': failed}


def movement_history(
    *,
    product_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> QuerySet:
    qs = InventoryMovement.objects.select_related('product')
    if product_id:
        qs = qs.filter(product_id=product_id)
    if start_date:
        qs = qs.filter(created_at__date__gte=start_date)
    if end_date:
        qs = qs.filter(created_at__date__lte=end_date)
    return qs
