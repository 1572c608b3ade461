"""Order items on a visit. Stock moves with every order change."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.inventory.models import MovementType, Product
from apps.inventory.services import InventoryServiceError, record_movement
from apps.visits.models import VisitStatus
from apps.visits.services import get_visit
from ..models import OrderItem
from .exceptions import OrderItemNotFoundError, ProductUnavailableError, VisitClosedError
from .payment import floor_yen

logger = logging.getLogger(__name__)

HUNDRED = Decimal('100')


def _require_active(visit) -> None:
    if visit.status != VisitStatus.ACTIVE:
        raise VisitClosedError(f"Visit {visit.session_code} is {visit.status}")


def _move_stock(order_item: OrderItem, movement_type: str, quantity: int, created_by=None) -> None:
    try:
        record_movement(
            product_id=order_item.product_id,
            movement_type=movement_type,
            quantity=quantity,
            reason=f"Order {order_item.visit.session_code}",
            reference_id=str(order_item.visit_id),
            created_by=created_by,
        )
    except InventoryServiceError as e:
        raise ProductUnavailableError(str(e)) from e


def share_amounts(total: Decimal, percentages: list) -> list:
    """Floor each share to whole yen; the first share absorbs the remainder."""
    amounts = [floor_yen(total * Decimal(p) / HUNDRED) for p in percentages]
    if amounts:
        amounts[0] += total - sum(amounts)
    return amounts


def _reprice_shares(order_item: OrderItem) -> None:
    shares = list(order_item.guest_shares.order_by('created_at', 'id'))
    amounts = share_amounts(order_item.total_price, [share.share_percentage for share in shares])
    for share, amount in zip(shares, amounts):
        share.amount = amount
        share.save(update_fields=['amount'])


def get_order_item(*, order_item_id: UUID) -> OrderItem:
    try:
        return OrderItem.objects.select_related('visit', 'product').get(id=order_item_id)
    except OrderItem.DoesNotExist:
        raise OrderItemNotFoundError(f"Order item {order_item_id} not found")


@transaction.atomic
def add_order_item(
    *,
    visit_id: UUID,
    product_id: UUID,
    quantity: int,
    unit_price: Optional[Decimal] = None,
    cast_id: Optional[UUID] = None,
    notes: str = '',
    created_by=None,
) -> OrderItem:
    """
    Add a product to an active visit and take it out of stock.

    The unit price defaults to the current product price.

    Raises:
        VisitClosedError: If the visit is not active
        ProductUnavailableError: If the product is inactive or stock is short
    """
    visit = get_visit(visit_id=visit_id, lock=True)
    _require_active(visit)

    try:
        product = Product.objects.get(id=product_id, is_active=True)
    except Product.DoesNotExist:
        raise ProductUnavailableError(f"Product {product_id} is not available")

    order_item = OrderItem(
        visit=visit,
        product=product,
        cast_id=cast_id,
        quantity=quantity,
        unit_price=product.price if unit_price is None else unit_price,
        notes=notes,
        created_by=created_by,
    )
    order_item.save()
    _move_stock(order_item, MovementType.OUT, quantity, created_by=created_by)

    logger.info('Order %s x%s added to visit %s', product.name, quantity, visit.session_code)
    return order_item


@transaction.atomic
def update_order_item(
    *,
    order_item_id: UUID,
    quantity: Optional[int] = None,
    unit_price: Optional[Decimal] = None,
    notes: Optional[str] = None,
    updated_by=None,
) -> OrderItem:
    """
    Change quantity, price or notes.

    A quantity change moves the difference in stock. Guest shares keep
    their percentages and are repriced.
    """
    order_item = get_order_item(order_item_id=order_item_id)
    _require_active(order_item.visit)

    if quantity is not None and quantity != order_item.quantity:
        delta = quantity - order_item.quantity
        movement_type = MovementType.OUT if delta > 0 else MovementType.IN
        _move_stock(order_item, movement_type, abs(delta), created_by=updated_by)
        order_item.quantity = quantity
    if unit_price is not None:
        order_item.unit_price = unit_price
    if notes is not None:
        order_item.notes = notes

    order_item.save()
    _reprice_shares(order_item)
    return order_item


@transaction.atomic
def remove_order_item(*, order_item_id: UUID, removed_by=None) -> None:
    """Delete an order item and put its quantity back in stock."""
    order_item = get_order_item(order_item_id=order_item_id)
    _require_active(order_item.visit)

    _move_stock(order_item, MovementType.IN, order_item.quantity, created_by=removed_by)
    order_item.delete()
    logger.info('Order item %s removed', order_item_id)


def visit_order_items(*, visit_id: UUID) -> QuerySet:
    return (
        OrderItem.objects
        .filter(visit_id=visit_id)
        .select_related('product', 'cast')
        .prefetch_related('guest_shares__guest__customer')
    )
