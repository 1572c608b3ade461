"""Product catalogue: CRUD, search and soft deletion."""

import logging
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import F, QuerySet

from ..models import Product
from .exceptions import ProductNotFoundError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'name', 'category', 'price', 'cost', 'stock_quantity',
    'low_stock_threshold', 'reorder_point', 'max_stock', 'is_active',
)


def get_product(*, product_id: UUID, lock: bool = False) -> Product:
    qs = Product.objects.select_for_update() if lock else Product.objects.all()
    try:
        return qs.get(id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {product_id} not found")


@transaction.atomic
def create_product(*, created_by=None, **fields) -> Product:
    data = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}
    product = Product.objects.create(created_by=created_by, updated_by=created_by, **data)
    logger.info('Product %s (%s) created', product.id, product.name)
    return product


@transaction.atomic
def update_product(*, product_id: UUID, updated_by=None, **fields) -> Product:
    product = get_product(product_id=product_id, lock=True)
    for key, value in fields.items():
        if key in EDITABLE_FIELDS:
            setattr(product, key, value)
    product.updated_by = updated_by
    product.save()
    return product


@transaction.atomic
def delete_product(*, product_id: UUID, updated_by=None) -> Product:
    """Soft delete: the product stays for history but leaves the catalogue."""
    product = get_product(product_id=product_id, lock=True)
    product.is_active = False
    product.updated_by = updated_by
    product.save(update_fields=['is_active', 'updated_by', 'updated_at'])
    logger.info('Product %s deactivated', product.id)
    return product


def bulk_delete_products(*, product_ids: Iterable[UUID], updated_by=None) -> dict:
    """Soft delete many products; each row succeeds or fails on its own."""
    succeeded, failed = [], []
    for product_id in product_ids:
        try:
            delete_product(product_id=product_id, updated_by=updated_by)
        except ProductNotFoundError as e:
            logger.warning('Bulk delete skipped %s: %s', product_id, e)
            failed.append({'id': str(product_id), 'error': str(e)})
        else:
            succeeded.append(str(product_id))
    return {'succeeded': succeeded, 'failed': failed}


def search_products(
    *,
    query: str = '',
    category: Optional[str] = None,
    is_active: Optional[bool] = True,
    low_stock: Optional[bool] = None,
    out_of_stock: Optional[bool] = None,
) -> QuerySet:
    qs = Product.objects.all()
    if is_active is not None:
        qs = qs.filter(is_active=is_active)
    if query:
        qs = qs.filter(name__icontains=query)
    if category:
        qs = qs.filter(category=category)
    if low_stock:
        qs = qs.filter(stock_quantity__lte=F('low_stock_threshold'))
    if out_of_stock:
        qs = qs.filter(stock_quantity=0)
    return qs


def product_categories() -> list:
    return list(
        Product.objects
        .filter(is_active=True)
        .order_by('category')
        .values_list('category', flat=True)
        .distinct()
    )
