"""Stock statistics, alerts, reports and reorder suggestions."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from uuid import UUID

from django.db.models import F

from ..models import MovementType, Product
from .product_management import get_product
from .stock_movement import movement_history

SEVERITY_ORDER = {'critical': 0, 'warning': 1}
PRIORITY_ORDER = {'high': 0, 'medium': 1, 'low': 2}


def _active_products():
    return Product.objects.filter(is_active=True)


def inventory_stats() -> dict:
    products = list(_active_products())
    return {
        'total_products': len(products),
        'low_stock_items': sum(1 for p in products if p.is_low_stock),
        'out_of_stock_items': sum(1 for p in products if p.is_out_of_stock),
        'total_value': sum((p.stock_quantity * p.price for p in products), Decimal('0')),
    }


def inventory_alerts() -> list:
    """
    One alert per product at most.

    Out of stock is critical; low stock and overstock are warnings.
    Critical alerts come first.
    """
    alerts = []
    for product in _active_products():
        if product.is_out_of_stock:
            alert_type, severity, threshold = 'out_of_stock', 'critical', product.low_stock_threshold
        elif product.is_low_stock:
            alert_type, severity, threshold = 'low_stock', 'warning', product.low_stock_threshold
        elif product.stock_quantity >= product.max_stock:
            alert_type, severity, threshold = 'overstock', 'warning', product.max_stock
        else:
            continue
        alerts.append({
            'product_id': product.id,
            'product_name': product.name,
            'current_stock': product.stock_quantity,
            'threshold': threshold,
            'alert_type': alert_type,
            'severity': severity,
        })
    alerts.sort(key=lambda a: SEVERITY_ORDER[a['severity']])
    return alerts


def low_stock_count() -> int:
    return _active_products().filter(stock_quantity__lte=F('low_stock_threshold')).count()


def product_report(*, product_id: UUID) -> dict:
    product = get_product(product_id=product_id)
    movements = list(movement_history(product_id=product.id)[:50])
    return {
        'product': product,
        'current_stock': product.stock_quantity,
        'movements': movements,
        'last_movement': movements[0] if movements else None,
        'is_low_stock': product.is_low_stock,
        'is_out_of_stock': product.is_out_of_stock,
        'estimated_value': product.stock_quantity * product.cost,
    }


def movement_report(*, start_date: date, end_date: date) -> dict:
    """Totals over the period plus the five most moved products."""
    movements = list(movement_history(start_date=start_date, end_date=end_date))

    incoming = sum(m.quantity for m in movements if m.movement_type == MovementType.IN)
    outgoing = sum(m.quantity for m in movements if m.movement_type == MovementType.OUT)
    adjustments = sum(1 for m in movements if m.movement_type == MovementType.ADJUSTMENT)

    per_product = defaultdict(lambda: {'total_quantity': 0, 'movement_count': 0})
    names = {}
    for m in movements:
        per_product[m.product_id]['total_quantity'] += abs(m.quantity)
        per_product[m.product_id]['movement_count'] += 1
        names[m.product_id] = m.product.name

    top = sorted(per_product.items(), key=lambda item: item[1]['total_quantity'], reverse=True)[:5]

    return {
        'start_date': start_date,
        'end_date': end_date,
        'total_movements': len(movements),
        'incoming_stock': incoming,
        'outgoing_stock': outgoing,
        'adjustments': adjustments,
        'top_moved_products': [
            {'product_id': pid, 'product_name': names[pid], **stats} for pid, stats in top
        ],
    }


def reorder_suggestions() -> list:
    """Products at or under their reorder point, most urgent first."""
    suggestions = []
    for product in _active_products().filter(stock_quantity__lte=F('reorder_point')):
        quantity = max(product.max_stock - product.stock_quantity, 0)
        priority = 'high' if product.is_out_of_stock or product.is_low_stock else 'low'
        suggestions.append({
            'product_id': product.id,
            'product_name': product.name,
            'current_stock': product.stock_quantity,
            'reorder_point': product.reorder_point,
            'suggested_quantity': quantity,
            'estimated_cost': quantity * product.cost,
            'priority': priority,
        })
    suggestions.sort(key=lambda s: PRIORITY_ORDER[s['priority']])
    return suggestions
