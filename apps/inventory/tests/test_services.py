from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.inventory.models import MovementType, Product
from apps.inventory.services import (
    apply_movement,
    record_movement,
    bulk_movement,
    inventory_alerts,
    inventory_stats,
    reorder_suggestions,
    movement_report,
    low_stock_count,
    InsufficientStockError,
    InvalidMovementError,
)


class TestApplyMovement:

    def test_in_out_adjustment(self):
        assert apply_movement(10, MovementType.IN, 5) == 15
        assert apply_movement(10, MovementType.OUT, 10) == 0
        assert apply_movement(10, MovementType.ADJUSTMENT, 3) == 3

    def test_never_below_zero(self):
        with pytest.raises(InsufficientStockError):
            apply_movement(2, MovementType.OUT, 3)

    def test_unknown_type(self):
        with pytest.raises(InvalidMovementError):
            apply_movement(2, 'transfer', 1)

    def test_negative_quantity(self):
        with pytest.raises(InvalidMovementError):
            apply_movement(2, MovementType.IN, -1)


@pytest.fixture
def whisky(db):
    return Product.objects.create(
        name='Whisky',
        category='whisky',
        price=Decimal('8000'),
        cost=Decimal('3000'),
        stock_quantity=5,
        low_stock_threshold=5,
        reorder_point=20,
        max_stock=50,
    )


@pytest.mark.django_db
class TestStockMovement:

    def test_movement_updates_stock(self, product, manager_user):
        movement = record_movement(
            product_id=product.id, movement_type=MovementType.IN, quantity=10, created_by=manager_user
        )

        product.refresh_from_db()
        assert product.stock_quantity == 40
        assert movement.created_by == manager_user

    def test_bulk_reports_failures(self, product, whisky):
        result = bulk_movement(rows=[
            {'product_id': product.id, 'movement_type': MovementType.OUT, 'quantity': 5},
            {'product_id': whisky.id, 'movement_type': MovementType.OUT, 'quantity': 6},
        ])

        assert len(result['succeeded']) == 1
        assert result['failed'][0]['product_id'] == str(whisky.id)
        whisky.refresh_from_db()
        assert whisky.stock_quantity == 5

    def test_movement_report(self, product):
        record_movement(product_id=product.id, movement_type=MovementType.IN, quantity=10)
        record_movement(product_id=product.id, movement_type=MovementType.OUT, quantity=4)
        today = timezone.localdate()

        report = movement_report(start_date=today - timedelta(days=1), end_date=today)

        assert report['incoming_stock'] == 10
        assert report['outgoing_stock'] == 4
        assert report['top_moved_products'][0]['total_quantity'] == 14


@pytest.mark.django_db
class TestStockReports:

    def test_alerts_critical_first(self, product, whisky):
        Product.objects.create(name='Beer', category='beer', price=Decimal('800'), stock_quantity=0)

        alerts = inventory_alerts()

        assert [a['alert_type'] for a in alerts] == ['out_of_stock', 'low_stock']
        assert alerts[1]['product_name'] == 'Whisky'

    def test_overstock_alert(self, product):
        product.stock_quantity = product.max_stock
        product.save()

        assert inventory_alerts()[0]['alert_type'] == 'overstock'

    def test_stats_and_low_stock_count(self, product, whisky):
        stats = inventory_stats()

        assert stats['total_products'] == 2
        assert stats['low_stock_items'] == 1
        assert stats['total_value'] == Decimal('640000')
        assert low_stock_count() == 1

    def test_reorder_suggestions(self, product, whisky):
        suggestions = reorder_suggestions()

        assert len(suggestions) == 1
        assert suggestions[0]['suggested_quantity'] == 45
        assert suggestions[0]['estimated_cost'] == Decimal('135000')
        assert suggestions[0]['priority'] == 'high'
