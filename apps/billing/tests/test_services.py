from datetime import date
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.billing.services import (
    floor_yen,
    add_order_item,
    update_order_item,
    remove_order_item,
    calculate_bill,
    process_payment,
    perform_daily_closing,
    daily_report,
    ProductUnavailableError,
    VisitClosedError,
    DailyClosingError,
)
from apps.inventory.models import InventoryMovement
from apps.payroll.models import NominationType
from apps.tables.models import TableStatus
from apps.visits.models import VisitStatus
from apps.visits.services import add_nomination, end_nomination


class TestFloorYen:

    @pytest.mark.parametrize('amount,expected', [
        (Decimal('4300.99'), Decimal('4300')),
        (Decimal('0.5'), Decimal('0')),
        (Decimal('100'), Decimal('100')),
    ])
    def test_rounds_down(self, amount, expected):
        assert floor_yen(amount) == expected


@pytest.mark.django_db
class TestOrderItems:

    def test_order_takes_stock(self, visit, product):
        item = add_order_item(visit_id=visit.id, product_id=product.id, quantity=2)

        product.refresh_from_db()
        assert item.unit_price == Decimal('20000')
        assert item.total_price == Decimal('40000')
        assert product.stock_quantity == 28
        assert InventoryMovement.objects.get(product=product).reference_id == str(visit.id)

    def test_short_stock_rolls_back(self, visit, product):
        with pytest.raises(ProductUnavailableError):
            add_order_item(visit_id=visit.id, product_id=product.id, quantity=31)

        product.refresh_from_db()
        assert product.stock_quantity == 30
        assert not visit.order_items.exists()

    def test_quantity_change_moves_difference(self, visit, product):
        item = add_order_item(visit_id=visit.id, product_id=product.id, quantity=5)

        update_order_item(order_item_id=item.id, quantity=2)
        product.refresh_from_db()
        assert product.stock_quantity == 28

        remove_order_item(order_item_id=item.id)
        product.refresh_from_db()
        assert product.stock_quantity == 30

    def test_closed_visit_rejects_orders(self, visit, product):
        process_payment(visit_id=visit.id, payment_method='cash')

        with pytest.raises(VisitClosedError):
            add_order_item(visit_id=visit.id, product_id=product.id, quantity=1)


@pytest.mark.django_db
class TestBill:

    @pytest.fixture
    def nomination_type(self, db):
        return NominationType.objects.create(
            type_name='shimei', display_name='Main', price=Decimal('3000'), back_percentage=Decimal('50')
        )

    def test_bill_breakdown(self, visit, product, cast_profile, nomination_type):
        add_order_item(visit_id=visit.id, product_id=product.id, quantity=2)
        add_nomination(visit_id=visit.id, cast_id=cast_profile.id, nomination_type_id=nomination_type.id)

        bill = calculate_bill(visit_id=visit.id)

        assert bill['items_total'] == Decimal('40000')
        assert bill['nomination_total'] == Decimal('3000')
        assert bill['subtotal'] == Decimal('43000')
        assert bill['service_charge'] == Decimal('4300')
        assert bill['tax_amount'] == Decimal('4730')
        assert bill['total_amount'] == Decimal('52030')

    def test_ended_nomination_still_charged(self, visit, cast_profile, nomination_type):
        nomination = add_nomination(
            visit_id=visit.id, cast_id=cast_profile.id, nomination_type_id=nomination_type.id
        )
        end_nomination(nomination_id=nomination.id)

        bill = calculate_bill(visit_id=visit.id)
        assert bill['nomination_total'] == Decimal('3000')
        assert bill['subtotal'] == Decimal('3000')

    def test_fractions_are_floored(self, visit, product):
        add_order_item(visit_id=visit.id, product_id=product.id, quantity=1, unit_price=Decimal('1234'))

        bill = calculate_bill(visit_id=visit.id)

        # 1234 * 0.10 = 123.4 -> 123; (1234 + 123) * 0.10 = 135.7 -> 135
        assert bill['service_charge'] == Decimal('123')
        assert bill['tax_amount'] == Decimal('135')
        assert bill['total_amount'] == Decimal('1492')


@pytest.mark.django_db
class TestPayment:

    def test_payment_completes_visit(self, visit, table, product):
        add_order_item(visit_id=visit.id, product_id=product.id, quantity=1)

        paid = process_payment(visit_id=visit.id, payment_method='card')

        table.refresh_from_db()
        assert paid.status == VisitStatus.COMPLETED
        assert paid.payment_status == 'completed'
        assert paid.total_amount == Decimal('24200')
        assert paid.check_out_at is not None
        assert table.current_status == TableStatus.CLEANING
        assert table.current_visit_id is None

    def test_cannot_pay_twice(self, visit):
        process_payment(visit_id=visit.id, payment_method='cash')

        with pytest.raises(VisitClosedError):
            process_payment(visit_id=visit.id, payment_method='cash')


@pytest.mark.django_db
class TestDailyClosing:

    def test_open_visits_block_closing(self, visit):
        with pytest.raises(DailyClosingError):
            perform_daily_closing(closing_date=timezone.localdate())

    def test_close_once(self, visit, product):
        add_order_item(visit_id=visit.id, product_id=product.id, quantity=1)
        process_payment(visit_id=visit.id, payment_method='cash')
        today = timezone.localdate()

        closing = perform_daily_closing(closing_date=today)

        assert closing.total_visits == 1
        assert closing.total_cash == Decimal('24200')
        assert closing.total_card == Decimal('0')
        with pytest.raises(DailyClosingError):
            perform_daily_closing(closing_date=today)

    def test_report_top_products(self, visit, product, cast_profile):
        add_order_item(visit_id=visit.id, product_id=product.id, quantity=3, cast_id=cast_profile.id)
        process_payment(visit_id=visit.id, payment_method='card')

        report = daily_report(report_date=timezone.localdate())

        assert report['total_card'] == Decimal('72600')
        assert report['top_products'][0]['quantity'] == 3
        assert report['top_casts'][0]['cast_name'] == 'Rina'

    def test_empty_day(self, db):
        report = daily_report(report_date=date(2020, 1, 1))

        assert report['total_visits'] == 0
        assert report['top_products'] == []
