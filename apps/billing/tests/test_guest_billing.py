from decimal import Decimal

import pytest

from apps.billing.services import (
    add_order_item,
    update_order_item,
    process_payment,
    split_order_item,
    assign_order_item,
    clear_order_item_shares,
    guest_bill,
    split_bill,
    share_amounts,
    InvalidSplitError,
    VisitClosedError,
)
from apps.customers.models import Customer
from apps.payroll.models import NominationType
from apps.visits.services import add_guest, add_nomination, start_visit, transfer_guest


@pytest.fixture
def main_guest(visit):
    return visit.guests.get(is_primary_payer=True)


@pytest.fixture
def companion(visit, other_customer):
    return add_guest(visit_id=visit.id, customer_id=other_customer.id)


@pytest.fixture
def item(visit, product):
    return add_order_item(visit_id=visit.id, product_id=product.id, quantity=1)


class TestShareAmounts:

    def test_remainder_goes_to_first_share(self):
        amounts = share_amounts(Decimal('1000'), [Decimal('33.33'), Decimal('33.33'), Decimal('33.34')])

        assert amounts == [Decimal('334'), Decimal('333'), Decimal('333')]
        assert sum(amounts) == Decimal('1000')


@pytest.mark.django_db
class TestSplitOrderItem:

    def test_assign_whole_item(self, item, companion):
        share = assign_order_item(order_item_id=item.id, guest_id=companion.id)

        assert share.amount == Decimal('20000')
        assert share.share_percentage == Decimal('100')
        assert not share.is_shared

    def test_resplit_replaces_shares(self, item, main_guest, companion):
        assign_order_item(order_item_id=item.id, guest_id=companion.id)
        shares = split_order_item(
            order_item_id=item.id,
            shares=[
                {'guest_id': main_guest.id, 'percentage': '50'},
                {'guest_id': companion.id, 'percentage': '50'},
            ],
        )

        assert [s.amount for s in shares] == [Decimal('10000'), Decimal('10000')]
        assert item.guest_shares.count() == 2
        assert all(s.is_shared for s in shares)

    @pytest.mark.parametrize('percentages', [['60', '30'], ['100', '0']])
    def test_shares_must_add_up(self, item, main_guest, companion, percentages):
        with pytest.raises(InvalidSplitError):
            split_order_item(
                order_item_id=item.id,
                shares=[
                    {'guest_id': main_guest.id, 'percentage': percentages[0]},
                    {'guest_id': companion.id, 'percentage': percentages[1]},
                ],
            )

    def test_guest_listed_once(self, item, companion):
        with pytest.raises(InvalidSplitError):
            split_order_item(
                order_item_id=item.id,
                shares=[
                    {'guest_id': companion.id, 'percentage': '50'},
                    {'guest_id': companion.id, 'percentage': '50'},
                ],
            )

    def test_guest_from_other_visit_rejected(self, item, other_table):
        stranger = Customer.objects.create(name='Kato Daiki', phone_number='090-3333-4444')
        other_visit = start_visit(customer_id=stranger.id, table_id=other_table.id)

        with pytest.raises(InvalidSplitError):
            assign_order_item(order_item_id=item.id, guest_id=other_visit.guests.get().id)

    def test_quantity_change_reprices_shares(self, item, main_guest, companion):
        split_order_item(
            order_item_id=item.id,
            shares=[
                {'guest_id': main_guest.id, 'percentage': '50'},
                {'guest_id': companion.id, 'percentage': '50'},
            ],
        )
        update_order_item(order_item_id=item.id, quantity=2)

        assert sorted(s.amount for s in item.guest_shares.all()) == [Decimal('20000'), Decimal('20000')]

    def test_paid_visit_cannot_be_split(self, visit, item, companion):
        process_payment(visit_id=visit.id, payment_method='cash')

        with pytest.raises(VisitClosedError):
            assign_order_item(order_item_id=item.id, guest_id=companion.id)


@pytest.mark.django_db
class TestGuestBill:

    @pytest.fixture
    def shimei(self, db):
        return NominationType.objects.create(
            type_name='shimei', display_name='Main', price=Decimal('3000'), back_percentage=Decimal('50')
        )

    def test_guest_pays_own_items(self, item, companion):
        assign_order_item(order_item_id=item.id, guest_id=companion.id)

        bill = guest_bill(guest_id=companion.id)

        assert bill['customer_name'] == 'Suzuki Hanako'
        assert bill['items_total'] == Decimal('20000')
        assert bill['carried_total'] == Decimal('0')
        assert bill['service_charge'] == Decimal('2000')
        assert bill['tax_amount'] == Decimal('2200')
        assert bill['total_amount'] == Decimal('24200')

    def test_primary_payer_carries_unclaimed(self, visit, item, product, main_guest, companion, cast_profile, shimei):
        assign_order_item(order_item_id=item.id, guest_id=companion.id)
        add_order_item(visit_id=visit.id, product_id=product.id, quantity=1)
        add_nomination(visit_id=visit.id, cast_id=cast_profile.id, nomination_type_id=shimei.id)

        bill = guest_bill(guest_id=main_guest.id)

        assert bill['items_total'] == Decimal('0')
        assert bill['carried_total'] == Decimal('23000')
        assert bill['total_amount'] == Decimal('27830')

    def test_clearing_shares_returns_item_to_payer(self, item, main_guest, companion):
        assign_order_item(order_item_id=item.id, guest_id=companion.id)
        clear_order_item_shares(order_item_id=item.id)

        assert guest_bill(guest_id=companion.id)['subtotal'] == Decimal('0')
        assert guest_bill(guest_id=main_guest.id)['subtotal'] == Decimal('20000')

    def test_transferred_guest_leaves_items_behind(self, item, main_guest, companion, other_table):
        assign_order_item(order_item_id=item.id, guest_id=companion.id)
        regular = Customer.objects.create(name='Kato Daiki', phone_number='090-3333-4444')
        other_visit = start_visit(customer_id=regular.id, table_id=other_table.id)

        transfer_guest(guest_id=companion.id, to_visit_id=other_visit.id)

        assert guest_bill(guest_id=companion.id)['subtotal'] == Decimal('0')
        assert guest_bill(guest_id=main_guest.id)['subtotal'] == Decimal('20000')


@pytest.mark.django_db
class TestSplitBill:

    def test_one_bill_per_guest(self, visit, item, main_guest, companion):
        split_order_item(
            order_item_id=item.id,
            shares=[
                {'guest_id': main_guest.id, 'percentage': '50'},
                {'guest_id': companion.id, 'percentage': '50'},
            ],
        )

        result = split_bill(visit_id=visit.id)

        assert [g['customer_name'] for g in result['guests']] == ['Yamada Taro', 'Suzuki Hanako']
        assert [g['subtotal'] for g in result['guests']] == [Decimal('10000'), Decimal('10000')]
        assert result['unassigned_total'] == Decimal('0')

    def test_unclaimed_reported_without_payer(self, visit, item, companion):
        visit.guests.update(is_primary_payer=False)

        result = split_bill(visit_id=visit.id)

        assert result['unassigned_total'] == Decimal('20000')
        assert sum(g['subtotal'] for g in result['guests']) == Decimal('0')
