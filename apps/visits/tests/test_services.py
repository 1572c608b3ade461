import pytest

from apps.tables.models import TableStatus
from apps.visits.models import VisitStatus, PaymentStatus
from apps.visits.services import (
    start_visit,
    move_table,
    cancel_visit,
    add_nomination,
    end_nomination,
    TableUnavailableError,
    VisitNotActiveError,
    CastAlreadyEngagedError,
)


@pytest.mark.django_db
class TestStartVisit:

    def test_table_becomes_occupied(self, visit, table):
        table.refresh_from_db()

        assert visit.session_code.startswith('V')
        assert table.current_status == TableStatus.OCCUPIED
        assert table.current_visit_id == visit.id
        assert visit.table_segments.count() == 1

    def test_one_active_visit_per_table(self, visit, other_customer, table):
        with pytest.raises(TableUnavailableError):
            start_visit(customer_id=other_customer.id, table_id=table.id)

    def test_cleaning_table_cannot_be_used(self, customer, table):
        table.current_status = TableStatus.CLEANING
        table.save()

        with pytest.raises(TableUnavailableError):
            start_visit(customer_id=customer.id, table_id=table.id)

    def test_reserved_table_can_be_used(self, customer, table):
        table.current_status = TableStatus.RESERVED
        table.save()

        visit = start_visit(customer_id=customer.id, table_id=table.id)
        assert visit.status == VisitStatus.ACTIVE


@pytest.mark.django_db
class TestMoveTable:

    def test_move_updates_both_tables(self, visit, table, other_table):
        moved = move_table(visit_id=visit.id, to_table_id=other_table.id, reason='upgrade')

        table.refresh_from_db()
        other_table.refresh_from_db()
        assert moved.table_id == other_table.id
        assert table.current_status == TableStatus.CLEANING
        assert table.current_visit_id is None
        assert other_table.current_status == TableStatus.OCCUPIED

        segments = list(moved.table_segments.order_by('started_at'))
        assert len(segments) == 2
        assert segments[0].ended_at is not None
        assert segments[1].ended_at is None
        assert segments[1].reason == 'upgrade'

    def test_same_table_rejected(self, visit, table):
        with pytest.raises(TableUnavailableError):
            move_table(visit_id=visit.id, to_table_id=table.id)

    def test_cancelled_visit_cannot_move(self, visit, other_table):
        cancel_visit(visit_id=visit.id)

        with pytest.raises(VisitNotActiveError):
            move_table(visit_id=visit.id, to_table_id=other_table.id)


@pytest.mark.django_db
class TestCancelVisit:

    def test_cancel_releases_table_and_nominations(self, visit, table, cast_profile):
        nomination = add_nomination(visit_id=visit.id, cast_id=cast_profile.id)

        cancelled = cancel_visit(visit_id=visit.id, reason='left early')

        table.refresh_from_db()
        nomination.refresh_from_db()
        assert cancelled.status == VisitStatus.CANCELLED
        assert cancelled.payment_status == PaymentStatus.CANCELLED
        assert 'left early' in cancelled.notes
        assert table.current_status == TableStatus.CLEANING
        assert nomination.is_active is False

    def test_cannot_cancel_twice(self, visit):
        cancel_visit(visit_id=visit.id)

        with pytest.raises(VisitNotActiveError):
            cancel_visit(visit_id=visit.id)


@pytest.mark.django_db
class TestNominations:

    def test_fee_copied_from_type(self, visit, cast_profile, shimei):
        nomination = add_nomination(
            visit_id=visit.id, cast_id=cast_profile.id, nomination_type_id=shimei.id
        )

        shimei.price = 5000
        shimei.save()
        nomination.refresh_from_db()
        assert nomination.fee_amount == 3000
        assert nomination.back_percentage == 50

    def test_cast_engaged_once_at_a_time(self, visit, cast_profile):
        add_nomination(visit_id=visit.id, cast_id=cast_profile.id)

        with pytest.raises(CastAlreadyEngagedError):
            add_nomination(visit_id=visit.id, cast_id=cast_profile.id, role='help')

    def test_can_renominate_after_ending(self, visit, cast_profile):
        first = add_nomination(visit_id=visit.id, cast_id=cast_profile.id)
        end_nomination(nomination_id=first.id)

        second = add_nomination(visit_id=visit.id, cast_id=cast_profile.id)
        assert second.is_active is True
