from itertools import product

import pytest

from services.booking.domain.enum import BookingStatus, LegStatus

_ALLOWED_BOOKING_TRANSITIONS = {
    (BookingStatus.PENDING, BookingStatus.CONFIRMED),
    (BookingStatus.PENDING, BookingStatus.REJECTED),
    (BookingStatus.CONFIRMED, BookingStatus.ACTIVE),
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    (BookingStatus.ACTIVE, BookingStatus.COMPLETED),
}


class TestBookingStatus:
    @pytest.mark.parametrize(
        "current, target", list(product(BookingStatus, BookingStatus))
    )
    def test_transition_table(self, current, target):
        """表にある遷移のみ許可し、それ以外（同一ステータスを含む）は拒否する"""
        expected = (current, target) in _ALLOWED_BOOKING_TRANSITIONS
        assert current.can_transition_to(target) is expected

    @pytest.mark.parametrize(
        "status", [BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.REJECTED]
    )
    def test_terminal_statuses_have_no_outgoing_transitions(self, status):
        """終端ステータスからはどこにも遷移できない"""
        assert status.is_terminal()
        assert not any(status.can_transition_to(target) for target in BookingStatus)


class TestLegStatus:
    def test_pending_leg_can_be_activated_directly(self):
        assert LegStatus.PENDING.can_transition_to(LegStatus.ACTIVE)

    def test_active_leg_cannot_be_cancelled(self):
        assert not LegStatus.ACTIVE.can_transition_to(LegStatus.CANCELLED)

    def test_completed_and_cancelled_are_terminal(self):
        assert LegStatus.COMPLETED.is_terminal()
        assert LegStatus.CANCELLED.is_terminal()
        assert not LegStatus.CONFIRMED.is_terminal()
