"""Tests for the booking status state machine."""

import pytest

from studio_booking.errors import (
    AlreadyTerminalError,
    InvalidTransitionError,
    NotConfirmedError,
)
from studio_booking.scheduling.state_machine import BookingStateMachine, BookingTrigger
from studio_booking.schemas.booking_schema import BookingStatus


class TestPendingTransitions:
    def test_confirm_goes_to_confirmed(self, state_machine):
        new = state_machine.next_status(BookingStatus.PENDING, BookingTrigger.CONFIRM)
        assert new == BookingStatus.CONFIRMED

    def test_decline_goes_to_declined(self, state_machine):
        new = state_machine.next_status(BookingStatus.PENDING, BookingTrigger.DECLINE)
        assert new == BookingStatus.DECLINED

    def test_cancel_goes_to_cancelled(self, state_machine):
        new = state_machine.next_status(BookingStatus.PENDING, BookingTrigger.CANCEL)
        assert new == BookingStatus.CANCELLED

    def test_convert_from_pending_is_not_confirmed(self, state_machine):
        with pytest.raises(NotConfirmedError):
            state_machine.next_status(BookingStatus.PENDING, BookingTrigger.CONVERT)


class TestConfirmedTransitions:
    def test_convert_goes_to_completed(self, state_machine):
        new = state_machine.next_status(BookingStatus.CONFIRMED, BookingTrigger.CONVERT)
        assert new == BookingStatus.COMPLETED

    def test_cancel_goes_to_cancelled(self, state_machine):
        new = state_machine.next_status(BookingStatus.CONFIRMED, BookingTrigger.CANCEL)
        assert new == BookingStatus.CANCELLED

    def test_confirm_again_is_invalid(self, state_machine):
        with pytest.raises(InvalidTransitionError, match="Valid actions"):
            state_machine.next_status(BookingStatus.CONFIRMED, BookingTrigger.CONFIRM)

    def test_decline_confirmed_is_invalid(self, state_machine):
        with pytest.raises(InvalidTransitionError):
            state_machine.next_status(BookingStatus.CONFIRMED, BookingTrigger.DECLINE)

    def test_confirmed_is_not_terminal_error(self, state_machine):
        with pytest.raises(InvalidTransitionError) as excinfo:
            state_machine.next_status(BookingStatus.CONFIRMED, BookingTrigger.DECLINE)
        assert not isinstance(excinfo.value, AlreadyTerminalError)


class TestTerminalStatuses:
    @pytest.mark.parametrize(
        "status", [BookingStatus.DECLINED, BookingStatus.CANCELLED, BookingStatus.COMPLETED]
    )
    @pytest.mark.parametrize(
        "trigger", [BookingTrigger.CONFIRM, BookingTrigger.DECLINE, BookingTrigger.CANCEL]
    )
    def test_no_trigger_leaves_terminal_status(self, state_machine, status, trigger):
        with pytest.raises(AlreadyTerminalError):
            state_machine.next_status(status, trigger)

    @pytest.mark.parametrize(
        "status", [BookingStatus.DECLINED, BookingStatus.CANCELLED, BookingStatus.COMPLETED]
    )
    def test_convert_from_terminal_is_not_confirmed(self, state_machine, status):
        with pytest.raises(NotConfirmedError):
            state_machine.next_status(status, BookingTrigger.CONVERT)

    def test_terminal_flags(self, state_machine):
        assert state_machine.is_terminal(BookingStatus.DECLINED)
        assert state_machine.is_terminal(BookingStatus.CANCELLED)
        assert state_machine.is_terminal(BookingStatus.COMPLETED)
        assert not state_machine.is_terminal(BookingStatus.PENDING)
        assert not state_machine.is_terminal(BookingStatus.CONFIRMED)


class TestValidTriggers:
    def test_valid_triggers_from_pending(self, state_machine):
        triggers = state_machine.valid_triggers(BookingStatus.PENDING)
        assert set(triggers) == {
            BookingTrigger.CONFIRM, BookingTrigger.DECLINE, BookingTrigger.CANCEL,
        }

    def test_valid_triggers_from_confirmed(self, state_machine):
        triggers = state_machine.valid_triggers(BookingStatus.CONFIRMED)
        assert set(triggers) == {BookingTrigger.CONVERT, BookingTrigger.CANCEL}

    def test_no_triggers_from_completed(self, state_machine):
        assert state_machine.valid_triggers(BookingStatus.COMPLETED) == []

    def test_can_transition(self, state_machine):
        assert state_machine.can_transition(BookingStatus.PENDING, BookingTrigger.CONFIRM)
        assert not state_machine.can_transition(BookingStatus.DECLINED, BookingTrigger.CANCEL)

    def test_every_transition_starts_from_a_live_status(self):
        for t in BookingStateMachine.TRANSITIONS:
            assert t.from_status in (BookingStatus.PENDING, BookingStatus.CONFIRMED)
