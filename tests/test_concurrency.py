"""Concurrency tests: simultaneous staff actions never double-book a photographer."""

import threading
from concurrent.futures import ThreadPoolExecutor
from itertools import combinations

from studio_booking.errors import BookingError, NoAvailabilityError, OverlapError
from studio_booking.scheduling.conflicts import overlaps
from studio_booking.scheduling.locks import KeyedLocks
from studio_booking.schemas.booking_schema import BookingStatus

from tests.conftest import CLIENT, OTHER_PHOTOGRAPHER, PHOTOGRAPHER, at, make_draft


def _assert_no_overlapping_commitments(availability, photographer_id: str) -> None:
    committed = [s for s in availability.list_photographer_slots(photographer_id) if s.is_committed]
    for a, b in combinations(committed, 2):
        assert not overlaps(a.start_time, a.end_time, b.start_time, b.end_time), (a, b)


def _run_together(*actions):
    """Start every action at the same moment and collect result or raised BookingError."""
    barrier = threading.Barrier(len(actions))

    def run(action):
        barrier.wait()
        try:
            return action()
        except BookingError as exc:
            return exc

    with ThreadPoolExecutor(max_workers=len(actions)) as pool:
        return list(pool.map(run, actions))


class TestConfirmRace:
    def test_only_one_confirmation_wins(self, lifecycle, availability, morning_slot):
        bookings = [lifecycle.create(make_draft()) for _ in range(8)]
        outcomes = _run_together(
            *[lambda b=b: lifecycle.confirm(b.id, photographer_id=PHOTOGRAPHER) for b in bookings]
        )

        winners = [o for o in outcomes if not isinstance(o, BookingError)]
        losers = [o for o in outcomes if isinstance(o, BookingError)]
        assert len(winners) == 1
        assert all(isinstance(o, NoAvailabilityError) for o in losers)

        slot = availability.get_slot(morning_slot.id)
        assert slot.booking_request_id == winners[0].id
        assert lifecycle.count_by_status(BookingStatus.CONFIRMED) == 1
        assert lifecycle.count_pending() == 7

    def test_same_booking_confirmed_twice_at_once(self, lifecycle, availability, morning_slot, pending):
        availability.create_slot(PHOTOGRAPHER, at(10), at(12))
        outcomes = _run_together(
            lambda: lifecycle.confirm(pending.id, photographer_id=PHOTOGRAPHER),
            lambda: lifecycle.confirm(pending.id, photographer_id=PHOTOGRAPHER),
        )
        assert sum(not isinstance(o, BookingError) for o in outcomes) == 1
        assert len(availability.slots.find_by_booking(pending.id)) == 1

    def test_different_photographers_do_not_contend(self, lifecycle, availability):
        availability.create_slot(PHOTOGRAPHER, at(10), at(12))
        availability.create_slot(OTHER_PHOTOGRAPHER, at(10), at(12))
        first = lifecycle.create(make_draft())
        second = lifecycle.create(make_draft())

        outcomes = _run_together(
            lambda: lifecycle.confirm(first.id, photographer_id=PHOTOGRAPHER),
            lambda: lifecycle.confirm(second.id, photographer_id=OTHER_PHOTOGRAPHER),
        )
        assert all(o.status == BookingStatus.CONFIRMED for o in outcomes)


class TestBlockRace:
    def test_block_and_confirm_cannot_both_win(self, lifecycle, availability, morning_slot, pending):
        outcomes = _run_together(
            lambda: lifecycle.confirm(pending.id, photographer_id=PHOTOGRAPHER),
            lambda: availability.block_slot(PHOTOGRAPHER, at(10), at(12), notes="sick day"),
        )
        confirm_outcome, block_outcome = outcomes
        if isinstance(confirm_outcome, BookingError):
            assert isinstance(confirm_outcome, NoAvailabilityError)
            assert not isinstance(block_outcome, BookingError)
        else:
            assert isinstance(block_outcome, OverlapError)
        _assert_no_overlapping_commitments(availability, PHOTOGRAPHER)

    def test_many_blocks_for_one_window(self, availability):
        outcomes = _run_together(
            *[lambda: availability.block_slot(PHOTOGRAPHER, at(10), at(12)) for _ in range(6)]
        )
        assert sum(not isinstance(o, BookingError) for o in outcomes) == 1
        _assert_no_overlapping_commitments(availability, PHOTOGRAPHER)


class TestReferenceRace:
    def test_parallel_creates_get_unique_references(self, lifecycle):
        outcomes = _run_together(
            *[lambda: lifecycle.create(make_draft(client_id=CLIENT)) for _ in range(16)]
        )
        references = {o.booking_reference for o in outcomes}
        assert len(references) == 16


class TestKeyedLocks:
    def test_lock_is_reentrant(self):
        locks = KeyedLocks("test")
        with locks.hold("a"):
            with locks.hold("a"):
                assert locks.active_keys() == ["a"]

    def test_idle_locks_are_dropped(self):
        locks = KeyedLocks("test")
        with locks.hold("a"):
            pass
        assert locks.active_keys() == []

    def test_hold_many_deduplicates(self):
        locks = KeyedLocks("test")
        with locks.hold_many(["b", "a", "b"]):
            assert sorted(locks.active_keys()) == ["a", "b"]
        assert locks.active_keys() == []

    def test_hold_blocks_other_threads(self):
        locks = KeyedLocks("test")
        entered = threading.Event()

        def contender():
            with locks.hold("a"):
                entered.set()

        with locks.hold("a"):
            worker = threading.Thread(target=contender)
            worker.start()
            assert not entered.wait(timeout=0.1)
        worker.join(timeout=2)
        assert entered.is_set()
