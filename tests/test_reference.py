"""Tests for booking reference generation and uniqueness."""

import random
import re

import pytest

from studio_booking.errors import DuplicateReferenceError
from studio_booking.scheduling.reference import BookingReferenceGenerator

from tests.conftest import FIXED_NOW, make_draft


def _generator(**kwargs) -> BookingReferenceGenerator:
    kwargs.setdefault("rng", random.Random(7))
    kwargs.setdefault("clock", lambda: FIXED_NOW)
    return BookingReferenceGenerator(**kwargs)


class TestFormat:
    def test_date_prefix_and_four_digit_suffix(self):
        reference = _generator().generate(lambda r: False)
        assert re.fullmatch(r"BK-20260115-\d{4}", reference)

    def test_custom_prefix_and_digits(self):
        reference = _generator(prefix="NL", suffix_digits=6).generate(lambda r: False)
        assert re.fullmatch(r"NL-20260115-\d{6}", reference)

    def test_suffix_never_has_leading_zero(self):
        gen = _generator()
        for _ in range(200):
            assert gen.candidate().split("-")[-1][0] != "0"


class TestCollisions:
    def test_retries_until_free(self):
        taken = set()
        probe = _generator()
        taken.add(probe.candidate())
        taken.add(probe.candidate())

        reference = _generator().generate(lambda r: r in taken)
        assert reference not in taken

    def test_gives_up_after_max_attempts(self):
        with pytest.raises(DuplicateReferenceError, match="3 attempts"):
            _generator(max_attempts=3).generate(lambda r: True)


class TestLifecycleReferences:
    def test_references_are_unique_across_many_bookings(self, lifecycle):
        references = {lifecycle.create(make_draft()).booking_reference for _ in range(150)}
        assert len(references) == 150

    def test_reference_is_immutable_in_store(self, lifecycle, bookings, pending):
        tampered = pending.model_copy(update={"booking_reference": "BK-20260115-0000"})
        with pytest.raises(ValueError, match="immutable"):
            bookings.save(tampered)
