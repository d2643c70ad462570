"""Tests for turning a confirmed booking into a shoot draft."""

from datetime import time
from decimal import Decimal

import pytest

from studio_booking.errors import NotConfirmedError, ValidationError
from studio_booking.scheduling.converter import ShootConverter
from studio_booking.schemas.booking_schema import BookingRequest, BookingStatus

from tests.conftest import CLIENT, FIXED_NOW, PHOTOGRAPHER, SHOOT_DAY, at


def confirmed_booking(**overrides) -> BookingRequest:
    fields = dict(
        id="b1",
        booking_reference="BK-20260115-4821",
        client_id=CLIENT,
        photographer_id=PHOTOGRAPHER,
        event_type="Wedding",
        preferred_date=SHOOT_DAY,
        preferred_start_time=time(14, 0),
        estimated_duration_hours=2.5,
        location="St Kilda Pier",
        special_requirements="Drone shots if weather allows",
        estimated_price=Decimal("1290.00"),
        status=BookingStatus.CONFIRMED,
        created_date=FIXED_NOW,
        updated_date=FIXED_NOW,
    )
    fields.update(overrides)
    return BookingRequest(**fields)


@pytest.fixture
def converter(shoots) -> ShootConverter:
    return ShootConverter(shoots)


class TestBuildDraft:
    def test_fields_carried_over(self, converter):
        draft = converter.build_draft(confirmed_booking())
        assert draft.title == "Wedding - BK-20260115-4821"
        assert draft.description == "Drone shots if weather allows"
        assert draft.location == "St Kilda Pier"
        assert draft.client_id == CLIENT
        assert draft.photographer_id == PHOTOGRAPHER
        assert draft.notes == "Converted from booking BK-20260115-4821"

    def test_duration_split_into_hours_and_minutes(self, converter):
        draft = converter.build_draft(confirmed_booking())
        assert (draft.duration_hours, draft.duration_minutes) == (2, 30)

    def test_requested_window_when_not_scheduled(self, converter):
        draft = converter.build_draft(confirmed_booking())
        assert draft.scheduled_start == at(14)
        assert draft.scheduled_end == at(16, 30)

    def test_scheduled_window_preferred(self, converter):
        draft = converter.build_draft(
            confirmed_booking(scheduled_start=at(9), scheduled_end=at(11, 30))
        )
        assert draft.scheduled_start == at(9)
        assert draft.scheduled_end == at(11, 30)

    def test_price_snapshot(self, converter):
        assert converter.build_draft(confirmed_booking()).price == Decimal("1290.00")

    def test_price_defaults_to_zero(self, converter):
        assert converter.build_draft(confirmed_booking(estimated_price=None)).price == Decimal("0")

    def test_requires_confirmed(self, converter):
        with pytest.raises(NotConfirmedError):
            converter.build_draft(confirmed_booking(status=BookingStatus.PENDING))

    def test_requires_photographer(self, converter):
        with pytest.raises(ValidationError, match="photographer"):
            converter.build_draft(confirmed_booking(photographer_id=None))


class TestConvert:
    def test_creates_shoot(self, converter, shoots):
        shoot_id = converter.convert(confirmed_booking())
        assert shoot_id.startswith("SH-")
        assert [s.title for s in shoots.shoots_for_booking("BK-20260115-4821")] == [
            "Wedding - BK-20260115-4821"
        ]

    def test_same_booking_maps_to_one_shoot(self, converter, shoots):
        first = converter.convert(confirmed_booking())
        second = converter.convert(confirmed_booking())
        assert first == second
        assert shoots.count() == 1
