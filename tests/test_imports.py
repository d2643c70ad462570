"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""

import pytest


class TestSchemaImports:
    def test_import_booking_schema(self):
        from studio_booking.schemas.booking_schema import BookingDraft, BookingRequest, BookingStatus
        assert BookingStatus.PENDING == "pending"
        assert BookingRequest is not None

    def test_import_availability_schema(self):
        from studio_booking.schemas.availability_schema import AvailabilitySlot
        assert AvailabilitySlot is not None

    def test_import_party_schema(self):
        from studio_booking.schemas.party_schema import CallerContext, ServicePackage
        assert CallerContext(user_id="u1", roles=frozenset({"admin"})).is_staff
        assert not CallerContext(user_id="u2").is_staff


class TestSchedulingImports:
    def test_import_scheduling_package(self):
        from studio_booking.scheduling import (
            AvailabilityStore, BookingLifecycle, BookingStateMachine, SchedulingEngine,
        )
        assert BookingLifecycle is not None

    def test_import_store_package(self):
        from studio_booking.store import (
            BookingRepository, InMemoryBookingRepository, InMemorySlotRepository, SlotRepository,
        )
        assert issubclass(InMemoryBookingRepository, BookingRepository)
        assert issubclass(InMemorySlotRepository, SlotRepository)

    def test_ports_are_abstract(self):
        from studio_booking.store.ports import BookingRepository
        with pytest.raises(TypeError):
            BookingRepository()


class TestToolImports:
    def test_package_catalog(self):
        from studio_booking.tools.packages import PACKAGE_CATALOG, PackageCatalog
        assert len(PACKAGE_CATALOG) >= 5
        assert PackageCatalog().get_package(" Wedding-Elopement ").effective_price == 1290

    def test_directories(self):
        from studio_booking.tools.clients import InMemoryClientDirectory
        from studio_booking.tools.photographers import InMemoryPhotographerDirectory
        assert InMemoryClientDirectory().client_exists("client-ava")
        assert InMemoryPhotographerDirectory().photographer_exists("ph-maya")


class TestErrorTaxonomy:
    def test_business_errors_share_a_base(self):
        from studio_booking.errors import (
            AlreadyTerminalError, BookingError, InvalidTransitionError, NotConfirmedError,
        )
        assert issubclass(AlreadyTerminalError, InvalidTransitionError)
        assert issubclass(NotConfirmedError, BookingError)

    def test_storage_error_is_not_a_business_error(self):
        from studio_booking.errors import BookingError, StorageError
        assert not issubclass(StorageError, BookingError)


class TestConfigImport:
    def test_import_config(self):
        from studio_booking.config import settings
        assert settings.studio.name is not None
        assert settings.booking.reference_suffix_digits >= 3


class TestLoggingContext:
    def test_request_id_attached(self, caplog):
        from studio_booking.logging_context import get_request_logger, new_request_id
        request_id = new_request_id()
        logger = get_request_logger("studio_booking.test")
        with caplog.at_level("INFO", logger="studio_booking.test"):
            logger.info("hello")
        assert caplog.records[-1].request_id == request_id


class TestConsoleDemo:
    def test_console_session_imports(self):
        from console_demo import ConsoleSession
        session = ConsoleSession()
        assert "race" in session.SCENARIOS
        assert session.service.count_pending() == 0

    def test_cli_entry_point(self):
        import main
        assert callable(main.main)
