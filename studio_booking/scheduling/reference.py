"""
Booking reference generation.

References look like ``BK-20260115-4821``: a prefix, the issue date and
a random suffix. They are short enough to read out over the phone and
carry no information about how many bookings came before.
"""

import logging
import random
from datetime import datetime, timezone
from typing import Callable, Optional

from studio_booking.errors import DuplicateReferenceError

logger = logging.getLogger(__name__)


class BookingReferenceGenerator:
    """Issues date-prefixed references with a random suffix, retrying on collision."""

    def __init__(
        self,
        prefix: str = "BK",
        suffix_digits: int = 4,
        max_attempts: int = 10,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._prefix = prefix
        self._low = 10 ** (suffix_digits - 1)
        self._high = 10 ** suffix_digits
        self._max_attempts = max_attempts
        self._rng = rng or random.SystemRandom()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def candidate(self) -> str:
        """Return one reference candidate without checking uniqueness."""
        stamp = self._clock().strftime("%Y%m%d")
        suffix = self._rng.randrange(self._low, self._high)
        return f"{self._prefix}-{stamp}-{suffix}"

    def generate(self, is_taken: Callable[[str], bool]) -> str:
        """
        Return a reference for which ``is_taken`` is False.

        Raises:
            DuplicateReferenceError: If every attempt collided.
        """
        for attempt in range(1, self._max_attempts + 1):
            reference = self.candidate()
            if not is_taken(reference):
                return reference
            logger.debug("Reference collision on %s (attempt %d)", reference, attempt)
        raise DuplicateReferenceError(
            f"Could not allocate a unique booking reference after {self._max_attempts} attempts."
        )
