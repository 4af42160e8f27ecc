"""Per-form submitting flags."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Hashable, Set

from atelier.core.exceptions import DuplicateSubmissionError

logger = logging.getLogger(__name__)


class SubmissionGuard:
    """
    Tracks forms with a submission in flight.

    A second submission of the same form by the same caller is rejected
    until the first one finishes, successfully or not.
    """

    def __init__(self):
        self._in_flight: Set[Hashable] = set()

    def is_submitting(self, key: Hashable) -> bool:
        return key in self._in_flight

    @asynccontextmanager
    async def submitting(self, key: Hashable) -> AsyncIterator[None]:
        if key in self._in_flight:
            logger.info(f"Rejected duplicate submission for {key}")
            raise DuplicateSubmissionError()
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)


submissions = SubmissionGuard()
