"""
Trip Repository Interface

The trip row is the only aggregate the saga mutates more than once, and the
conditional counter update is the system's single concurrency-control point.
"""

from abc import ABC, abstractmethod

from src.service.trip_booking.domain.entity import Trip


class ITripRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, trip_id: str) -> Trip:
        """
        Raises:
            TripNotFoundError: no row for trip_id
            TransientStoreError: the read timed out or no replica answered
        """
        pass

    @abstractmethod
    async def reserve_tickets(
        self,
        *,
        trip_id: str,
        expected_regular: int,
        expected_earlybird: int,
        regular_count: int,
        earlybird_count: int,
    ) -> None:
        """
        Subtract both counts in one write, applied only while the stored counters
        still equal expected_regular / expected_earlybird.

        Raises:
            ConcurrentModificationError: the guard did not hold
        """
        pass

    @abstractmethod
    async def append_participant(self, *, trip_id: str, participant_id: str) -> None:
        """Append to participant_ids, creating the list when it is absent."""
        pass
