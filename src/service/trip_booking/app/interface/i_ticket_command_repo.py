from abc import ABC, abstractmethod

from src.service.trip_booking.domain.entity import Ticket


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, ticket: Ticket) -> None:
        """Write-once insert keyed by ticket id. Raises StoreError on failure or duplicate."""
        pass
