from abc import ABC, abstractmethod

from src.service.trip_booking.domain.entity import Transaction


class ITransactionCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, transaction: Transaction) -> None:
        """Write-once insert keyed by transaction id. Raises StoreError on failure or duplicate."""
        pass
