"""
Booking saga errors.

Validation errors (price, inventory, malformed input) are terminal and leave
no stored side effect. ConcurrentModificationError and TransientStoreError are
retryable: the orchestrator re-reads the trip and tries again. Everything
raised after the inventory decrement leaves the trip under-counted; those
errors carry enough context to reconcile by hand.
"""

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    StoreError,
    UpstreamError,
)
from src.service.trip_booking.domain.enum import TicketType


class InvalidBookingRequestError(DomainError):
    pass


class PriceMismatchError(DomainError):
    def __init__(self, *, claimed: float, expected: float) -> None:
        super().__init__('The price is mismatched, please provide a valid price.')
        self.claimed = claimed
        self.expected = expected


class InsufficientInventoryError(DomainError):
    def __init__(self, *, tier: TicketType, requested: int, available: int) -> None:
        super().__init__(f'There is not a sufficient {tier.value.lower()} ticket to book.')
        self.tier = tier
        self.requested = requested
        self.available = available


class InvalidStatusTransitionError(DomainError):
    def __init__(self, *, current: str, target: str) -> None:
        super().__init__(f'Cannot move from {current} to {target}')
        self.current = current
        self.target = target


class TripNotFoundError(NotFoundError):
    def __init__(self, trip_id: str) -> None:
        super().__init__(f"Could not find trip with this id: '{trip_id}'")
        self.trip_id = trip_id


class ConcurrentModificationError(ConflictError):
    retryable = True

    def __init__(self, trip_id: str) -> None:
        super().__init__(
            f'Trip {trip_id} was modified by another booking, please try again.'
        )
        self.trip_id = trip_id


class TransientStoreError(StoreError):
    retryable = True


class PaymentInitiationFailedError(UpstreamError):
    def __init__(self, message: str, *, transaction_id: str | None = None) -> None:
        super().__init__(f'Payment initiation failed: {message}')
        self.transaction_id = transaction_id


class IdentityLookupFailedError(UpstreamError):
    def __init__(self, username: str, reason: str) -> None:
        super().__init__(f'Could not resolve profile for user {username}: {reason}')
        self.username = username


class TransactionPersistenceError(StoreError):
    def __init__(self, transaction_id: str, reason: str) -> None:
        super().__init__(f'Payment {transaction_id} was initiated but could not be recorded: {reason}')
        self.transaction_id = transaction_id


class TicketIssuanceFailedError(StoreError):
    def __init__(self, *, transaction_id: str, issued_count: int, reason: str) -> None:
        super().__init__(
            f'Ticket issuance for {transaction_id} stopped after {issued_count} ticket(s): {reason}'
        )
        self.transaction_id = transaction_id
        self.issued_count = issued_count
