from src.service.trip_booking.domain.exception.booking_exceptions import (
    ConcurrentModificationError,
    IdentityLookupFailedError,
    InsufficientInventoryError,
    InvalidBookingRequestError,
    InvalidStatusTransitionError,
    PaymentInitiationFailedError,
    PriceMismatchError,
    TicketIssuanceFailedError,
    TransactionPersistenceError,
    TransientStoreError,
    TripNotFoundError,
)


__all__ = [
    'ConcurrentModificationError',
    'IdentityLookupFailedError',
    'InsufficientInventoryError',
    'InvalidBookingRequestError',
    'InvalidStatusTransitionError',
    'PaymentInitiationFailedError',
    'PriceMismatchError',
    'TicketIssuanceFailedError',
    'TransactionPersistenceError',
    'TransientStoreError',
    'TripNotFoundError',
]
