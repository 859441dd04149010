from enum import StrEnum


class TransactionStatus(StrEnum):
    INITIATED = 'INITIATED'
    PAID = 'PAID'
    CANCELED = 'CANCELED'
    FAILED = 'FAILED'
    REFUND_INITIATED = 'REFUND_INITIATED'
    REFUNDED = 'REFUNDED'


class PreReservationStatus(StrEnum):
    """Label set of the sharelead pre-reservation flow."""

    INITIATE = 'INITIATE'
    RESERVE = 'RESERVE'
    CAPTURE = 'CAPTURE'
    FAILED = 'FAILED'
    TIMEOUT = 'TIMEOUT'


AnyTransactionStatus = TransactionStatus | PreReservationStatus


# Terminal statuses map to an empty set
TRANSACTION_TRANSITIONS: dict[AnyTransactionStatus, frozenset[AnyTransactionStatus]] = {
    TransactionStatus.INITIATED: frozenset(
        {TransactionStatus.PAID, TransactionStatus.CANCELED, TransactionStatus.FAILED}
    ),
    TransactionStatus.PAID: frozenset({TransactionStatus.REFUND_INITIATED}),
    TransactionStatus.REFUND_INITIATED: frozenset({TransactionStatus.REFUNDED}),
    TransactionStatus.CANCELED: frozenset(),
    TransactionStatus.FAILED: frozenset(),
    TransactionStatus.REFUNDED: frozenset(),
    PreReservationStatus.INITIATE: frozenset(
        {PreReservationStatus.RESERVE, PreReservationStatus.FAILED, PreReservationStatus.TIMEOUT}
    ),
    PreReservationStatus.RESERVE: frozenset(
        {PreReservationStatus.CAPTURE, PreReservationStatus.FAILED, PreReservationStatus.TIMEOUT}
    ),
    PreReservationStatus.CAPTURE: frozenset(),
    PreReservationStatus.FAILED: frozenset(),
    PreReservationStatus.TIMEOUT: frozenset(),
}


def parse_transaction_status(value: str, *, pre_reservation: bool = False) -> AnyTransactionStatus:
    """Rebuild a stored status; raises ValueError for labels outside the flow's set."""
    if pre_reservation:
        return PreReservationStatus(value)
    return TransactionStatus(value)
