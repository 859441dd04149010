from src.service.trip_booking.domain.enum.payment_method import PaymentMethod
from src.service.trip_booking.domain.enum.ticket_status import TICKET_TRANSITIONS, TicketStatus
from src.service.trip_booking.domain.enum.ticket_type import TicketType
from src.service.trip_booking.domain.enum.transaction_status import (
    TRANSACTION_TRANSITIONS,
    AnyTransactionStatus,
    PreReservationStatus,
    TransactionStatus,
    parse_transaction_status,
)


__all__ = [
    'TRANSACTION_TRANSITIONS',
    'TICKET_TRANSITIONS',
    'AnyTransactionStatus',
    'PaymentMethod',
    'PreReservationStatus',
    'TicketStatus',
    'TicketType',
    'TransactionStatus',
    'parse_transaction_status',
]
