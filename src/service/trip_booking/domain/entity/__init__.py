from src.service.trip_booking.domain.entity.ticket_entity import Ticket
from src.service.trip_booking.domain.entity.transaction_entity import (
    Transaction,
    generate_transaction_id,
    to_minor_units,
)
from src.service.trip_booking.domain.entity.trip_entity import Trip


__all__ = ['Ticket', 'Transaction', 'Trip', 'generate_transaction_id', 'to_minor_units']
