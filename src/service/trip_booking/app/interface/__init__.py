"""Application layer interfaces (Ports)"""

from src.service.trip_booking.app.interface.i_identity_provider import IIdentityProvider
from src.service.trip_booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.trip_booking.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.trip_booking.app.interface.i_transaction_command_repo import (
    ITransactionCommandRepo,
)
from src.service.trip_booking.app.interface.i_trip_repo import ITripRepo


__all__ = [
    'IIdentityProvider',
    'IPaymentGateway',
    'ITicketCommandRepo',
    'ITransactionCommandRepo',
    'ITripRepo',
]
