from src.service.trip_booking.app.saga.inventory_reservation_manager import (
    InventoryReservationManager,
)
from src.service.trip_booking.app.saga.participant_registry import ParticipantRegistry
from src.service.trip_booking.app.saga.payment_orchestrator import PaymentOrchestrator
from src.service.trip_booking.app.saga.request_validator import RequestValidator
from src.service.trip_booking.app.saga.requester_profile_resolver import RequesterProfileResolver
from src.service.trip_booking.app.saga.ticket_issuer import TicketIssuer


__all__ = [
    'InventoryReservationManager',
    'ParticipantRegistry',
    'PaymentOrchestrator',
    'RequestValidator',
    'RequesterProfileResolver',
    'TicketIssuer',
]
