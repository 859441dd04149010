from src.service.trip_booking.domain.value_object.contact_person import ContactPerson
from src.service.trip_booking.domain.value_object.requester import Requester
from src.service.trip_booking.domain.value_object.ticket_request import TicketRequest


__all__ = ['ContactPerson', 'Requester', 'TicketRequest']
