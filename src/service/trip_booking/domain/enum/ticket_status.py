from enum import StrEnum


class TicketStatus(StrEnum):
    BLOCKED = 'BLOCKED'
    BOOKED = 'BOOKED'
    CANCELED = 'CANCELED'


TICKET_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.BLOCKED: frozenset({TicketStatus.BOOKED, TicketStatus.CANCELED}),
    TicketStatus.BOOKED: frozenset({TicketStatus.CANCELED}),
    TicketStatus.CANCELED: frozenset(),
}
