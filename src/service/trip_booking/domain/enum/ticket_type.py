from enum import StrEnum


class TicketType(StrEnum):
    EARLYBIRD = 'EARLYBIRD'
    REGULAR = 'REGULAR'
