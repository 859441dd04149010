from typing import List

import attrs

from src.service.trip_booking.domain.enum import TicketType


@attrs.define
class Trip:
    id: str
    available_earlybird_tickets: int
    earlybird_ticket_price: float
    available_regular_tickets: int
    regular_ticket_price: float
    booking_reference: str
    total_sold_tickets: int = 0
    total_cancelled_tickets: int = 0
    participant_ids: List[str] = attrs.field(factory=list)

    def price_for(self, tier: TicketType) -> float:
        if tier is TicketType.EARLYBIRD:
            return self.earlybird_ticket_price
        return self.regular_ticket_price

    def available_for(self, tier: TicketType) -> int:
        if tier is TicketType.EARLYBIRD:
            return self.available_earlybird_tickets
        return self.available_regular_tickets

    def expected_price(self, *, earlybird_count: int, regular_count: int) -> float:
        # Same float expression the booking client evaluates; compared with ==
        return (self.earlybird_ticket_price * float(earlybird_count)) + (
            self.regular_ticket_price * float(regular_count)
        )

    def has_participant(self, participant_id: str) -> bool:
        return participant_id in self.participant_ids
