import attrs

from src.service.trip_booking.domain.enum import TicketType


@attrs.frozen
class TicketRequest:
    trip_id: str
    earlybird_count: int
    regular_count: int
    total_price: float

    @property
    def total_count(self) -> int:
        return self.earlybird_count + self.regular_count

    def count_for(self, tier: TicketType) -> int:
        return self.earlybird_count if tier is TicketType.EARLYBIRD else self.regular_count
