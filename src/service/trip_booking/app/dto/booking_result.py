from typing import List

import attrs

from src.service.trip_booking.domain.entity import Ticket, Transaction, Trip


@attrs.define(frozen=True)
class BookingResult:
    transaction: Transaction
    redirect_url: str
    tickets: List[Ticket]
    trip: Trip  # trip state as reserved (counters already decremented)

    @property
    def transaction_id(self) -> str:
        return self.transaction.id
