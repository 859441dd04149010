from datetime import datetime, timezone
from typing import Optional

import attrs
import uuid_utils

from src.service.trip_booking.domain.enum import TICKET_TRANSITIONS, TicketStatus, TicketType
from src.service.trip_booking.domain.exception import InvalidStatusTransitionError
from src.service.trip_booking.domain.value_object import ContactPerson


@attrs.define
class Ticket:
    ticket_id: str
    trip_id: str
    type: TicketType
    ticket_price: float
    sequence: int
    status: TicketStatus
    block_timeout: int
    transaction_id: str
    requester: str
    contact_person: ContactPerson
    created_at: int
    download_url: str = ''

    @classmethod
    def create_blocked(
        cls,
        *,
        trip_id: str,
        type: TicketType,
        ticket_price: float,
        sequence: int,
        transaction_id: str,
        requester: str,
        contact_person: ContactPerson,
        block_timeout_minutes: int,
        now: Optional[datetime] = None,
    ) -> 'Ticket':
        created_at = int((now or datetime.now(timezone.utc)).timestamp())
        return cls(
            ticket_id=str(uuid_utils.uuid7()),
            trip_id=trip_id,
            type=type,
            ticket_price=ticket_price,
            sequence=sequence,
            status=TicketStatus.BLOCKED,
            block_timeout=created_at + block_timeout_minutes * 60,
            transaction_id=transaction_id,
            requester=requester,
            contact_person=contact_person,
            created_at=created_at,
        )

    def transition_to(self, target: TicketStatus) -> 'Ticket':
        if target not in TICKET_TRANSITIONS[self.status]:
            raise InvalidStatusTransitionError(current=self.status.value, target=target.value)
        return attrs.evolve(self, status=target)
