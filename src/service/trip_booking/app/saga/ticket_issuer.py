"""
Ticket Issuer

Writes one BLOCKED ticket per reserved seat, regular tier first. Sequences run
1..n within each tier of a transaction. A failed write stops issuance; tickets
already written stay in place.
"""

from datetime import datetime, timezone
from typing import List, Optional

from opentelemetry import trace

from src.platform.exception.exceptions import StoreError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.trip_booking.app.interface import ITicketCommandRepo
from src.service.trip_booking.domain.entity import Ticket, Transaction, Trip
from src.service.trip_booking.domain.enum import TicketType
from src.service.trip_booking.domain.exception import TicketIssuanceFailedError
from src.service.trip_booking.domain.value_object import Requester, TicketRequest


ISSUE_ORDER = (TicketType.REGULAR, TicketType.EARLYBIRD)


class TicketIssuer:
    def __init__(self, *, ticket_command_repo: ITicketCommandRepo, block_timeout_minutes: int) -> None:
        self.ticket_command_repo = ticket_command_repo
        self.block_timeout_minutes = block_timeout_minutes
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def issue(
        self,
        *,
        trip: Trip,
        request: TicketRequest,
        transaction: Transaction,
        requester: Requester,
        now: Optional[datetime] = None,
    ) -> List[Ticket]:
        moment = now or datetime.now(timezone.utc)
        issued: List[Ticket] = []

        with self.tracer.start_as_current_span(
            'saga.issue_tickets',
            attributes={'transaction.id': transaction.id, 'tickets.count': request.total_count},
        ):
            for tier in ISSUE_ORDER:
                count = request.count_for(tier)
                for sequence in range(1, count + 1):
                    ticket = Ticket.create_blocked(
                        trip_id=trip.id,
                        type=tier,
                        ticket_price=trip.price_for(tier),
                        sequence=sequence,
                        transaction_id=transaction.id,
                        requester=requester.sub,
                        contact_person=requester.contact_person,
                        block_timeout_minutes=self.block_timeout_minutes,
                        now=moment,
                    )
                    try:
                        await self.ticket_command_repo.create(ticket=ticket)
                    except StoreError as e:
                        raise TicketIssuanceFailedError(
                            transaction_id=transaction.id,
                            issued_count=len(issued),
                            reason=e.message,
                        ) from e
                    issued.append(ticket)

                if count:
                    metrics.record_tickets_issued(ticket_type=tier.value, count=count)

            Logger.base.info(f'🎟️ [TICKETS] Issued {len(issued)} ticket(s) for {transaction.id}')
            return issued
