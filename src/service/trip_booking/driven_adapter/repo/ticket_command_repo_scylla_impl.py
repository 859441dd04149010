from cassandra import DriverException, RequestExecutionException
from cassandra.cluster import NoHostAvailable
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.database.scylla_setting import execute_cql
from src.platform.exception.exceptions import StoreError
from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.app.interface import ITicketCommandRepo
from src.service.trip_booking.domain.entity import Ticket


class TicketCommandRepoScyllaImpl(ITicketCommandRepo):
    def __init__(self, *, settings: Settings) -> None:
        self.table = settings.TICKETS_TABLE
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def create(self, *, ticket: Ticket) -> None:
        with self.tracer.start_as_current_span(
            'db.scylla.insert_ticket',
            attributes={'ticket.id': ticket.ticket_id, 'transaction.id': ticket.transaction_id},
        ):
            try:
                result = await execute_cql(
                    f"""
                    INSERT INTO {self.table} (
                        ticket_id, trip_id, ticket_price, sequence, status, type,
                        block_timeout, transaction_id, requester,
                        contact_person_name, contact_person_phone, contact_person_email,
                        created_at, download_url
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    IF NOT EXISTS
                    """,
                    (
                        ticket.ticket_id,
                        ticket.trip_id,
                        ticket.ticket_price,
                        ticket.sequence,
                        ticket.status.value,
                        ticket.type.value,
                        ticket.block_timeout,
                        ticket.transaction_id,
                        ticket.requester,
                        ticket.contact_person.name,
                        ticket.contact_person.phone,
                        ticket.contact_person.email,
                        ticket.created_at,
                        ticket.download_url,
                    ),
                )
            except (DriverException, RequestExecutionException, NoHostAvailable) as e:
                raise StoreError(f'Inserting ticket failed: {e}') from e

            if not result.was_applied:
                raise StoreError(f'Ticket {ticket.ticket_id} already exists')
