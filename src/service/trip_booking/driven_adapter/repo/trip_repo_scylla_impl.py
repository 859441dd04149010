"""
Trip Repository - ScyllaDB Implementation

The reservation is a lightweight transaction: the UPDATE carries an IF clause
on both available counters, so Paxos serialises competing bookings on the same
trip row and at most one of them sees `[applied] = True` for a given read.
"""

from typing import Any

from cassandra import OperationTimedOut, ReadTimeout, Unavailable, WriteTimeout
from cassandra.cluster import NoHostAvailable
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.database.scylla_setting import execute_cql
from src.platform.exception.exceptions import StoreError
from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.app.interface import ITripRepo
from src.service.trip_booking.domain.entity import Trip
from src.service.trip_booking.domain.exception import (
    ConcurrentModificationError,
    TransientStoreError,
    TripNotFoundError,
)


class TripRepoScyllaImpl(ITripRepo):
    def __init__(self, *, settings: Settings) -> None:
        self.table = settings.TRIPS_TABLE
        self.tracer = trace.get_tracer(__name__)

    @staticmethod
    def _row_to_entity(row: Any) -> Trip:
        return Trip(
            id=row.id,
            available_earlybird_tickets=row.available_earlybird_tickets or 0,
            earlybird_ticket_price=row.earlybird_ticket_price or 0.0,
            available_regular_tickets=row.available_regular_tickets or 0,
            regular_ticket_price=row.regular_ticket_price or 0.0,
            booking_reference=row.booking_reference or '',
            total_sold_tickets=row.total_sold_tickets or 0,
            total_cancelled_tickets=row.total_cancelled_tickets or 0,
            participant_ids=list(row.participant_ids or []),
        )

    @Logger.io
    async def get_by_id(self, *, trip_id: str) -> Trip:
        with self.tracer.start_as_current_span('db.scylla.get_trip', attributes={'trip.id': trip_id}):
            try:
                result = await execute_cql(
                    f"""
                    SELECT id, available_earlybird_tickets, earlybird_ticket_price,
                           available_regular_tickets, regular_ticket_price,
                           total_sold_tickets, total_cancelled_tickets,
                           booking_reference, participant_ids
                    FROM {self.table}
                    WHERE id = %s
                    """,
                    (trip_id,),
                )
            except (OperationTimedOut, ReadTimeout, Unavailable, NoHostAvailable) as e:
                raise TransientStoreError(f'Reading trip {trip_id} failed: {e}') from e

            row = result.one()
            if row is None:
                raise TripNotFoundError(trip_id)
            return self._row_to_entity(row)

    @Logger.io
    async def reserve_tickets(
        self,
        *,
        trip_id: str,
        expected_regular: int,
        expected_earlybird: int,
        regular_count: int,
        earlybird_count: int,
    ) -> None:
        with self.tracer.start_as_current_span(
            'db.scylla.reserve_tickets', attributes={'trip.id': trip_id}
        ):
            try:
                result = await execute_cql(
                    f"""
                    UPDATE {self.table}
                    SET available_regular_tickets = %s, available_earlybird_tickets = %s
                    WHERE id = %s
                    IF available_regular_tickets = %s AND available_earlybird_tickets = %s
                    """,
                    (
                        expected_regular - regular_count,
                        expected_earlybird - earlybird_count,
                        trip_id,
                        expected_regular,
                        expected_earlybird,
                    ),
                )
            except (Unavailable, NoHostAvailable) as e:
                # Rejected before the Paxos round started; nothing was written
                raise TransientStoreError(f'Reserving on trip {trip_id} failed: {e}') from e
            except (WriteTimeout, OperationTimedOut) as e:
                # Outcome unknown; only a fresh read can tell, so do not replay
                raise StoreError(f'Reservation on trip {trip_id} timed out: {e}') from e

            if not result.was_applied:
                raise ConcurrentModificationError(trip_id)

    @Logger.io
    async def append_participant(self, *, trip_id: str, participant_id: str) -> None:
        with self.tracer.start_as_current_span(
            'db.scylla.append_participant', attributes={'trip.id': trip_id}
        ):
            try:
                # Appending to a null list creates it
                await execute_cql(
                    f'UPDATE {self.table} SET participant_ids = participant_ids + %s WHERE id = %s',
                    ([participant_id], trip_id),
                )
            except (OperationTimedOut, WriteTimeout, Unavailable, NoHostAvailable) as e:
                raise StoreError(f'Registering participant on trip {trip_id} failed: {e}') from e
