"""
Inventory Reservation Manager

Single conditional decrement of both tier counters on a trip. The write is
accepted only while the stored counters still equal what this attempt read;
otherwise another booking got there first and the caller re-reads and retries.
"""

import attrs
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.trip_booking.app.interface import ITripRepo
from src.service.trip_booking.domain.entity import Trip
from src.service.trip_booking.domain.exception import ConcurrentModificationError
from src.service.trip_booking.domain.value_object import TicketRequest


class InventoryReservationManager:
    def __init__(self, *, trip_repo: ITripRepo) -> None:
        self.trip_repo = trip_repo
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def reserve(self, *, trip: Trip, request: TicketRequest) -> Trip:
        """
        Returns the trip as it stands after the decrement.

        Raises:
            ConcurrentModificationError: counters changed since `trip` was read
        """
        with self.tracer.start_as_current_span(
            'saga.reserve_inventory',
            attributes={
                'trip.id': trip.id,
                'tickets.regular': request.regular_count,
                'tickets.earlybird': request.earlybird_count,
            },
        ):
            try:
                await self.trip_repo.reserve_tickets(
                    trip_id=trip.id,
                    expected_regular=trip.available_regular_tickets,
                    expected_earlybird=trip.available_earlybird_tickets,
                    regular_count=request.regular_count,
                    earlybird_count=request.earlybird_count,
                )
            except ConcurrentModificationError:
                metrics.record_reservation_conflict(trip_id=trip.id)
                Logger.base.warning(
                    f'⚔️ [RESERVE] Trip {trip.id} changed since read '
                    f'(regular={trip.available_regular_tickets}, '
                    f'earlybird={trip.available_earlybird_tickets})'
                )
                raise

            reserved = attrs.evolve(
                trip,
                available_regular_tickets=trip.available_regular_tickets - request.regular_count,
                available_earlybird_tickets=trip.available_earlybird_tickets
                - request.earlybird_count,
            )
            Logger.base.info(
                f'🎫 [RESERVE] Trip {trip.id}: regular {trip.available_regular_tickets}'
                f'→{reserved.available_regular_tickets}, earlybird '
                f'{trip.available_earlybird_tickets}→{reserved.available_earlybird_tickets}'
            )
            return reserved
