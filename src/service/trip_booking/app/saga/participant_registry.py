"""
Participant Registry

Adds the requester to the trip's participant list unless the trip read by the
saga already contains them. The check and the append are two separate store
operations, so two first-time bookings by the same user racing each other can
both append.
"""

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.app.interface import ITripRepo
from src.service.trip_booking.domain.entity import Trip


class ParticipantRegistry:
    def __init__(self, *, trip_repo: ITripRepo) -> None:
        self.trip_repo = trip_repo
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def register(self, *, trip: Trip, participant_id: str) -> bool:
        """Returns True when an append was issued."""
        if trip.has_participant(participant_id):
            return False

        with self.tracer.start_as_current_span(
            'saga.register_participant', attributes={'trip.id': trip.id}
        ):
            await self.trip_repo.append_participant(trip_id=trip.id, participant_id=participant_id)
            Logger.base.info(f'🧍 [PARTICIPANT] {participant_id} joined trip {trip.id}')
            return True
