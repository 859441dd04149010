import time
from typing import Any, Mapping, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.trip_booking.app.dto import BookingResult
from src.service.trip_booking.app.interface import ITripRepo
from src.service.trip_booking.app.saga import (
    InventoryReservationManager,
    ParticipantRegistry,
    PaymentOrchestrator,
    RequestValidator,
    RequesterProfileResolver,
    TicketIssuer,
)
from src.service.trip_booking.domain.entity import Trip
from src.service.trip_booking.domain.exception import (
    ConcurrentModificationError,
    TransientStoreError,
)
from src.service.trip_booking.domain.value_object import Requester, TicketRequest


class BookTripTicketsUseCase:
    """
    Book trip tickets - the booking saga

    Flow:
    1. Parse the input map (fail fast, nothing read yet)
    2. Resolve the requester's contact details from the identity provider
    3. Read trip → validate price and inventory → conditional decrement,
       retried on fresh state while the write loses a race
    4. Initiate payment and record the INITIATED transaction
    5. Register the requester as a trip participant
    6. Issue one BLOCKED ticket per reserved seat

    Steps 4-6 run after seats are taken. Their failures surface as errors and
    nothing already written is undone.
    """

    def __init__(
        self,
        *,
        trip_repo: ITripRepo,
        request_validator: RequestValidator,
        requester_profile_resolver: RequesterProfileResolver,
        inventory_reservation_manager: InventoryReservationManager,
        payment_orchestrator: PaymentOrchestrator,
        participant_registry: ParticipantRegistry,
        ticket_issuer: TicketIssuer,
        max_attempts: int = 5,
        backoff_initial: float = 0.05,
        backoff_max: float = 1.0,
        backoff_jitter: float = 0.05,
    ) -> None:
        self.trip_repo = trip_repo
        self.request_validator = request_validator
        self.requester_profile_resolver = requester_profile_resolver
        self.inventory_reservation_manager = inventory_reservation_manager
        self.payment_orchestrator = payment_orchestrator
        self.participant_registry = participant_registry
        self.ticket_issuer = ticket_issuer
        self.max_attempts = max_attempts
        self.backoff_initial = backoff_initial
        self.backoff_max = backoff_max
        self.backoff_jitter = backoff_jitter
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        trip_repo: ITripRepo = Depends(Provide[Container.trip_repo]),
        request_validator: RequestValidator = Depends(Provide[Container.request_validator]),
        requester_profile_resolver: RequesterProfileResolver = Depends(
            Provide[Container.requester_profile_resolver]
        ),
        inventory_reservation_manager: InventoryReservationManager = Depends(
            Provide[Container.inventory_reservation_manager]
        ),
        payment_orchestrator: PaymentOrchestrator = Depends(
            Provide[Container.payment_orchestrator]
        ),
        participant_registry: ParticipantRegistry = Depends(
            Provide[Container.participant_registry]
        ),
        ticket_issuer: TicketIssuer = Depends(Provide[Container.ticket_issuer]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            trip_repo=trip_repo,
            request_validator=request_validator,
            requester_profile_resolver=requester_profile_resolver,
            inventory_reservation_manager=inventory_reservation_manager,
            payment_orchestrator=payment_orchestrator,
            participant_registry=participant_registry,
            ticket_issuer=ticket_issuer,
            max_attempts=settings.RESERVATION_MAX_ATTEMPTS,
            backoff_initial=settings.RESERVATION_BACKOFF_INITIAL_SECONDS,
            backoff_max=settings.RESERVATION_BACKOFF_MAX_SECONDS,
            backoff_jitter=settings.RESERVATION_BACKOFF_JITTER_SECONDS,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        Logger.base.warning(
            f'🔁 [RESERVE] Attempt {retry_state.attempt_number} lost: {error}; re-reading trip'
        )

    async def _reserve_seats(self, *, request: TicketRequest) -> Trip:
        """
        Read → validate → conditional write, retried while the write loses a
        race or a read times out. Validation errors end the loop at once.
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.backoff_initial, max=self.backoff_max, jitter=self.backoff_jitter
            ),
            retry=retry_if_exception_type((ConcurrentModificationError, TransientStoreError)),
            before_sleep=self._log_retry,
            reraise=True,
        ):
            with attempt:
                trip = await self.trip_repo.get_by_id(trip_id=request.trip_id)
                self.request_validator.validate(request=request, trip=trip)
                reserved_trip = await self.inventory_reservation_manager.reserve(
                    trip=trip, request=request
                )
        return reserved_trip

    @Logger.io
    async def book(self, *, requester: Requester, raw_input: Mapping[str, Any]) -> BookingResult:
        start = time.perf_counter()
        result_label = 'success'

        with self.tracer.start_as_current_span(
            'use_case.book_trip_tickets', attributes={'requester.sub': requester.sub}
        ) as span:
            try:
                request = self.request_validator.parse(raw_input=raw_input)
                span.set_attribute('trip.id', request.trip_id)

                requester = await self.requester_profile_resolver.resolve(requester=requester)

                trip = await self._reserve_seats(request=request)

                transaction, payment = await self.payment_orchestrator.initiate(
                    trip=trip, requester=requester, amount=request.total_price
                )
                span.set_attribute('transaction.id', transaction.id)

                await self.participant_registry.register(trip=trip, participant_id=requester.sub)

                tickets = await self.ticket_issuer.issue(
                    trip=trip, request=request, transaction=transaction, requester=requester
                )
            except Exception as e:
                result_label = type(e).__name__
                raise
            finally:
                metrics.record_booking(
                    flow='trip', result=result_label, duration=time.perf_counter() - start
                )

        Logger.base.info(
            f'✅ [BOOKING] {transaction.id}: {request.regular_count} regular + '
            f'{request.earlybird_count} earlybird on trip {trip.id}'
        )
        return BookingResult(
            transaction=transaction, redirect_url=payment.url, tickets=tickets, trip=trip
        )
