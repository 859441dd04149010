"""
In-memory adapters for saga tests.

InMemoryTripRepo applies the same guard as the Scylla conditional update: the
decrement lands only while both counters equal the values the caller read.
get_by_id yields to the loop after taking its snapshot, so two bookings started
together both read before either writes.
"""

import asyncio
from typing import Any, Dict, List, Optional

import attrs

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import StoreError
from src.service.trip_booking.app.command.book_trip_tickets_use_case import (
    BookTripTicketsUseCase,
)
from src.service.trip_booking.app.command.initiate_sharelead_pre_reservation_use_case import (
    InitiateShareleadPreReservationUseCase,
)
from src.service.trip_booking.app.dto import PaymentInitiationRequest, PaymentInitiationResult
from src.service.trip_booking.app.interface import (
    IIdentityProvider,
    IPaymentGateway,
    ITicketCommandRepo,
    ITransactionCommandRepo,
    ITripRepo,
)
from src.service.trip_booking.app.saga import (
    InventoryReservationManager,
    ParticipantRegistry,
    PaymentOrchestrator,
    RequestValidator,
    RequesterProfileResolver,
    TicketIssuer,
)
from src.service.trip_booking.domain.entity import Ticket, Transaction, Trip
from src.service.trip_booking.domain.exception import (
    ConcurrentModificationError,
    IdentityLookupFailedError,
    PaymentInitiationFailedError,
    TripNotFoundError,
)
from src.service.trip_booking.domain.value_object import ContactPerson, Requester


FALLBACK_URL = 'https://sharebus.example/payment-complete'
PAYMENT_URL_PREFIX = 'https://pay.example/'


def make_trip(**overrides: Any) -> Trip:
    values: Dict[str, Any] = {
        'id': 'trip-0001',
        'available_earlybird_tickets': 180,
        'earlybird_ticket_price': 400.0,
        'available_regular_tickets': 200,
        'regular_ticket_price': 500.0,
        'booking_reference': 'SB1001',
    }
    values.update(overrides)
    return Trip(**values)


def make_requester(sub: str = 'user-sub-1', **overrides: Any) -> Requester:
    values: Dict[str, Any] = {
        'sub': sub,
        'username': sub,
        'issuer': 'https://cognito-idp.eu-north-1.amazonaws.com/eu-north-1_TestPool',
        'contact_person': ContactPerson(
            name='Kari Nordmann', phone='4712345678', email='kari@example.com'
        ),
    }
    values.update(overrides)
    return Requester(**values)


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        'VIPPS_FALLBACK': FALLBACK_URL,
        'VIPPS_CALLBACK_PREFIX': 'https://api.sharebus.example/vipps',
        'VIPPS_MSN': '123456',
    }
    values.update(overrides)
    return Settings(**values)


class InMemoryTripRepo(ITripRepo):
    def __init__(self) -> None:
        self.trips: Dict[str, Trip] = {}
        self.reads = 0
        self.conflicts = 0
        self.appends: List[str] = []

    def add(self, trip: Trip) -> None:
        self.trips[trip.id] = attrs.evolve(trip, participant_ids=list(trip.participant_ids))

    def stored(self, trip_id: str) -> Trip:
        return self.trips[trip_id]

    async def get_by_id(self, *, trip_id: str) -> Trip:
        self.reads += 1
        trip = self.trips.get(trip_id)
        if trip is None:
            raise TripNotFoundError(trip_id)
        snapshot = attrs.evolve(trip, participant_ids=list(trip.participant_ids))
        await asyncio.sleep(0)
        return snapshot

    async def reserve_tickets(
        self,
        *,
        trip_id: str,
        expected_regular: int,
        expected_earlybird: int,
        regular_count: int,
        earlybird_count: int,
    ) -> None:
        trip = self.trips[trip_id]
        current = (trip.available_regular_tickets, trip.available_earlybird_tickets)
        if current != (expected_regular, expected_earlybird):
            self.conflicts += 1
            raise ConcurrentModificationError(trip_id)
        self.trips[trip_id] = attrs.evolve(
            trip,
            available_regular_tickets=expected_regular - regular_count,
            available_earlybird_tickets=expected_earlybird - earlybird_count,
        )

    async def append_participant(self, *, trip_id: str, participant_id: str) -> None:
        self.appends.append(participant_id)
        trip = self.trips[trip_id]
        self.trips[trip_id] = attrs.evolve(
            trip, participant_ids=[*trip.participant_ids, participant_id]
        )


class InMemoryTransactionRepo(ITransactionCommandRepo):
    def __init__(self) -> None:
        self.transactions: Dict[str, Transaction] = {}
        self.error: Optional[Exception] = None

    async def create(self, *, transaction: Transaction) -> None:
        if self.error is not None:
            raise self.error
        if transaction.id in self.transactions:
            raise StoreError(f'Transaction {transaction.id} already exists')
        self.transactions[transaction.id] = transaction


class InMemoryTicketRepo(ITicketCommandRepo):
    def __init__(self) -> None:
        self.tickets: List[Ticket] = []
        self.fail_after: Optional[int] = None

    async def create(self, *, ticket: Ticket) -> None:
        if self.fail_after is not None and len(self.tickets) >= self.fail_after:
            raise StoreError('write timed out')
        self.tickets.append(ticket)

    def for_transaction(self, transaction_id: str) -> List[Ticket]:
        return [t for t in self.tickets if t.transaction_id == transaction_id]


class FakePaymentGateway(IPaymentGateway):
    def __init__(self) -> None:
        self.requests: List[PaymentInitiationRequest] = []
        self.error: Optional[Exception] = None

    async def initiate_payment(
        self, *, request: PaymentInitiationRequest
    ) -> PaymentInitiationResult:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return PaymentInitiationResult(
            order_id=request.order_id, url=f'{PAYMENT_URL_PREFIX}{request.order_id}'
        )

    def reject(self, message: str = 'gateway answered 500') -> None:
        self.error = PaymentInitiationFailedError(message)


class FakeIdentityProvider(IIdentityProvider):
    def __init__(self, attributes: Optional[Dict[str, str]] = None) -> None:
        self.attributes = attributes or {}
        self.fail = False
        self.calls: List[tuple[str, str]] = []

    async def get_user_attributes(self, *, user_pool_id: str, username: str) -> Dict[str, str]:
        self.calls.append((user_pool_id, username))
        if self.fail:
            raise IdentityLookupFailedError(username, 'UserNotFoundException')
        return dict(self.attributes)


@attrs.define
class InMemoryBookingBackend:
    """Every adapter the saga talks to, plus factories for the two use cases."""

    trip_repo: InMemoryTripRepo = attrs.field(factory=InMemoryTripRepo)
    transaction_repo: InMemoryTransactionRepo = attrs.field(factory=InMemoryTransactionRepo)
    ticket_repo: InMemoryTicketRepo = attrs.field(factory=InMemoryTicketRepo)
    payment_gateway: FakePaymentGateway = attrs.field(factory=FakePaymentGateway)
    identity_provider: FakeIdentityProvider = attrs.field(factory=FakeIdentityProvider)
    settings: Settings = attrs.field(factory=make_settings)
    lookup_required: bool = False

    def _payment_orchestrator(self) -> PaymentOrchestrator:
        return PaymentOrchestrator(
            payment_gateway=self.payment_gateway,
            transaction_command_repo=self.transaction_repo,
            settings=self.settings,
        )

    def _profile_resolver(self) -> RequesterProfileResolver:
        return RequesterProfileResolver(
            identity_provider=self.identity_provider, lookup_required=self.lookup_required
        )

    def book_use_case(self, *, max_attempts: int = 5) -> BookTripTicketsUseCase:
        return BookTripTicketsUseCase(
            trip_repo=self.trip_repo,
            request_validator=RequestValidator(),
            requester_profile_resolver=self._profile_resolver(),
            inventory_reservation_manager=InventoryReservationManager(trip_repo=self.trip_repo),
            payment_orchestrator=self._payment_orchestrator(),
            participant_registry=ParticipantRegistry(trip_repo=self.trip_repo),
            ticket_issuer=TicketIssuer(
                ticket_command_repo=self.ticket_repo,
                block_timeout_minutes=self.settings.TICKET_BLOCK_TIMEOUT_IN_MINUTES,
            ),
            max_attempts=max_attempts,
            backoff_initial=0,
            backoff_max=0,
            backoff_jitter=0,
        )

    def sharelead_use_case(self) -> InitiateShareleadPreReservationUseCase:
        return InitiateShareleadPreReservationUseCase(
            trip_repo=self.trip_repo,
            requester_profile_resolver=self._profile_resolver(),
            payment_orchestrator=self._payment_orchestrator(),
        )
