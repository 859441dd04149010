"""Unit tests for the trip booking entities and their status machines."""

from datetime import datetime, timezone
import re

import pytest

from src.service.trip_booking.domain.entity import (
    Ticket,
    Transaction,
    generate_transaction_id,
    to_minor_units,
)
from src.service.trip_booking.domain.enum import (
    PreReservationStatus,
    TicketStatus,
    TicketType,
    TransactionStatus,
    parse_transaction_status,
)
from src.service.trip_booking.domain.exception import InvalidStatusTransitionError
from src.service.trip_booking.domain.value_object import ContactPerson
from test.service.trip_booking.fakes import make_requester, make_trip


FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _transaction(status=TransactionStatus.INITIATED) -> Transaction:
    return Transaction.create(
        id='SB1001-abcd-1772366400',
        trip_id='trip-0001',
        amount=140000,
        requester='user-sub-1',
        contact_person=ContactPerson(name='Kari'),
        callback_auth_token='token',
        status=status,
        now=FIXED_NOW,
    )


@pytest.mark.unit
class TestTrip:
    def test_expected_price_sums_both_tiers(self) -> None:
        trip = make_trip()
        assert trip.expected_price(earlybird_count=1, regular_count=2) == 1400.0

    def test_expected_price_for_no_tickets_is_zero(self) -> None:
        assert make_trip().expected_price(earlybird_count=0, regular_count=0) == 0.0

    def test_tier_lookups(self) -> None:
        trip = make_trip()
        assert trip.price_for(TicketType.EARLYBIRD) == 400.0
        assert trip.price_for(TicketType.REGULAR) == 500.0
        assert trip.available_for(TicketType.EARLYBIRD) == 180
        assert trip.available_for(TicketType.REGULAR) == 200

    def test_has_participant(self) -> None:
        trip = make_trip(participant_ids=['a'])
        assert trip.has_participant('a')
        assert not trip.has_participant('b')


@pytest.mark.unit
class TestTransactionId:
    def test_format_is_reference_suffix_and_seconds(self) -> None:
        transaction_id = generate_transaction_id(booking_reference='SB1001', now=FIXED_NOW)
        assert re.fullmatch(r'SB1001-[A-Za-z0-9]{4}-1772366400', transaction_id)

    def test_suffix_varies_within_the_same_second(self) -> None:
        ids = {generate_transaction_id(booking_reference='SB1001', now=FIXED_NOW) for _ in range(50)}
        assert len(ids) > 1

    @pytest.mark.parametrize(
        'amount, expected',
        [(1400, 140000), (1400.0, 140000), (99.99, 9999), (0.1 + 0.2, 30)],
    )
    def test_minor_units(self, amount: float, expected: int) -> None:
        assert to_minor_units(amount) == expected


@pytest.mark.unit
class TestTransaction:
    def test_create_defaults(self) -> None:
        transaction = _transaction()
        assert transaction.status is TransactionStatus.INITIATED
        assert transaction.created_at == int(FIXED_NOW.timestamp())
        assert transaction.reference_data == []
        assert transaction.payment_with.value == 'VIPPS'

    @pytest.mark.parametrize(
        'target', [TransactionStatus.PAID, TransactionStatus.CANCELED, TransactionStatus.FAILED]
    )
    def test_initiated_moves_forward(self, target: TransactionStatus) -> None:
        moved = _transaction().transition_to(target)
        assert moved.status is target

    def test_refund_path(self) -> None:
        transaction = _transaction().transition_to(TransactionStatus.PAID)
        transaction = transaction.transition_to(TransactionStatus.REFUND_INITIATED)
        assert transaction.transition_to(TransactionStatus.REFUNDED).status is (
            TransactionStatus.REFUNDED
        )

    @pytest.mark.parametrize(
        'terminal', [TransactionStatus.CANCELED, TransactionStatus.FAILED, TransactionStatus.REFUNDED]
    )
    def test_terminal_statuses_do_not_move(self, terminal: TransactionStatus) -> None:
        with pytest.raises(InvalidStatusTransitionError):
            _transaction(status=terminal).transition_to(TransactionStatus.PAID)

    def test_transition_leaves_original_untouched(self) -> None:
        original = _transaction()
        original.transition_to(TransactionStatus.PAID)
        assert original.status is TransactionStatus.INITIATED

    def test_pre_reservation_lifecycle(self) -> None:
        transaction = _transaction(status=PreReservationStatus.INITIATE)
        transaction = transaction.transition_to(PreReservationStatus.RESERVE)
        assert transaction.transition_to(PreReservationStatus.CAPTURE).status is (
            PreReservationStatus.CAPTURE
        )

    def test_labels_do_not_cross_lifecycles(self) -> None:
        with pytest.raises(InvalidStatusTransitionError):
            _transaction().transition_to(PreReservationStatus.RESERVE)

    def test_unknown_stored_status_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_transaction_status('SETTLED')
        with pytest.raises(ValueError):
            parse_transaction_status('INITIATED', pre_reservation=True)
        assert parse_transaction_status('TIMEOUT', pre_reservation=True) is (
            PreReservationStatus.TIMEOUT
        )


@pytest.mark.unit
class TestTicket:
    def _ticket(self) -> Ticket:
        requester = make_requester()
        return Ticket.create_blocked(
            trip_id='trip-0001',
            type=TicketType.REGULAR,
            ticket_price=500.0,
            sequence=1,
            transaction_id='SB1001-abcd-1772366400',
            requester=requester.sub,
            contact_person=requester.contact_person,
            block_timeout_minutes=10,
            now=FIXED_NOW,
        )

    def test_create_blocked(self) -> None:
        ticket = self._ticket()
        assert ticket.status is TicketStatus.BLOCKED
        assert ticket.block_timeout == int(FIXED_NOW.timestamp()) + 600
        assert ticket.download_url == ''

    def test_ids_are_unique(self) -> None:
        assert self._ticket().ticket_id != self._ticket().ticket_id

    def test_blocked_to_booked_to_canceled(self) -> None:
        booked = self._ticket().transition_to(TicketStatus.BOOKED)
        assert booked.transition_to(TicketStatus.CANCELED).status is TicketStatus.CANCELED

    def test_canceled_is_terminal(self) -> None:
        canceled = self._ticket().transition_to(TicketStatus.CANCELED)
        with pytest.raises(InvalidStatusTransitionError):
            canceled.transition_to(TicketStatus.BOOKED)
