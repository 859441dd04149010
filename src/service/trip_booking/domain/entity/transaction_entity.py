from datetime import datetime, timezone
import secrets
import string
from typing import List, Optional

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.domain.enum import (
    TRANSACTION_TRANSITIONS,
    AnyTransactionStatus,
    PaymentMethod,
    TransactionStatus,
)
from src.service.trip_booking.domain.exception import InvalidStatusTransitionError
from src.service.trip_booking.domain.value_object import ContactPerson


TRANSACTION_SUFFIX_ALPHABET = string.ascii_letters + string.digits
TRANSACTION_SUFFIX_LENGTH = 4


def generate_transaction_id(*, booking_reference: str, now: Optional[datetime] = None) -> str:
    """
    {booking_reference}-{4 random alphanumerics}-{unix seconds}

    Two ids minted in the same second collide only if the random suffixes do too.
    """
    moment = now or datetime.now(timezone.utc)
    suffix = ''.join(
        secrets.choice(TRANSACTION_SUFFIX_ALPHABET) for _ in range(TRANSACTION_SUFFIX_LENGTH)
    )
    return f'{booking_reference}-{suffix}-{int(moment.timestamp())}'


def to_minor_units(amount: float) -> int:
    """Kroner to øre."""
    return int(round(amount * 100))


@attrs.define
class Transaction:
    id: str
    trip_id: str
    amount: int  # minor units
    status: AnyTransactionStatus
    requester: str
    contact_person: ContactPerson
    callback_auth_token: str
    created_at: int
    payment_with: PaymentMethod = PaymentMethod.VIPPS
    reference_data: List[str] = attrs.field(factory=list)

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: str,
        trip_id: str,
        amount: int,
        requester: str,
        contact_person: ContactPerson,
        callback_auth_token: str,
        status: AnyTransactionStatus = TransactionStatus.INITIATED,
        payment_with: PaymentMethod = PaymentMethod.VIPPS,
        now: Optional[datetime] = None,
    ) -> 'Transaction':
        moment = now or datetime.now(timezone.utc)
        return cls(
            id=id,
            trip_id=trip_id,
            amount=amount,
            status=status,
            payment_with=payment_with,
            requester=requester,
            contact_person=contact_person,
            callback_auth_token=callback_auth_token,
            created_at=int(moment.timestamp()),
        )

    def can_transition_to(self, target: AnyTransactionStatus) -> bool:
        return target in TRANSACTION_TRANSITIONS[self.status]

    @Logger.io
    def transition_to(self, target: AnyTransactionStatus) -> 'Transaction':
        if not self.can_transition_to(target):
            raise InvalidStatusTransitionError(current=self.status.value, target=target.value)
        return attrs.evolve(self, status=target)
