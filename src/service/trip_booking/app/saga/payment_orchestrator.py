"""
Payment Orchestrator

Mints the transaction id and callback token, asks the gateway to initiate the
payment, then records the transaction. Once the gateway has answered, the
payment exists on its side whether or not the record is written; a failed
write is reported with the transaction id so it can be reconciled.
"""

from typing import Tuple
import uuid

from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import StoreError
from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.app.dto import PaymentInitiationRequest, PaymentInitiationResult
from src.service.trip_booking.app.interface import IPaymentGateway, ITransactionCommandRepo
from src.service.trip_booking.domain.entity import (
    Transaction,
    Trip,
    generate_transaction_id,
    to_minor_units,
)
from src.service.trip_booking.domain.enum import AnyTransactionStatus, TransactionStatus
from src.service.trip_booking.domain.exception import TransactionPersistenceError
from src.service.trip_booking.domain.value_object import Requester


TRANSACTION_TEXT = 'Transaction initiated through sharebus backend'


class PaymentOrchestrator:
    def __init__(
        self,
        *,
        payment_gateway: IPaymentGateway,
        transaction_command_repo: ITransactionCommandRepo,
        settings: Settings,
    ) -> None:
        self.payment_gateway = payment_gateway
        self.transaction_command_repo = transaction_command_repo
        self.settings = settings
        self.tracer = trace.get_tracer(__name__)

    def _fallback_url(self, *, trip_id: str, transaction_id: str) -> str:
        return f'{self.settings.VIPPS_FALLBACK}?tripId={trip_id}&transactionId={transaction_id}'

    @Logger.io
    async def initiate(
        self,
        *,
        trip: Trip,
        requester: Requester,
        amount: float,
        status: AnyTransactionStatus = TransactionStatus.INITIATED,
    ) -> Tuple[Transaction, PaymentInitiationResult]:
        """
        Args:
            amount: total in major units (kroner)
            status: initial label; the pre-reservation flow passes INITIATE

        Raises:
            PaymentInitiationFailedError: gateway refused or could not be reached
            TransactionPersistenceError: payment initiated but not recorded
        """
        transaction_id = generate_transaction_id(booking_reference=trip.booking_reference)
        callback_auth_token = str(uuid.uuid4())
        minor_amount = to_minor_units(amount)

        with self.tracer.start_as_current_span(
            'saga.initiate_payment',
            attributes={
                'trip.id': trip.id,
                'transaction.id': transaction_id,
                'transaction.amount': minor_amount,
            },
        ):
            result = await self.payment_gateway.initiate_payment(
                request=PaymentInitiationRequest(
                    order_id=transaction_id,
                    amount=minor_amount,
                    mobile_number=requester.contact_person.phone,
                    callback_auth_token=callback_auth_token,
                    fallback_url=self._fallback_url(
                        trip_id=trip.id, transaction_id=transaction_id
                    ),
                    transaction_text=TRANSACTION_TEXT,
                )
            )
            Logger.base.info(f'💳 [PAYMENT] Initiated {transaction_id} for {minor_amount} øre')

            transaction = Transaction.create(
                id=transaction_id,
                trip_id=trip.id,
                amount=minor_amount,
                requester=requester.sub,
                contact_person=requester.contact_person,
                callback_auth_token=callback_auth_token,
                status=status,
            )
            try:
                await self.transaction_command_repo.create(transaction=transaction)
            except StoreError as e:
                raise TransactionPersistenceError(transaction_id, e.message) from e

            return transaction, result
