"""
Payment Gateway Interface

Only initiation lives here. Callbacks and status polling belong to a separate
process that authenticates with the callback token stored on the transaction.
"""

from abc import ABC, abstractmethod

from src.service.trip_booking.app.dto import PaymentInitiationRequest, PaymentInitiationResult


class IPaymentGateway(ABC):
    @abstractmethod
    async def initiate_payment(
        self, *, request: PaymentInitiationRequest
    ) -> PaymentInitiationResult:
        """
        Raises:
            PaymentInitiationFailedError: transport failure, non-2xx answer or
                a body without orderId/url
        """
        pass
