"""
Vipps eCom payment gateway

POST {VIPPS_PAYMENT_API} with the merchant, customer and transaction blocks;
Vipps answers with the order id and the URL the payer is sent to.
"""

import time
from typing import Any, Dict

import httpx
import orjson
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.trip_booking.app.dto import PaymentInitiationRequest, PaymentInitiationResult
from src.service.trip_booking.app.interface import IPaymentGateway
from src.service.trip_booking.domain.exception import PaymentInitiationFailedError
from src.service.trip_booking.driven_adapter.payment.vipps_access_token_provider import (
    VippsAccessTokenProvider,
    system_headers,
)


class VippsPaymentGatewayImpl(IPaymentGateway):
    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        token_provider: VippsAccessTokenProvider,
        settings: Settings,
    ) -> None:
        self.http_client = http_client
        self.token_provider = token_provider
        self.settings = settings
        self.tracer = trace.get_tracer(__name__)

    def _build_body(self, request: PaymentInitiationRequest) -> Dict[str, Any]:
        return {
            'merchantInfo': {
                'authToken': request.callback_auth_token,
                'callbackPrefix': self.settings.VIPPS_CALLBACK_PREFIX,
                'fallBack': request.fallback_url,
                'isApp': False,
                'merchantSerialNumber': self.settings.VIPPS_MSN,
            },
            'customerInfo': {'mobileNumber': request.mobile_number},
            'transaction': {
                'amount': request.amount,
                'orderId': request.order_id,
                'transactionText': request.transaction_text,
                'skipLandingPage': False,
            },
        }

    @Logger.io
    async def initiate_payment(
        self, *, request: PaymentInitiationRequest
    ) -> PaymentInitiationResult:
        with self.tracer.start_as_current_span(
            'gateway.vipps.initiate_payment',
            attributes={'transaction.id': request.order_id, 'transaction.amount': request.amount},
        ):
            token = await self.token_provider.get_token()
            headers = {
                'Authorization': token.authorization,
                'Content-Type': 'application/json',
                **system_headers(self.settings),
            }

            start = time.perf_counter()
            try:
                response = await self.http_client.post(
                    self.settings.VIPPS_PAYMENT_API,
                    content=orjson.dumps(self._build_body(request)),
                    headers=headers,
                    timeout=self.settings.PAYMENT_GATEWAY_TIMEOUT_SECONDS,
                )
                if response.status_code == httpx.codes.UNAUTHORIZED:
                    # Revoked before its expiry; the next call fetches a new one
                    self.token_provider.invalidate()
                response.raise_for_status()
                body = orjson.loads(response.content)
                result = PaymentInitiationResult(order_id=body['orderId'], url=body['url'])
            except (httpx.HTTPError, orjson.JSONDecodeError, KeyError, TypeError) as e:
                metrics.record_gateway_call(
                    operation='initiate_payment',
                    result='error',
                    duration=time.perf_counter() - start,
                )
                raise PaymentInitiationFailedError(
                    str(e) or type(e).__name__, transaction_id=request.order_id
                ) from e

            metrics.record_gateway_call(
                operation='initiate_payment',
                result='success',
                duration=time.perf_counter() - start,
            )
            return result
