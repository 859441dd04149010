"""
Vipps access token provider

One token per process, re-acquired when it is within the safety margin of its
`expires_on`. Concurrent requests that find the token stale wait on the same
lock, so only the first of them calls the token endpoint.
"""

import time
from typing import Any, Callable, Dict, Optional

import anyio
import attrs
import httpx
import orjson

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.trip_booking.domain.exception import PaymentInitiationFailedError


@attrs.define(frozen=True)
class AccessToken:
    token_type: str
    access_token: str
    expires_on: int  # unix seconds

    @property
    def authorization(self) -> str:
        return f'{self.token_type} {self.access_token}'


def system_headers(settings: Settings) -> Dict[str, str]:
    """Headers every Vipps call carries besides its own auth."""
    return {
        'Ocp-Apim-Subscription-Key': settings.VIPPS_SUBSCRIPTION_KEY.get_secret_value(),
        'Merchant-Serial-Number': settings.VIPPS_MSN,
        'Vipps-System-Name': settings.VIPPS_SYSTEM_NAME,
        'Vipps-System-Version': settings.VIPPS_SYSTEM_VERSION,
        'Vipps-System-Plugin-Name': settings.VIPPS_SYSTEM_PLUGIN_NAME,
        'Vipps-System-Plugin-Version': settings.VIPPS_SYSTEM_PLUGIN_VERSION,
    }


class VippsAccessTokenProvider:
    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.http_client = http_client
        self.settings = settings
        self.clock = clock
        self._token: Optional[AccessToken] = None
        self._lock = anyio.Lock()

    def _is_fresh(self, token: Optional[AccessToken]) -> bool:
        if token is None:
            return False
        margin = self.settings.ACCESS_TOKEN_EXPIRY_MARGIN_SECONDS
        return self.clock() < token.expires_on - margin

    def _parse(self, body: Dict[str, Any]) -> AccessToken:
        # Vipps sends the numeric fields as strings
        if body.get('expires_on'):
            expires_on = int(body['expires_on'])
        else:
            expires_on = int(self.clock()) + int(body.get('expires_in') or 0)
        return AccessToken(
            token_type=body.get('token_type') or 'Bearer',
            access_token=body['access_token'],
            expires_on=expires_on,
        )

    async def _fetch(self) -> AccessToken:
        headers = {
            'client_id': self.settings.VIPPS_CLIENT_ID,
            'client_secret': self.settings.VIPPS_CLIENT_SECRET.get_secret_value(),
            **system_headers(self.settings),
        }
        start = time.perf_counter()
        try:
            response = await self.http_client.post(
                self.settings.VIPPS_ACCESS_TOKEN_API,
                headers=headers,
                timeout=self.settings.PAYMENT_GATEWAY_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            token = self._parse(orjson.loads(response.content))
        except (httpx.HTTPError, orjson.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            metrics.record_gateway_call(
                operation='access_token', result='error', duration=time.perf_counter() - start
            )
            raise PaymentInitiationFailedError(f'could not obtain access token ({e})') from e

        metrics.record_gateway_call(
            operation='access_token', result='success', duration=time.perf_counter() - start
        )
        Logger.base.info(f'🔑 [VIPPS] Access token acquired, expires_on={token.expires_on}')
        return token

    async def get_token(self) -> AccessToken:
        token = self._token
        if self._is_fresh(token):
            return token  # type: ignore[return-value]

        async with self._lock:
            # Another request may have refreshed it while we waited
            if not self._is_fresh(self._token):
                self._token = await self._fetch()
            return self._token  # type: ignore[return-value]

    def invalidate(self) -> None:
        self._token = None
