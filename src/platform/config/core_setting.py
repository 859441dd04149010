from pathlib import Path
from typing import Annotated, List

import orjson
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


def _split_list(v: str | List[str], *, default: List[str]) -> List[str]:
    """Accept 'a, b' or a JSON list; env values reach the validators undecoded."""
    if isinstance(v, str):
        v = v.strip()
        if v.startswith('['):
            return [str(i) for i in orjson.loads(v)]
        return [i.strip() for i in v.split(',') if i.strip()]
    if isinstance(v, list):
        return v
    return default


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Sharebus Booking'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Table namespace: {ENV}_trips, {ENV}_transactions, {ENV}_tickets
    ENV: str = 'dev'

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        return _split_list(v, default=[])

    # Vipps eCom payment gateway
    VIPPS_CLIENT_ID: str = ''
    VIPPS_CLIENT_SECRET: SecretStr = SecretStr('')
    VIPPS_SUBSCRIPTION_KEY: SecretStr = SecretStr('')
    VIPPS_MSN: str = ''  # Merchant serial number
    VIPPS_ACCESS_TOKEN_API: str = 'https://apitest.vipps.no/accesstoken/get'
    VIPPS_PAYMENT_API: str = 'https://apitest.vipps.no/ecomm/v2/payments'
    VIPPS_FALLBACK: str = ''
    VIPPS_CALLBACK_PREFIX: str = ''
    VIPPS_SYSTEM_NAME: str = 'sharebus-joiner'
    VIPPS_SYSTEM_VERSION: str = '2.0'
    VIPPS_SYSTEM_PLUGIN_NAME: str = 'vipps-sharebus'
    VIPPS_SYSTEM_PLUGIN_VERSION: str = '2.0'
    PAYMENT_GATEWAY_TIMEOUT_SECONDS: float = 10.0
    ACCESS_TOKEN_EXPIRY_MARGIN_SECONDS: int = 60

    # Booking saga
    TICKET_BLOCK_TIMEOUT_IN_MINUTES: int = 10
    RESERVATION_MAX_ATTEMPTS: int = 5
    RESERVATION_BACKOFF_INITIAL_SECONDS: float = 0.05
    RESERVATION_BACKOFF_MAX_SECONDS: float = 1.0
    RESERVATION_BACKOFF_JITTER_SECONDS: float = 0.05

    # Identity provider (Cognito user pool)
    AWS_REGION: str = 'eu-north-1'
    IDENTITY_LOOKUP_REQUIRED: bool = False

    # ScyllaDB Configuration
    SCYLLA_CONTACT_POINTS: Annotated[List[str], NoDecode] = ['localhost']
    SCYLLA_PORT: int = 9042
    SCYLLA_KEYSPACE: str = 'sharebus'
    SCYLLA_LOCAL_DC: str = 'datacenter1'
    SCYLLA_USERNAME: str = 'cassandra'
    SCYLLA_PASSWORD: SecretStr = SecretStr('cassandra')
    SCYLLA_CONNECT_TIMEOUT: int = 10
    SCYLLA_CONTROL_TIMEOUT: int = 10
    SCYLLA_REQUEST_TIMEOUT: float = 10.0

    @field_validator('SCYLLA_CONTACT_POINTS', mode='before')
    @classmethod
    def assemble_scylla_contact_points(cls, v: str | List[str]) -> List[str]:
        return _split_list(v, default=['localhost'])

    @property
    def TRIPS_TABLE(self) -> str:
        return f'{self.ENV}_trips'

    @property
    def TRANSACTIONS_TABLE(self) -> str:
        return f'{self.ENV}_transactions'

    @property
    def TICKETS_TABLE(self) -> str:
        return f'{self.ENV}_tickets'

    def missing_gateway_credentials(self) -> list[str]:
        """Names of the gateway settings that are still empty."""
        required = {
            'VIPPS_CLIENT_ID': self.VIPPS_CLIENT_ID,
            'VIPPS_CLIENT_SECRET': self.VIPPS_CLIENT_SECRET.get_secret_value(),
            'VIPPS_SUBSCRIPTION_KEY': self.VIPPS_SUBSCRIPTION_KEY.get_secret_value(),
            'VIPPS_MSN': self.VIPPS_MSN,
        }
        return [name for name, value in required.items() if not value]


settings = Settings()  # type: ignore
