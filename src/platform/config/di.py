"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi.html
"""

import boto3
from dependency_injector import containers, providers
import httpx

from src.platform.config.core_setting import Settings
from src.service.trip_booking.app.saga import (
    InventoryReservationManager,
    ParticipantRegistry,
    PaymentOrchestrator,
    RequestValidator,
    RequesterProfileResolver,
    TicketIssuer,
)
from src.service.trip_booking.driven_adapter.identity.cognito_identity_provider_impl import (
    CognitoIdentityProviderImpl,
)
from src.service.trip_booking.driven_adapter.payment.vipps_access_token_provider import (
    VippsAccessTokenProvider,
)
from src.service.trip_booking.driven_adapter.payment.vipps_payment_gateway_impl import (
    VippsPaymentGatewayImpl,
)
from src.service.trip_booking.driven_adapter.repo.ticket_command_repo_scylla_impl import (
    TicketCommandRepoScyllaImpl,
)
from src.service.trip_booking.driven_adapter.repo.transaction_command_repo_scylla_impl import (
    TransactionCommandRepoScyllaImpl,
)
from src.service.trip_booking.driven_adapter.repo.trip_repo_scylla_impl import TripRepoScyllaImpl


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Repositories (stateless; the Scylla session is per event loop)
    trip_repo = providers.Singleton(TripRepoScyllaImpl, settings=config_service)
    transaction_command_repo = providers.Singleton(
        TransactionCommandRepoScyllaImpl, settings=config_service
    )
    ticket_command_repo = providers.Singleton(TicketCommandRepoScyllaImpl, settings=config_service)

    # Payment gateway (one HTTP client and one token cache per process)
    http_client = providers.Singleton(
        httpx.AsyncClient, timeout=config_service.provided.PAYMENT_GATEWAY_TIMEOUT_SECONDS
    )
    access_token_provider = providers.Singleton(
        VippsAccessTokenProvider, http_client=http_client, settings=config_service
    )
    payment_gateway = providers.Singleton(
        VippsPaymentGatewayImpl,
        http_client=http_client,
        token_provider=access_token_provider,
        settings=config_service,
    )

    # Identity provider
    cognito_client = providers.Singleton(
        boto3.client, 'cognito-idp', region_name=config_service.provided.AWS_REGION
    )
    identity_provider = providers.Singleton(CognitoIdentityProviderImpl, client=cognito_client)

    # Booking saga stages
    request_validator = providers.Singleton(RequestValidator)
    requester_profile_resolver = providers.Singleton(
        RequesterProfileResolver,
        identity_provider=identity_provider,
        lookup_required=config_service.provided.IDENTITY_LOOKUP_REQUIRED,
    )
    inventory_reservation_manager = providers.Singleton(
        InventoryReservationManager, trip_repo=trip_repo
    )
    payment_orchestrator = providers.Singleton(
        PaymentOrchestrator,
        payment_gateway=payment_gateway,
        transaction_command_repo=transaction_command_repo,
        settings=config_service,
    )
    participant_registry = providers.Singleton(ParticipantRegistry, trip_repo=trip_repo)
    ticket_issuer = providers.Singleton(
        TicketIssuer,
        ticket_command_repo=ticket_command_repo,
        block_timeout_minutes=config_service.provided.TICKET_BLOCK_TIMEOUT_IN_MINUTES,
    )


container = Container()


def cleanup() -> None:
    container.reset_singletons()
