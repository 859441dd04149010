"""
Requester Profile Resolver

Fills the requester's contact details from the identity provider. The token
claims are the fallback: a failed lookup keeps them unless the deployment
requires the lookup to succeed.
"""

from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.app.interface import IIdentityProvider
from src.service.trip_booking.domain.exception import IdentityLookupFailedError
from src.service.trip_booking.domain.value_object import Requester


class RequesterProfileResolver:
    def __init__(self, *, identity_provider: IIdentityProvider, lookup_required: bool) -> None:
        self.identity_provider = identity_provider
        self.lookup_required = lookup_required

    @Logger.io
    async def resolve(self, *, requester: Requester) -> Requester:
        if not requester.issuer or not requester.username:
            if self.lookup_required:
                raise IdentityLookupFailedError(requester.username or requester.sub, 'no issuer')
            return requester

        try:
            attributes = await self.identity_provider.get_user_attributes(
                user_pool_id=requester.user_pool_id, username=requester.username
            )
        except IdentityLookupFailedError as e:
            if self.lookup_required:
                raise
            Logger.base.warning(f'⚠️ [IDENTITY] {e.message}; using token claims')
            return requester

        return requester.with_profile(
            name=attributes.get('name', ''),
            phone=attributes.get('phone_number', ''),
            email=attributes.get('email', ''),
        )
