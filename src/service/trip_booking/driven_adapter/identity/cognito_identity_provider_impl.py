"""
Cognito identity provider

AdminGetUser against the user pool named in the token issuer. boto3 is
blocking, so the call runs on a worker thread.
"""

import asyncio
from typing import Any, Dict

from botocore.exceptions import BotoCoreError, ClientError
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.trip_booking.app.interface import IIdentityProvider
from src.service.trip_booking.domain.exception import IdentityLookupFailedError


PROFILE_ATTRIBUTES = ('name', 'email', 'phone_number')


class CognitoIdentityProviderImpl(IIdentityProvider):
    def __init__(self, *, client: Any) -> None:
        self.client = client  # boto3 cognito-idp client
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def get_user_attributes(self, *, user_pool_id: str, username: str) -> Dict[str, str]:
        with self.tracer.start_as_current_span(
            'identity.cognito.admin_get_user', attributes={'cognito.user_pool_id': user_pool_id}
        ):
            try:
                response = await asyncio.to_thread(
                    self.client.admin_get_user, UserPoolId=user_pool_id, Username=username
                )
            except ClientError as e:
                code = e.response.get('Error', {}).get('Code', 'ClientError')
                raise IdentityLookupFailedError(username, code) from e
            except BotoCoreError as e:
                raise IdentityLookupFailedError(username, str(e)) from e

            return {
                attribute['Name']: attribute['Value']
                for attribute in response.get('UserAttributes', [])
                if attribute.get('Name') in PROFILE_ATTRIBUTES
            }
