from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.service.trip_booking.domain.value_object import ContactPerson, Requester


class IdentityClaims(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    sub: str = ''
    cognito_username: str = Field(default='', alias='cognito:username')
    phone_number: str = ''
    email: str = ''
    name: str = ''


class EventIdentity(BaseModel):
    model_config = ConfigDict(extra='ignore')

    sub: str
    username: str = ''
    issuer: str = ''
    claims: IdentityClaims = IdentityClaims()


class EventArguments(BaseModel):
    # Values usually arrive as strings; numbers are accepted and stringified downstream
    input: Dict[str, str | int | float] = {}


class RequestHeaders(BaseModel):
    model_config = ConfigDict(extra='ignore')

    authorization: str = ''


class EventRequest(BaseModel):
    headers: RequestHeaders = RequestHeaders()


class BookingEvent(BaseModel):
    """Resolver-style invocation envelope."""

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'arguments': {
                    'input': {
                        'trip_id': 'trip-0001',
                        'early_bird_tickets': '1',
                        'regular_tickets': '2',
                        'total_price': '1400',
                    }
                },
                'identity': {
                    'sub': 'a1b2c3d4-0000-4000-8000-000000000001',
                    'username': 'a1b2c3d4-0000-4000-8000-000000000001',
                    'issuer': 'https://cognito-idp.eu-north-1.amazonaws.com/eu-north-1_Example',
                    'claims': {'phone_number': '+4712345678', 'name': 'Kari Nordmann'},
                },
                'request': {'headers': {'authorization': 'eyJ...'}},
            }
        }
    )

    arguments: EventArguments = EventArguments()
    identity: EventIdentity
    request: EventRequest = EventRequest()

    def to_requester(self) -> Requester:
        claims = self.identity.claims
        return Requester(
            sub=self.identity.sub,
            username=self.identity.username or claims.cognito_username,
            issuer=self.identity.issuer,
            contact_person=ContactPerson(
                name=claims.name, phone=claims.phone_number, email=claims.email
            ),
        )


class BookingResponse(BaseModel):
    redirect_url: Optional[str] = None
    transaction_id: Optional[str] = None
    is_error: bool
    message: str


class PaymentInitiationResponse(BaseModel):
    orderId: str
    url: str
