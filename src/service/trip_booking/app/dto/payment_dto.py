"""Payment initiation DTOs."""

import attrs


@attrs.define(frozen=True)
class PaymentInitiationRequest:
    order_id: str
    amount: int  # minor units
    mobile_number: str
    callback_auth_token: str
    fallback_url: str
    transaction_text: str


@attrs.define(frozen=True)
class PaymentInitiationResult:
    order_id: str
    url: str  # where the payer is redirected to approve the payment
