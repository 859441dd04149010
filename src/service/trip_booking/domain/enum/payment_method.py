from enum import StrEnum


class PaymentMethod(StrEnum):
    VIPPS = 'VIPPS'
    STRIPE = 'STRIPE'
