from src.service.trip_booking.app.dto.booking_result import BookingResult
from src.service.trip_booking.app.dto.payment_dto import (
    PaymentInitiationRequest,
    PaymentInitiationResult,
)


__all__ = ['BookingResult', 'PaymentInitiationRequest', 'PaymentInitiationResult']
