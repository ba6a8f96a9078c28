"""DTOs (Data Transfer Objects) de la capa de aplicación."""

from app.application.dtos.booking_dto import CreateBookingDTO, QuoteDTO
from app.application.dtos.payment_dto import PaymentInitiationDTO, WebhookOutcomeDTO

__all__ = [
    # Booking DTOs
    "CreateBookingDTO",
    "QuoteDTO",
    # Payment DTOs
    "PaymentInitiationDTO",
    "WebhookOutcomeDTO",
]
