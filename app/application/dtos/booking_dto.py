"""DTOs para reservas."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.entities.booking import RentalType


@dataclass
class CreateBookingDTO:
    """Datos de entrada para crear una reserva."""

    user_id: str
    trailer_id: str
    start_time: datetime
    end_time: datetime
    rental_type: RentalType
    add_ons: list[str] = field(default_factory=list)


@dataclass
class QuoteDTO:
    trailer_id: str
    start_time: datetime
    end_time: datetime
    rental_type: RentalType
    add_ons: list[str] = field(default_factory=list)
