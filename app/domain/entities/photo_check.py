"""Entidad PhotoCheck - juego de cuatro fotos de una reserva en una fase."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath


class PhotoPhase(str, Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"


class VehicleSide(str, Enum):
    FRONT = "FRONT"
    REAR = "REAR"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


REQUIRED_SIDES: tuple[VehicleSide, ...] = (
    VehicleSide.FRONT,
    VehicleSide.REAR,
    VehicleSide.LEFT,
    VehicleSide.RIGHT,
)


class PhotoCheckStatus(str, Enum):
    MISSING = "MISSING"
    COMPLETED = "COMPLETED"


@dataclass
class PhotoCheck:
    """
    Fotos de una reserva para una fase (check-in o check-out).

    Se crea de forma perezosa con la primera foto. El estado se deriva:
    COMPLETED si y solo si los cuatro lados tienen foto.
    """

    booking_id: str
    phase: PhotoPhase
    photos: dict[VehicleSide, str] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def status(self) -> PhotoCheckStatus:
        if all(side in self.photos for side in REQUIRED_SIDES):
            return PhotoCheckStatus.COMPLETED
        return PhotoCheckStatus.MISSING

    @property
    def is_complete(self) -> bool:
        return self.status == PhotoCheckStatus.COMPLETED

    @property
    def missing_sides(self) -> list[VehicleSide]:
        return [side for side in REQUIRED_SIDES if side not in self.photos]

    def photo_for(self, side: VehicleSide) -> str | None:
        return self.photos.get(side)

    def attach(self, side: VehicleSide, photo_ref: str, now: datetime) -> None:
        """Sube o reemplaza la foto de un lado (idempotente por lado)."""
        self.photos[side] = photo_ref
        self.updated_at = now

    def remove(self, side: VehicleSide, now: datetime) -> bool:
        removed = self.photos.pop(side, None) is not None
        if removed:
            self.updated_at = now
        return removed


def photo_ref_belongs_to(booking_id: str, phase: PhotoPhase, side: VehicleSide, photo_ref: str) -> bool:
    """
    Un ``photo_ref`` válido tiene la forma ``{booking_id}/{fase}/{LADO}...``;
    así una foto no puede reutilizarse en otra reserva, fase o lado.
    """
    parts = PurePosixPath(photo_ref).parts
    if len(parts) != 3 or parts[0] != booking_id or parts[1] != phase.value:
        return False
    return PurePosixPath(parts[2]).stem.upper().startswith(side.value)
