from copy import deepcopy

from app.application.interfaces.photo_check_repo import PhotoCheckRepo
from app.domain.entities.photo_check import PhotoCheck, PhotoPhase


class InMemoryPhotoCheckRepo(PhotoCheckRepo):
    def __init__(self) -> None:
        self.checks: dict[tuple[str, PhotoPhase], PhotoCheck] = {}

    async def get(self, booking_id: str, phase: PhotoPhase) -> PhotoCheck | None:
        check = self.checks.get((booking_id, phase))
        return deepcopy(check) if check else None

    async def save(self, check: PhotoCheck) -> PhotoCheck:
        self.checks[(check.booking_id, check.phase)] = deepcopy(check)
        return check
