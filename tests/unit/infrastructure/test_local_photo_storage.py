import pytest

from app.domain.entities.photo_check import PhotoPhase, VehicleSide
from app.infrastructure.storage.local_photo_storage import LocalPhotoStorage


def _upload(root, ref: str) -> str:
    path = root / ref
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"jpeg")
    return ref


@pytest.mark.asyncio
async def test_existing_upload_is_found(tmp_path):
    ref = _upload(tmp_path, "bk-1/CHECK_IN/FRONT.jpg")
    storage = LocalPhotoStorage(str(tmp_path))

    assert await storage.photo_exists("bk-1", PhotoPhase.CHECK_IN, VehicleSide.FRONT, ref)
    assert not await storage.photo_exists("bk-1", PhotoPhase.CHECK_IN, VehicleSide.REAR, "bk-1/CHECK_IN/REAR.jpg")


@pytest.mark.asyncio
async def test_upload_is_bound_to_its_booking_phase_and_side(tmp_path):
    ref = _upload(tmp_path, "bk-1/CHECK_IN/FRONT-1.jpg")
    storage = LocalPhotoStorage(str(tmp_path))

    assert await storage.photo_exists("bk-1", PhotoPhase.CHECK_IN, VehicleSide.FRONT, ref)
    assert not await storage.photo_exists("bk-2", PhotoPhase.CHECK_IN, VehicleSide.FRONT, ref)
    assert not await storage.photo_exists("bk-1", PhotoPhase.CHECK_OUT, VehicleSide.FRONT, ref)
    assert not await storage.photo_exists("bk-1", PhotoPhase.CHECK_IN, VehicleSide.REAR, ref)


@pytest.mark.asyncio
async def test_references_outside_upload_dir_do_not_exist(tmp_path):
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    (tmp_path / "secret.txt").write_text("x")
    _upload(tmp_path, "FRONT.jpg")
    storage = LocalPhotoStorage(str(uploads))

    assert not await storage.photo_exists("bk-1", PhotoPhase.CHECK_IN, VehicleSide.FRONT, "../secret.txt")
    assert not await storage.photo_exists("bk-1", PhotoPhase.CHECK_IN, VehicleSide.FRONT, "bk-1/CHECK_IN/../../../FRONT.jpg")
    assert not await storage.photo_exists("bk-1", PhotoPhase.CHECK_IN, VehicleSide.FRONT, ".")


@pytest.mark.asyncio
async def test_directories_are_not_photos(tmp_path):
    (tmp_path / "bk-1" / "CHECK_OUT" / "LEFT").mkdir(parents=True)
    storage = LocalPhotoStorage(str(tmp_path))

    assert not await storage.photo_exists("bk-1", PhotoPhase.CHECK_OUT, VehicleSide.LEFT, "bk-1/CHECK_OUT/LEFT")
