import uuid

import pytest

from app.modules.animals.repository import AnimalRepository
from app.modules.media.schemas import MediaCreate
from app.modules.media.service import MediaService
from app.platform.adapters.storage_local import LocalFilesystemStorage

TENANT = uuid.UUID(int=1)


class FlakyStorage(LocalFilesystemStorage):
    """Local storage whose copy always fails."""

    def copy(self, source_key: str, destination_key: str) -> None:
        raise OSError("copy failed")


async def _animal(session, tag="A-1"):
    animal = await AnimalRepository(session).create(
        TENANT, company_id=uuid.uuid4(), farm_id=uuid.uuid4(),
        species="GOAT", breed="Boer", sex="FEMALE", tag_number=tag,
    )
    await session.commit()
    return animal


async def test_request_upload_derives_kind_and_extension(session, storage):
    animal = await _animal(session)
    service = MediaService(session, storage)

    photo = await service.request_upload(TENANT, animal.id, pose="FRONT", content_type="image/jpeg")
    video = await service.request_upload(TENANT, animal.id, pose="GAIT", content_type="video/mp4")

    assert photo["metadata"]["kind"] == "PHOTO"
    assert photo["key"].endswith("_front.jpg")
    assert video["metadata"]["kind"] == "VIDEO"
    assert video["key"].endswith("_gait.mp4")


async def test_unknown_animal(session, storage):
    service = MediaService(session, storage)
    with pytest.raises(ValueError, match="animal_not_found"):
        await service.request_upload(TENANT, uuid.uuid4(), pose="FRONT", content_type="image/jpeg")


async def test_failed_copy_creates_no_row(session, tmp_path):
    storage = FlakyStorage(root=str(tmp_path / "media"))
    source = await _animal(session, "A-1")
    target = await _animal(session, "A-2")
    service = MediaService(session, storage)

    cap = await service.request_upload(TENANT, source.id, pose="LEFT", content_type="image/jpeg")
    storage.put_bytes(cap["key"], b"jpeg", "image/jpeg")
    row = await service.confirm_upload(TENANT, source.id, MediaCreate(kind="PHOTO", pose="LEFT", key=cap["key"]))

    with pytest.raises(OSError):
        await service.copy_to(TENANT, source.id, row.id, target.id)
    assert list(await service.list(TENANT, target.id)) == []


async def test_confirm_outside_namespace(session, storage):
    animal = await _animal(session)
    other = await _animal(session, "A-2")
    service = MediaService(session, storage)
    foreign = await service.request_upload(TENANT, other.id, pose="FRONT", content_type="image/jpeg")

    with pytest.raises(ValueError, match="key_outside_namespace"):
        await service.confirm_upload(TENANT, animal.id, MediaCreate(kind="PHOTO", pose="FRONT", key=foreign["key"]))


async def test_confirm_requires_a_media_key(session, storage):
    animal = await _animal(session)
    service = MediaService(session, storage)
    cap = await service.request_upload(TENANT, animal.id, pose="FRONT", content_type="image/jpeg")
    prefix = cap["key"].rsplit("/", 1)[0] + "/"

    for key in ("tenant/x/elsewhere.jpg", prefix + "not/a/media/key", prefix + "front.jpg"):
        with pytest.raises(ValueError, match="malformed_key"):
            await service.confirm_upload(TENANT, animal.id, MediaCreate(kind="PHOTO", pose="FRONT", key=key))

    with pytest.raises(ValueError, match="key_pose_mismatch"):
        await service.confirm_upload(TENANT, animal.id, MediaCreate(kind="PHOTO", pose="LEFT", key=cap["key"]))
    assert list(await service.list(TENANT, animal.id)) == []


async def test_confirm_same_key_twice(session, storage):
    animal_id = (await _animal(session)).id
    service = MediaService(session, storage)
    cap = await service.request_upload(TENANT, animal_id, pose="FRONT", content_type="image/jpeg")
    payload = MediaCreate(kind="PHOTO", pose="FRONT", key=cap["key"])

    first_id = (await service.confirm_upload(TENANT, animal_id, payload)).id
    with pytest.raises(ValueError, match="key_exists"):
        await service.confirm_upload(TENANT, animal_id, payload)
    # the failed confirm rolled back; only the first row exists
    assert [m.id for m in await service.list(TENANT, animal_id)] == [first_id]
