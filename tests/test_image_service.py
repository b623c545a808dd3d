import pytest

from app.application.services.image_service import ImageService
from app.exceptions import NotFoundError, PersistenceError, UploadRejectedError

from tests.fakes import FakeTechnicianRepo, FakeUserRepo


class RecordingHost:
    def __init__(self, fail=False):
        self.fail = fail
        self.uploads = []

    async def upload(self, data, filename, content_type, folder, public_id):
        if self.fail:
            raise RuntimeError("upload preset missing")
        self.uploads.append((folder, public_id))
        return f"https://img.example/{folder}/{public_id}.jpg"


def make_service(host=None):
    users = FakeUserRepo()
    techs = FakeTechnicianRepo()
    users.add("u1")
    techs.add("t1")
    host = host or RecordingHost()
    return ImageService(image_host=host, user_repo=users, technician_repo=techs), host, users, techs


@pytest.mark.asyncio
async def test_upload_sets_profile_image():
    svc, host, users, techs = make_service()
    url = await svc.upload_profile_image("technician", "t1", b"\xff\xd8data", "me.jpg", "image/jpeg")
    assert techs.rows["t1"].profile_image_url == url
    folder, public_id = host.uploads[0]
    assert folder == "technicians"
    assert public_id.startswith("t1_") and public_id.endswith("_me")

    url = await svc.upload_profile_image("customer", "u1", b"png", "me.png", "image/png")
    assert users.rows["u1"].profile_image_url == url


@pytest.mark.asyncio
async def test_upload_rejects_bad_files():
    svc, host, _, _ = make_service()
    with pytest.raises(UploadRejectedError) as exc:
        await svc.upload_profile_image("customer", "u1", b"gif", "a.gif", "image/gif")
    assert exc.value.status_code == 415
    with pytest.raises(UploadRejectedError) as exc:
        await svc.upload_profile_image("customer", "u1", b"", "a.jpg", "image/jpeg")
    assert exc.value.status_code == 400
    with pytest.raises(NotFoundError):
        await svc.upload_profile_image("customer", "ghost", b"x", "a.jpg", "image/jpeg")
    assert host.uploads == []


@pytest.mark.asyncio
async def test_host_failure_keeps_old_image():
    svc, _, users, _ = make_service(RecordingHost(fail=True))
    users.rows["u1"].profile_image_url = "https://img.example/old.jpg"
    with pytest.raises(PersistenceError):
        await svc.upload_profile_image("customer", "u1", b"x", "a.jpg", "image/jpeg")
    assert users.rows["u1"].profile_image_url == "https://img.example/old.jpg"
