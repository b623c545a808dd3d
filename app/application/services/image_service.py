from dataclasses import dataclass
from datetime import datetime
import logging
import os

from ..ports.image_host import ImageHost
from ..ports.technician_repo import TechnicianRepository
from ..ports.user_repo import UserRepository
from ...config import settings
from ...exceptions import NotFoundError, PersistenceError, UploadRejectedError

logger = logging.getLogger(__name__)


@dataclass
class ImageService:
    image_host: ImageHost
    user_repo: UserRepository
    technician_repo: TechnicianRepository

    async def upload_profile_image(self, role: str, owner_id: str, data: bytes, filename: str, content_type: str) -> str:
        if content_type not in settings.ALLOWED_IMAGE_TYPES:
            raise UploadRejectedError(415, f"File type {content_type} not allowed")
        if not data:
            raise UploadRejectedError(400, "Uploaded file is empty")
        if len(data) > settings.MAX_FILE_SIZE:
            raise UploadRejectedError(413, f"File too large (max {settings.MAX_FILE_SIZE // (1024*1024)}MB)")

        repo = self.technician_repo if role == "technician" else self.user_repo
        if not repo.get_by_id(owner_id):
            raise NotFoundError("Profile not found")

        stem = os.path.splitext(filename or "profile")[0] or "profile"
        public_id = f"{owner_id}_{int(datetime.utcnow().timestamp() * 1000)}_{stem}"
        try:
            url = await self.image_host.upload(data, filename or "profile.jpg", content_type, folder=f"{role}s", public_id=public_id)
        except Exception as e:
            logger.error(f"Image upload failed for {role} {owner_id}: {e}")
            raise PersistenceError("Image upload")

        repo.set_profile_image(owner_id, url)
        logger.info(f"Profile image updated for {role} {owner_id}")
        return url
