import os
import logging
from datetime import datetime

from ...config import settings
from ...application.ports.image_host import ImageHost

logger = logging.getLogger(__name__)

EXTENSIONS = {"image/jpeg": ".jpg", "image/png": ".png", "image/webp": ".webp"}


class LocalImageHost(ImageHost):
    """Stores images under UPLOAD_DIR, served by the /uploads static mount."""

    def __init__(self, upload_dir: str = None, base_url: str = None) -> None:
        self.upload_dir = upload_dir or settings.UPLOAD_DIR
        self.base_url = (base_url or settings.BASE_URL).rstrip("/")

    async def upload(self, data: bytes, filename: str, content_type: str, folder: str, public_id: str) -> str:
        ext = EXTENSIONS.get(content_type) or os.path.splitext(filename)[1] or ".bin"
        stored = f"{public_id}_{int(datetime.utcnow().timestamp()*1000)}{ext}"
        dest_dir = os.path.join(self.upload_dir, folder)
        os.makedirs(dest_dir, exist_ok=True)
        with open(os.path.join(dest_dir, stored), "wb") as f:
            f.write(data)
        logger.info(f"Stored image {stored} in {dest_dir}")
        return f"{self.base_url}/uploads/{folder}/{stored}"
