import logging

import aiohttp

from ...config import settings
from ...application.ports.image_host import ImageHost

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


class CloudinaryImageHost(ImageHost):
    """Unsigned uploads through a Cloudinary upload preset."""

    def __init__(self, cloud_name: str = None, upload_preset: str = None, root_folder: str = None) -> None:
        self.cloud_name = cloud_name or settings.CLOUDINARY_CLOUD_NAME
        self.upload_preset = upload_preset or settings.CLOUDINARY_UPLOAD_PRESET
        self.root_folder = root_folder if root_folder is not None else settings.CLOUDINARY_FOLDER
        self.timeout = aiohttp.ClientTimeout(total=60)

    async def upload(self, data: bytes, filename: str, content_type: str, folder: str, public_id: str) -> str:
        form = aiohttp.FormData()
        form.add_field("file", data, filename=filename, content_type=content_type)
        form.add_field("upload_preset", self.upload_preset)
        form.add_field("folder", f"{self.root_folder}/{folder}" if self.root_folder else folder)
        form.add_field("public_id", public_id)

        url = CLOUDINARY_UPLOAD_URL.format(cloud_name=self.cloud_name)
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(url, data=form) as response:
                result = await response.json(content_type=None)
                if response.status != 200 or not result.get("secure_url"):
                    message = (result.get("error") or {}).get("message", f"HTTP {response.status}")
                    raise RuntimeError(f"Cloudinary upload failed: {message}")
        logger.info(f"Uploaded image {public_id} to Cloudinary")
        return result["secure_url"]
