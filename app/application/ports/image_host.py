from typing import Protocol


class ImageHost(Protocol):
    async def upload(self, data: bytes, filename: str, content_type: str, folder: str, public_id: str) -> str:
        """Store the image and return its public URL."""
        ...
