"""Local file storage for uploaded media."""

import uuid
from pathlib import Path

import aiofiles

from greenlife.config import settings


class StorageService:
    """Stores files under settings.storage_path, served at /uploads."""

    def __init__(self, root: str | Path | None = None) -> None:
        self.upload_dir = Path(root or settings.storage_path)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _generate_key(self, prefix: str, extension: str) -> str:
        return f"{prefix}/{uuid.uuid4().hex}.{extension}"

    async def upload_file(self, data: bytes, prefix: str, extension: str) -> tuple[str, str]:
        """Write a file and return (public_url, storage_key)."""
        key = self._generate_key(prefix, extension)
        file_path = self.upload_dir / key
        file_path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(file_path, "wb") as f:
            await f.write(data)

        return f"/uploads/{key}", key


# Global storage service instance
storage = StorageService()
