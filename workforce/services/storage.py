"""Local filesystem storage for uploaded documents."""

import re
import uuid
from pathlib import Path
from typing import Optional

from workforce.config import get_settings
from workforce.exceptions import NotFoundError, ValidationError
from workforce.logging_config import get_logger

LOGGER = get_logger(__name__)

RAMS_BUCKET = "rams-documents"


def _safe_name(file_name: str) -> str:
    name = Path(file_name or "document").name
    return re.sub(r"[^A-Za-z0-9._-]+", "_", name) or "document"


class StorageService:
    """Stores files as ``<storage_dir>/<bucket>/<path>``."""

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or get_settings().storage_dir).resolve()

    def _resolve(self, bucket: str, path: str) -> Path:
        target = (self.root / bucket / path).resolve()
        if self.root not in target.parents:
            raise ValidationError("Invalid storage path")
        return target

    def save(self, bucket: str, file_name: str, content: bytes) -> str:
        """Write ``content`` under a unique name and return its storage path."""
        path = f"{uuid.uuid4().hex}_{_safe_name(file_name)}"
        target = self._resolve(bucket, path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        LOGGER.info(f"Stored {len(content)} bytes at {bucket}/{path}")
        return path

    def read(self, bucket: str, path: str) -> bytes:
        target = self._resolve(bucket, path)
        if not target.is_file():
            raise NotFoundError("File not found in storage")
        return target.read_bytes()

    def delete(self, bucket: str, path: str) -> bool:
        target = self._resolve(bucket, path)
        if target.is_file():
            target.unlink()
            return True
        return False

    def clear_bucket(self, bucket: str) -> int:
        """Remove every file in a bucket; returns how many were deleted."""
        folder = self.root / bucket
        if not folder.is_dir():
            return 0
        removed = 0
        for item in folder.iterdir():
            if item.is_file():
                item.unlink()
                removed += 1
        return removed


def get_storage() -> StorageService:
    return StorageService()
