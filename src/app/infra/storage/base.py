# src/app/infra/storage/base.py
"""
Abstract base class for image storage providers.
This interface allows easy swapping between different storage backends (R2, S3, GCS, etc.)
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from src.app.domain.models import StoredImage


class StorageProvider(ABC):
    """
    Abstract interface for recipe image storage.

    Implementations:
    - R2StorageProvider: Cloudflare R2 (S3-compatible)
    """

    @abstractmethod
    def upload_image(
        self,
        source_path: Path,
        content_type: str,
        owner_id: str,
        filename: str,
    ) -> StoredImage:
        """
        Upload a local image file and make it publicly reachable.

        Args:
            source_path: Local file to upload
            content_type: MIME type of the content (e.g., "image/png")
            owner_id: The uploading user's id, used to namespace the key
            filename: Original client filename

        Returns:
            StoredImage with the public URL and the storage reference
        """
        pass

    @abstractmethod
    def delete_object(self, object_key: str) -> bool:
        """
        Delete an object from storage.

        Args:
            object_key: The storage reference of the object to delete

        Returns:
            True if deletion was successful
        """
        pass

    def generate_object_key(
        self,
        user_id: str,
        filename: str,
        prefix: str = "recipes",
    ) -> str:
        """
        Generate a standardized object key for storing images.

        Format: users/{user_id}/{prefix}/{YYYY}/{MM}/{uuid}_{filename}
        """
        now = datetime.now(timezone.utc)
        year = now.strftime("%Y")
        month = now.strftime("%m")

        safe_filename = re.sub(r'[^a-zA-Z0-9._-]', '_', filename) or "image"
        unique_id = uuid4().hex[:8]

        return f"users/{user_id}/{prefix}/{year}/{month}/{unique_id}_{safe_filename}"
