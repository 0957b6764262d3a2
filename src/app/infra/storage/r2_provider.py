# src/app/infra/storage/r2_provider.py
"""
Cloudflare R2 image storage provider.
R2 is S3-compatible, so we use boto3 with custom endpoint.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.app.domain.errors import StorageError, StorageUploadError
from src.app.domain.models import StoredImage
from src.app.infra.storage.base import StorageProvider

logger = logging.getLogger(__name__)


class R2StorageProvider(StorageProvider):
    """
    Cloudflare R2 storage provider using boto3 (S3-compatible).

    Required settings: account id, access key id, secret access key,
    bucket name and the public URL the bucket is served from.
    """

    def __init__(
        self,
        account_id: str,
        access_key_id: str,
        secret_access_key: str,
        bucket_name: str,
        public_url: str,
        client: Optional[object] = None,
    ):
        self.account_id = account_id
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.bucket_name = bucket_name
        self.public_url = public_url.rstrip("/") if public_url else ""

        if not all([self.account_id, self.access_key_id, self.secret_access_key, self.bucket_name, self.public_url]):
            raise StorageError(
                "Missing R2 configuration. Required: R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, "
                "R2_SECRET_ACCESS_KEY, R2_BUCKET_NAME, R2_PUBLIC_URL"
            )

        self.endpoint_url = f"https://{self.account_id}.r2.cloudflarestorage.com"

        self._client = client or boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=Config(
                signature_version="s3v4",
                connect_timeout=10,
                read_timeout=30,
            ),
            region_name="auto",  # R2 uses 'auto' as region
        )

        logger.info(
            "R2StorageProvider initialized: bucket=%s, endpoint=%s",
            self.bucket_name,
            self.endpoint_url,
        )

    def public_url_for(self, object_key: str) -> str:
        return f"{self.public_url}/{object_key}"

    def upload_image(
        self,
        source_path: Path,
        content_type: str,
        owner_id: str,
        filename: str,
    ) -> StoredImage:
        """Upload a local image to R2 and return its public URL and key."""
        object_key = self.generate_object_key(user_id=owner_id, filename=filename)

        try:
            self._client.upload_file(
                Filename=str(source_path),
                Bucket=self.bucket_name,
                Key=object_key,
                ExtraArgs={"ContentType": content_type},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to upload image to R2: %s", e)
            raise StorageUploadError(str(source_path), str(e)) from e

        logger.info("Uploaded image to R2: key=%s, content_type=%s", object_key, content_type)
        return StoredImage(url=self.public_url_for(object_key), storage_ref=object_key)

    def delete_object(self, object_key: str) -> bool:
        """Delete an object from R2."""
        try:
            self._client.delete_object(
                Bucket=self.bucket_name,
                Key=object_key,
            )
            logger.info("Deleted object from R2: key=%s", object_key)
            return True

        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to delete object from R2: %s", e)
            return False
