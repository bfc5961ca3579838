"""S3-compatible object storage for case documents.

Uses a boto3 synchronous client run in the default thread-pool executor so
uploads don't block the event loop. Objects land under a fixed folder:
``<folder>/<case_id>/<document-type-slug>-<suffix>``.
"""
from __future__ import annotations

import asyncio
import logging
import re
import uuid
from functools import partial
from pathlib import Path
from typing import Any, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from config import Settings
from services.documents import DocumentAttachment
from services.errors import DocumentUploadError

logger = logging.getLogger(__name__)


def _slug(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-") or "document"


class S3DocumentStorage:
    """Thin wrapper around a boto3 S3 client."""

    def __init__(
        self,
        bucket: str,
        folder: str = "case-documents",
        client: Any = None,
        endpoint: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        region: str = "us-east-1",
        public_url: Optional[str] = None,
    ):
        self._bucket = bucket
        self._folder = folder.strip("/")
        self._endpoint = endpoint
        self._region = region
        self._public_url = public_url
        self._client = client or boto3.client(
            "s3",
            endpoint_url=endpoint,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=BotoConfig(
                signature_version="s3v4",
                s3={"addressing_style": "path"},
            ),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3DocumentStorage":
        return cls(
            bucket=settings.storage_bucket,
            folder=settings.document_folder,
            endpoint=settings.storage_endpoint,
            access_key=settings.storage_access_key,
            secret_key=settings.storage_secret_key,
            region=settings.storage_region,
            public_url=settings.storage_public_url,
        )

    def object_key(self, case_id: str, document_type: str, filename: str) -> str:
        suffix = Path(filename).suffix.lower()
        return f"{self._folder}/{case_id}/{_slug(document_type)}-{uuid.uuid4().hex[:8]}{suffix}"

    def url_for(self, key: str) -> str:
        if self._public_url:
            return f"{self._public_url.rstrip('/')}/{key}"
        if self._endpoint:
            return f"{self._endpoint.rstrip('/')}/{self._bucket}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    async def upload(self, case_id: str, document_type: str, attachment: DocumentAttachment) -> str:
        """Store the file and return its URL."""
        key = self.object_key(case_id, document_type, attachment.filename)
        put = partial(
            self._client.put_object,
            Bucket=self._bucket,
            Key=key,
            Body=attachment.content,
            ContentType=attachment.content_type or "application/octet-stream",
        )
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, put)
        except (ClientError, BotoCoreError) as e:
            logger.error("Upload of %s for case %s failed: %s", document_type, case_id, e)
            raise DocumentUploadError(str(e)) from e
        logger.info("Uploaded %s for case %s (%d bytes) to %s", document_type, case_id, attachment.size, key)
        return self.url_for(key)
