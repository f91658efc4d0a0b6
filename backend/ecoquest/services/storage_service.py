"""Proof media in S3-compatible object storage."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from ecoquest.core.config import settings

logger = logging.getLogger(__name__)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


class ProofStorage(Protocol):
    def upload_url(self, storage_key: str, content_type: str, expires_in: int) -> str: ...

    def get_metadata(self, storage_key: str) -> dict[str, Any] | None: ...


def _get_s3_client():
    return boto3.client(
        "s3",
        endpoint_url=settings.aws_s3_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        region_name=settings.aws_s3_region,
        config=BotoConfig(signature_version="s3v4"),
    )


class S3ProofStorage:
    """Presigned uploads plus HEAD lookups. The stored object is the source of truth."""

    def __init__(self, client: Any = None, bucket: str | None = None) -> None:
        self.client = client or _get_s3_client()
        self.bucket = bucket or settings.proof_bucket

    def upload_url(self, storage_key: str, content_type: str, expires_in: int) -> str:
        return self.client.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": storage_key, "ContentType": content_type},
            ExpiresIn=expires_in,
        )

    def get_metadata(self, storage_key: str) -> dict[str, Any] | None:
        """Size, content type and upload time as the bucket reports them; None if absent."""
        try:
            head = self.client.head_object(Bucket=self.bucket, Key=storage_key)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_CODES:
                return None
            logger.error("proof_head_failed bucket=%s key=%s code=%s", self.bucket, storage_key, code)
            raise
        return {
            "size": head.get("ContentLength", 0),
            "content_type": head.get("ContentType") or "",
            "time_created": head.get("LastModified"),
        }


def get_proof_storage() -> ProofStorage:
    """Dependency for FastAPI; override in tests."""
    return S3ProofStorage()
