"""
S3 service for storing and serving uploaded assets.

Provides a lazy-initialized boto3 client and helpers for putting and fetching
objects by key, plus the mapping between object keys and the /assets/ paths
stored on player rows. Works with AWS S3 or any S3-compatible endpoint
(set AWS_S3_ENDPOINT_URL, e.g. for Cloudflare R2).
"""

import logging
import os
from typing import Optional, Tuple

from courtboard.utils.constants import ASSET_PATH_PREFIX, LEGACY_ASSET_PATH_PREFIX

logger = logging.getLogger(__name__)

# Lazy-initialized S3 client
_s3_client = None


def _get_config():
    """Read S3 configuration from environment at call time (not import time)."""
    return {
        "access_key_id": os.getenv("AWS_ACCESS_KEY_ID"),
        "secret_access_key": os.getenv("AWS_SECRET_ACCESS_KEY"),
        "bucket": os.getenv("AWS_S3_BUCKET"),
        "region": os.getenv("AWS_S3_REGION", "us-west-2"),
        "endpoint_url": os.getenv("AWS_S3_ENDPOINT_URL") or None,
    }


def _get_s3_client():
    """Get or create the boto3 S3 client. Lazy-imports boto3 to avoid import-time dependency."""
    global _s3_client
    if _s3_client is None:
        cfg = _get_config()
        if not all([cfg["access_key_id"], cfg["secret_access_key"], cfg["bucket"]]):
            raise ValueError(
                "AWS S3 environment variables not configured. "
                "Set AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, and AWS_S3_BUCKET."
            )
        import boto3

        _s3_client = boto3.client(
            "s3",
            aws_access_key_id=cfg["access_key_id"],
            aws_secret_access_key=cfg["secret_access_key"],
            region_name=cfg["region"],
            endpoint_url=cfg["endpoint_url"],
        )
    return _s3_client


async def upload_file(file_bytes: bytes, key: str, content_type: str = "application/octet-stream") -> str:
    """
    Upload arbitrary file bytes to S3 under the given key.

    Args:
        file_bytes: Raw file content
        key: S3 object key (e.g., "avatars/3f2a....png")
        content_type: MIME type for the uploaded object

    Returns:
        The object key that was written
    """
    client = _get_s3_client()
    cfg = _get_config()

    client.put_object(
        Bucket=cfg["bucket"],
        Key=key,
        Body=file_bytes,
        ContentType=content_type,
    )

    logger.info("Uploaded file to S3: %s (%d bytes)", key, len(file_bytes))
    return key


async def get_file(key: str) -> Optional[Tuple[bytes, str]]:
    """
    Fetch an object from S3.

    Args:
        key: S3 object key

    Returns:
        Tuple of (body bytes, content type), or None if the key does not exist
    """
    from botocore.exceptions import ClientError

    client = _get_s3_client()
    cfg = _get_config()
    try:
        response = client.get_object(Bucket=cfg["bucket"], Key=key)
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code")
        if code in ("NoSuchKey", "404", "NotFound"):
            return None
        raise

    body = response["Body"].read()
    content_type = response.get("ContentType") or "application/octet-stream"
    return body, content_type


async def delete_file(key: str) -> bool:
    """
    Delete an object from S3 by its key. Best-effort: logs errors but doesn't raise.

    Returns:
        True if deleted successfully, False otherwise
    """
    try:
        client = _get_s3_client()
        cfg = _get_config()
        client.delete_object(Bucket=cfg["bucket"], Key=key)
        logger.info("Deleted file from S3: %s", key)
        return True
    except Exception as e:
        logger.error("Failed to delete S3 file %s: %s", key, e)
        return False


def asset_path_for_key(key: str) -> str:
    """Build the /assets/ reference path stored on rows for an object key."""
    return f"{ASSET_PATH_PREFIX}{key.lstrip('/')}"


def key_from_asset_path(path: str) -> Optional[str]:
    """
    Extract the object key from a stored /assets/ or /api/assets/ reference.

    Returns None for anything that is not an asset reference (external URLs,
    empty values).
    """
    if not path:
        return None
    for prefix in (LEGACY_ASSET_PATH_PREFIX, ASSET_PATH_PREFIX):
        if path.startswith(prefix):
            key = path[len(prefix):]
            return key if key else None
    return None


def resolve_asset_url(url: Optional[str]) -> Optional[str]:
    """
    Turn a stored avatar reference into a URL the front end can load.

    Asset references become absolute under PUBLIC_API_URL when it is set.
    External URLs, and everything when PUBLIC_API_URL is unset, pass through.
    """
    if not url:
        return url
    base = os.getenv("PUBLIC_API_URL", "").rstrip("/")
    if not base or url.startswith(("http://", "https://")):
        return url
    key = key_from_asset_path(url)
    if key is None:
        return url
    return f"{base}{asset_path_for_key(key)}"
