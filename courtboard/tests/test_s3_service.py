"""
Tests for s3_service: put/get with mocked boto3 and asset path helpers.
"""

from io import BytesIO
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from courtboard.services import s3_service

S3_ENV = {
    "AWS_ACCESS_KEY_ID": "test-key",
    "AWS_SECRET_ACCESS_KEY": "test-secret",
    "AWS_S3_BUCKET": "test-bucket",
    "AWS_S3_REGION": "us-west-2",
}


# ============================================================================
# upload_file (mocked)
# ============================================================================


class TestUploadFile:
    """Tests for upload_file() with mocked boto3."""

    @pytest.mark.asyncio
    @patch.dict("os.environ", S3_ENV)
    @patch("courtboard.services.s3_service._get_s3_client")
    async def test_puts_object_with_content_type(self, mock_get_client):
        mock_client = MagicMock()
        mock_get_client.return_value = mock_client

        key = await s3_service.upload_file(b"png-bytes", "avatars/abc.png", content_type="image/png")

        assert key == "avatars/abc.png"
        mock_client.put_object.assert_called_once_with(
            Bucket="test-bucket",
            Key="avatars/abc.png",
            Body=b"png-bytes",
            ContentType="image/png",
        )


# ============================================================================
# get_file (mocked)
# ============================================================================


class TestGetFile:
    """Tests for get_file() with mocked boto3."""

    @pytest.mark.asyncio
    @patch.dict("os.environ", S3_ENV)
    @patch("courtboard.services.s3_service._get_s3_client")
    async def test_returns_body_and_content_type(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.get_object.return_value = {
            "Body": BytesIO(b"image-data"),
            "ContentType": "image/png",
        }
        mock_get_client.return_value = mock_client

        result = await s3_service.get_file("avatars/abc.png")

        assert result == (b"image-data", "image/png")
        mock_client.get_object.assert_called_once_with(Bucket="test-bucket", Key="avatars/abc.png")

    @pytest.mark.asyncio
    @patch.dict("os.environ", S3_ENV)
    @patch("courtboard.services.s3_service._get_s3_client")
    async def test_missing_content_type_defaults_to_octet_stream(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.get_object.return_value = {"Body": BytesIO(b"data")}
        mock_get_client.return_value = mock_client

        _, content_type = await s3_service.get_file("avatars/abc")

        assert content_type == "application/octet-stream"

    @pytest.mark.asyncio
    @patch.dict("os.environ", S3_ENV)
    @patch("courtboard.services.s3_service._get_s3_client")
    async def test_missing_key_returns_none(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.get_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "not found"}}, "GetObject"
        )
        mock_get_client.return_value = mock_client

        assert await s3_service.get_file("avatars/missing.png") is None

    @pytest.mark.asyncio
    @patch.dict("os.environ", S3_ENV)
    @patch("courtboard.services.s3_service._get_s3_client")
    async def test_other_errors_propagate(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.get_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "GetObject"
        )
        mock_get_client.return_value = mock_client

        with pytest.raises(ClientError):
            await s3_service.get_file("avatars/abc.png")


# ============================================================================
# delete_file (mocked)
# ============================================================================


class TestDeleteFile:
    """Tests for delete_file() with mocked boto3."""

    @pytest.mark.asyncio
    @patch.dict("os.environ", S3_ENV)
    @patch("courtboard.services.s3_service._get_s3_client")
    async def test_deletes_object(self, mock_get_client):
        mock_client = MagicMock()
        mock_get_client.return_value = mock_client

        assert await s3_service.delete_file("avatars/old.png") is True
        mock_client.delete_object.assert_called_once_with(Bucket="test-bucket", Key="avatars/old.png")

    @pytest.mark.asyncio
    @patch.dict("os.environ", S3_ENV)
    @patch("courtboard.services.s3_service._get_s3_client")
    async def test_failure_is_swallowed(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.delete_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DeleteObject"
        )
        mock_get_client.return_value = mock_client

        assert await s3_service.delete_file("avatars/old.png") is False


# ============================================================================
# Client configuration
# ============================================================================


class TestClientConfig:
    """Tests for _get_s3_client() configuration checks."""

    @patch.dict("os.environ", {"AWS_ACCESS_KEY_ID": "", "AWS_SECRET_ACCESS_KEY": "", "AWS_S3_BUCKET": ""})
    def test_missing_env_raises(self, monkeypatch):
        monkeypatch.setattr(s3_service, "_s3_client", None)
        with pytest.raises(ValueError, match="not configured"):
            s3_service._get_s3_client()

    @patch.dict("os.environ", {**S3_ENV, "AWS_S3_ENDPOINT_URL": "https://acct.r2.cloudflarestorage.com"})
    def test_endpoint_url_is_read(self):
        assert s3_service._get_config()["endpoint_url"] == "https://acct.r2.cloudflarestorage.com"


# ============================================================================
# Asset path helpers
# ============================================================================


class TestAssetPaths:
    """Tests for asset_path_for_key(), key_from_asset_path() and resolve_asset_url()."""

    def test_asset_path_for_key(self):
        assert s3_service.asset_path_for_key("avatars/a.png") == "/assets/avatars/a.png"

    @pytest.mark.parametrize(
        "path, key",
        [
            ("/assets/avatars/a.png", "avatars/a.png"),
            ("/api/assets/avatars/a.png", "avatars/a.png"),
            ("https://example.com/a.png", None),
            ("/assets/", None),
            ("", None),
        ],
    )
    def test_key_from_asset_path(self, path, key):
        assert s3_service.key_from_asset_path(path) == key

    def test_resolve_without_public_url_passes_through(self, monkeypatch):
        monkeypatch.delenv("PUBLIC_API_URL", raising=False)
        assert s3_service.resolve_asset_url("/assets/avatars/a.png") == "/assets/avatars/a.png"

    def test_resolve_with_public_url(self, monkeypatch):
        monkeypatch.setenv("PUBLIC_API_URL", "https://api.example.com")
        assert (
            s3_service.resolve_asset_url("/api/assets/avatars/a.png")
            == "https://api.example.com/assets/avatars/a.png"
        )

    def test_resolve_keeps_external_urls(self, monkeypatch):
        monkeypatch.setenv("PUBLIC_API_URL", "https://api.example.com")
        assert s3_service.resolve_asset_url("https://cdn.example.com/a.png") == "https://cdn.example.com/a.png"

    def test_resolve_empty(self):
        assert s3_service.resolve_asset_url(None) is None
