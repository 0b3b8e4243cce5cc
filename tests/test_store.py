"""Tests for store.py module."""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from s3stream.errors import StoreError
from s3stream.models import Part, TransferConfig
from s3stream.store import Boto3ObjectStore, build_s3_client, to_store_error


def client_error(code: str, message: str, operation: str = "PutObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class TestBuildS3Client:
    """Tests for build_s3_client function."""

    @pytest.fixture
    def config(self) -> TransferConfig:
        """Create a sample MinIO configuration."""
        return TransferConfig(
            access_key="minioadmin",
            secret_key="minio-secret",
            bucket="video",
            endpoint="localhost:9000",
            region="eu-west-1",
        )

    @patch("s3stream.store.boto3.client")
    def test_correct_endpoint_and_credentials(self, mock_boto_client: MagicMock, config):
        """Verify endpoint, credentials, and region are passed to boto3."""
        build_s3_client(config)

        mock_boto_client.assert_called_once()
        call_kwargs = mock_boto_client.call_args.kwargs

        assert mock_boto_client.call_args.args == ("s3",)
        assert call_kwargs["endpoint_url"] == "http://localhost:9000"
        assert call_kwargs["aws_access_key_id"] == "minioadmin"
        assert call_kwargs["aws_secret_access_key"] == "minio-secret"
        assert call_kwargs["region_name"] == "eu-west-1"

    @patch("s3stream.store.boto3.client")
    def test_secure_endpoint_uses_https(self, mock_boto_client: MagicMock, config):
        """secure=True switches the endpoint scheme to https."""
        config.secure = True

        build_s3_client(config)

        assert mock_boto_client.call_args.kwargs["endpoint_url"] == "https://localhost:9000"

    @patch("s3stream.store.boto3.client")
    def test_addressing_style_and_signature(self, mock_boto_client: MagicMock, config):
        """Path addressing and SigV4 are configured on the client."""
        build_s3_client(config)

        boto_config = mock_boto_client.call_args.kwargs["config"]

        assert boto_config.s3["addressing_style"] == "path"
        assert boto_config.signature_version == "s3v4"


class TestToStoreError:
    """Tests for botocore error translation."""

    def test_client_error_code_and_message(self):
        """ClientError code and message are carried over."""
        error = to_store_error("upload_part", client_error("EntityTooSmall", "Part too small"))

        assert error.operation == "upload_part"
        assert error.code == "EntityTooSmall"
        assert error.message == "Part too small"
        assert str(error) == "upload_part failed: EntityTooSmall: Part too small"

    def test_botocore_error(self):
        """Transport errors have no code."""
        error = to_store_error(
            "put_object",
            EndpointConnectionError(endpoint_url="http://localhost:9000"),
        )

        assert error.code is None
        assert "localhost:9000" in error.message


class TestBoto3ObjectStore:
    """Tests for the boto3 binding."""

    @pytest.fixture
    def s3_client(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def store(self, s3_client) -> Boto3ObjectStore:
        return Boto3ObjectStore(s3_client)

    def test_put_object(self, store, s3_client):
        """put_object sends body and explicit content length."""
        s3_client.put_object.return_value = {"ETag": '"abc"'}

        result = store.put_object("video", "k", b"hello", 5)

        s3_client.put_object.assert_called_once_with(
            Bucket="video", Key="k", Body=b"hello", ContentLength=5
        )
        assert result.etag == '"abc"'

    def test_put_object_rejected(self, store, s3_client):
        """A ClientError surfaces as StoreError."""
        s3_client.put_object.side_effect = client_error("AccessDenied", "Access Denied")

        with pytest.raises(StoreError) as exc_info:
            store.put_object("video", "k", b"hello", 5)

        assert exc_info.value.code == "AccessDenied"

    def test_create_multipart_upload(self, store, s3_client):
        """Returns the UploadId from the response."""
        s3_client.create_multipart_upload.return_value = {"UploadId": "upload-xyz"}

        assert store.create_multipart_upload("video", "k") == "upload-xyz"
        s3_client.create_multipart_upload.assert_called_once_with(Bucket="video", Key="k")

    def test_upload_part(self, store, s3_client):
        """upload_part passes part number and length, returns the ETag."""
        s3_client.upload_part.return_value = {"ETag": '"part-etag"'}

        etag = store.upload_part("video", "k", "upload-xyz", 2, b"abcd")

        s3_client.upload_part.assert_called_once_with(
            Bucket="video",
            Key="k",
            UploadId="upload-xyz",
            PartNumber=2,
            Body=b"abcd",
            ContentLength=4,
        )
        assert etag == '"part-etag"'

    def test_complete_multipart_upload(self, store, s3_client):
        """The ordered part list is sent in the MultipartUpload body."""
        s3_client.complete_multipart_upload.return_value = {
            "ETag": '"final"',
            "Location": "http://localhost:9000/video/k",
        }
        parts = [Part(1, '"e1"', 10), Part(2, '"e2"', 5)]

        result = store.complete_multipart_upload("video", "k", "upload-xyz", parts)

        call_kwargs = s3_client.complete_multipart_upload.call_args.kwargs
        assert call_kwargs["MultipartUpload"] == {
            "Parts": [
                {"PartNumber": 1, "ETag": '"e1"'},
                {"PartNumber": 2, "ETag": '"e2"'},
            ]
        }
        assert result.etag == '"final"'
        assert result.location == "http://localhost:9000/video/k"

    def test_abort_multipart_upload_error(self, store, s3_client):
        """Abort failures are raised as StoreError."""
        s3_client.abort_multipart_upload.side_effect = client_error(
            "NoSuchUpload", "The specified upload does not exist", "AbortMultipartUpload"
        )

        with pytest.raises(StoreError, match="NoSuchUpload"):
            store.abort_multipart_upload("video", "k", "upload-xyz")

    def test_get_object_streams_and_closes_body(self, store, s3_client):
        """Body chunks are yielded and the body is closed afterwards."""
        body = MagicMock()
        body.iter_chunks.return_value = iter([b"ab", b"cd"])
        s3_client.get_object.return_value = {"Body": body}

        chunks = list(store.get_object("video", "k", 2))

        assert chunks == [b"ab", b"cd"]
        body.iter_chunks.assert_called_once_with(chunk_size=2)
        body.close.assert_called_once()

    def test_get_object_missing_key(self, store, s3_client):
        """NoSuchKey is raised before any chunk is produced."""
        s3_client.get_object.side_effect = client_error(
            "NoSuchKey", "The specified key does not exist.", "GetObject"
        )

        with pytest.raises(StoreError) as exc_info:
            store.get_object("video", "missing", 1024)

        assert exc_info.value.code == "NoSuchKey"
