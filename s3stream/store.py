"""Object store interface and its boto3 binding.

The transfer engine only talks to an ObjectStoreClient. Boto3ObjectStore
implements it over a boto3 S3 client and turns botocore failures into
StoreError, so nothing above this module sees SDK exception types.
"""

from typing import Any, Iterator, Protocol, Sequence

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3stream.errors import StoreError
from s3stream.models import CompleteResult, Part, PutResult, TransferConfig


class ObjectStoreClient(Protocol):
    """Narrow object store API driven by the transfer engine.

    Every method raises StoreError when the store rejects the call.
    """

    def put_object(self, bucket: str, key: str, data: bytes, size: int) -> PutResult:
        """Store data as one object."""
        ...

    def create_multipart_upload(self, bucket: str, key: str) -> str:
        """Open a multipart upload and return its upload ID."""
        ...

    def upload_part(
        self,
        bucket: str,
        key: str,
        upload_id: str,
        part_number: int,
        data: bytes,
    ) -> str:
        """Upload one part and return its ETag."""
        ...

    def complete_multipart_upload(
        self,
        bucket: str,
        key: str,
        upload_id: str,
        parts: Sequence[Part],
    ) -> CompleteResult:
        """Commit the parts, in ascending part-number order, as one object."""
        ...

    def abort_multipart_upload(self, bucket: str, key: str, upload_id: str) -> None:
        """Discard a multipart upload and any parts stored for it."""
        ...

    def get_object(self, bucket: str, key: str, chunk_size: int) -> Iterator[bytes]:
        """Stream an object's bytes in chunks of at most chunk_size."""
        ...


def build_s3_client(config: TransferConfig):
    """Build a boto3 S3 client for the given transfer configuration.

    Args:
        config: Transfer configuration containing endpoint, credentials,
               region, and addressing style.

    Returns:
        A boto3 S3 client configured for the store.
    """
    boto_config = Config(
        signature_version="s3v4",
        s3={"addressing_style": config.addressing_style},
    )

    return boto3.client(
        "s3",
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.access_key,
        aws_secret_access_key=config.secret_key,
        region_name=config.region,
        config=boto_config,
    )


def to_store_error(operation: str, error: Exception) -> StoreError:
    """Translate a botocore exception into a StoreError."""
    if isinstance(error, ClientError):
        details = error.response.get("Error", {})
        return StoreError(
            operation,
            details.get("Message") or str(error),
            details.get("Code"),
        )
    return StoreError(operation, str(error))


class Boto3ObjectStore:
    """ObjectStoreClient backed by a boto3 S3 client."""

    def __init__(self, s3_client: Any):
        """Initialize the store.

        Args:
            s3_client: boto3 S3 client
        """
        self.s3_client = s3_client

    def put_object(self, bucket: str, key: str, data: bytes, size: int) -> PutResult:
        try:
            response = self.s3_client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentLength=size,
            )
        except (ClientError, BotoCoreError) as e:
            raise to_store_error("put_object", e) from e
        return PutResult(etag=response.get("ETag", ""))

    def create_multipart_upload(self, bucket: str, key: str) -> str:
        try:
            response = self.s3_client.create_multipart_upload(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise to_store_error("create_multipart_upload", e) from e
        return response["UploadId"]

    def upload_part(
        self,
        bucket: str,
        key: str,
        upload_id: str,
        part_number: int,
        data: bytes,
    ) -> str:
        try:
            response = self.s3_client.upload_part(
                Bucket=bucket,
                Key=key,
                UploadId=upload_id,
                PartNumber=part_number,
                Body=data,
                ContentLength=len(data),
            )
        except (ClientError, BotoCoreError) as e:
            raise to_store_error("upload_part", e) from e
        return response["ETag"]

    def complete_multipart_upload(
        self,
        bucket: str,
        key: str,
        upload_id: str,
        parts: Sequence[Part],
    ) -> CompleteResult:
        try:
            response = self.s3_client.complete_multipart_upload(
                Bucket=bucket,
                Key=key,
                UploadId=upload_id,
                MultipartUpload={"Parts": [part.to_dict() for part in parts]},
            )
        except (ClientError, BotoCoreError) as e:
            raise to_store_error("complete_multipart_upload", e) from e
        return CompleteResult(
            etag=response.get("ETag", ""),
            location=response.get("Location", ""),
        )

    def abort_multipart_upload(self, bucket: str, key: str, upload_id: str) -> None:
        try:
            self.s3_client.abort_multipart_upload(
                Bucket=bucket,
                Key=key,
                UploadId=upload_id,
            )
        except (ClientError, BotoCoreError) as e:
            raise to_store_error("abort_multipart_upload", e) from e

    def get_object(self, bucket: str, key: str, chunk_size: int) -> Iterator[bytes]:
        try:
            response = self.s3_client.get_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise to_store_error("get_object", e) from e
        return self._iter_body(response["Body"], chunk_size)

    @staticmethod
    def _iter_body(body: Any, chunk_size: int) -> Iterator[bytes]:
        try:
            for data in body.iter_chunks(chunk_size=chunk_size):
                yield data
        except (ClientError, BotoCoreError) as e:
            raise to_store_error("get_object", e) from e
        finally:
            body.close()
