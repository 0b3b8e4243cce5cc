"""Presigned-URL object store binding.

Object and part bodies travel as plain HTTP PUT/GET requests against
presigned URLs, the way a browser or another untrusted uploader would
send them. The Content-Length is signed into each upload URL, so the
store rejects any body that does not match the announced size.

Session bootstrap, completion and abort still go through the signed S3
API of the underlying boto3 client.
"""

from typing import Any, Iterator

import httpx
from botocore.exceptions import BotoCoreError, ClientError

from s3stream.errors import StoreError
from s3stream.models import PutResult
from s3stream.store import Boto3ObjectStore, to_store_error

# Lifetime of each presigned URL in seconds
DEFAULT_EXPIRES_IN = 3600


def _http_error(operation: str, error: httpx.HTTPError) -> StoreError:
    """Translate an httpx failure into a StoreError."""
    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        message = response.text.strip() or response.reason_phrase
        return StoreError(operation, message, str(response.status_code))
    return StoreError(operation, str(error) or type(error).__name__)


class PresignedObjectStore(Boto3ObjectStore):
    """ObjectStoreClient that uploads and downloads through presigned URLs."""

    def __init__(
        self,
        s3_client: Any,
        http_client: httpx.Client,
        expires_in: int = DEFAULT_EXPIRES_IN,
    ):
        """Initialize the store.

        Args:
            s3_client: boto3 S3 client used for signing and session calls
            http_client: httpx client carrying the bodies
            expires_in: Presigned URL lifetime in seconds
        """
        super().__init__(s3_client)
        self.http_client = http_client
        self.expires_in = expires_in

    def _presign(self, operation: str, params: dict[str, Any], method: str) -> str:
        try:
            return self.s3_client.generate_presigned_url(
                operation,
                Params=params,
                ExpiresIn=self.expires_in,
                HttpMethod=method,
            )
        except (ClientError, BotoCoreError) as e:
            raise to_store_error(operation, e) from e

    def _put(self, operation: str, url: str, data: bytes) -> str:
        try:
            response = self.http_client.put(
                url,
                content=data,
                headers={"Content-Length": str(len(data))},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise _http_error(operation, e) from e
        return response.headers.get("ETag", "")

    def put_object(self, bucket: str, key: str, data: bytes, size: int) -> PutResult:
        url = self._presign(
            "put_object",
            {"Bucket": bucket, "Key": key, "ContentLength": size},
            "PUT",
        )
        return PutResult(etag=self._put("put_object", url, data))

    def upload_part(
        self,
        bucket: str,
        key: str,
        upload_id: str,
        part_number: int,
        data: bytes,
    ) -> str:
        url = self._presign(
            "upload_part",
            {
                "Bucket": bucket,
                "Key": key,
                "UploadId": upload_id,
                "PartNumber": part_number,
                "ContentLength": len(data),
            },
            "PUT",
        )
        return self._put("upload_part", url, data)

    def get_object(self, bucket: str, key: str, chunk_size: int) -> Iterator[bytes]:
        url = self._presign("get_object", {"Bucket": bucket, "Key": key}, "GET")
        return self._stream(url, chunk_size)

    def _stream(self, url: str, chunk_size: int) -> Iterator[bytes]:
        try:
            with self.http_client.stream("GET", url) as response:
                if response.is_error:
                    response.read()
                response.raise_for_status()
                yield from response.iter_bytes(chunk_size=chunk_size)
        except httpx.HTTPError as e:
            raise _http_error("get_object", e) from e
