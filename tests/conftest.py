"""Shared fixtures: an in-memory object store that records every call."""

import hashlib
from typing import Iterator, Optional, Sequence

import pytest

from s3stream.errors import StoreError
from s3stream.models import CompleteResult, Part, PutResult, TransferConfig


class FakeObjectStore:
    """In-memory ObjectStoreClient.

    Records each call in ``calls`` as (operation, details) and can be told
    to reject a given operation or a given part number.
    """

    def __init__(self):
        self.objects: dict[tuple[str, str], bytes] = {}
        self.uploads: dict[str, dict[int, bytes]] = {}
        self.calls: list[tuple[str, dict]] = []
        self.fail_operations: set[str] = set()
        self.fail_part: Optional[int] = None
        self._next_upload = 1

    def operations(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _check(self, operation: str) -> None:
        if operation in self.fail_operations:
            raise StoreError(operation, "simulated failure", "InternalError")

    def put_object(self, bucket: str, key: str, data: bytes, size: int) -> PutResult:
        self.calls.append(("put_object", {"bucket": bucket, "key": key, "size": size}))
        self._check("put_object")
        self.objects[(bucket, key)] = bytes(data)
        return PutResult(etag=f'"{hashlib.md5(data).hexdigest()}"')

    def create_multipart_upload(self, bucket: str, key: str) -> str:
        self.calls.append(("create_multipart_upload", {"bucket": bucket, "key": key}))
        self._check("create_multipart_upload")
        upload_id = f"upload-{self._next_upload}"
        self._next_upload += 1
        self.uploads[upload_id] = {}
        return upload_id

    def upload_part(
        self,
        bucket: str,
        key: str,
        upload_id: str,
        part_number: int,
        data: bytes,
    ) -> str:
        self.calls.append((
            "upload_part",
            {"upload_id": upload_id, "part_number": part_number, "size": len(data)},
        ))
        self._check("upload_part")
        if self.fail_part == part_number:
            raise StoreError("upload_part", f"part {part_number} rejected", "InternalError")
        self.uploads[upload_id][part_number] = bytes(data)
        return f'"etag-{part_number}"'

    def complete_multipart_upload(
        self,
        bucket: str,
        key: str,
        upload_id: str,
        parts: Sequence[Part],
    ) -> CompleteResult:
        self.calls.append((
            "complete_multipart_upload",
            {"upload_id": upload_id, "part_numbers": [p.part_number for p in parts]},
        ))
        self._check("complete_multipart_upload")
        stored = self.uploads.pop(upload_id)
        self.objects[(bucket, key)] = b"".join(stored[p.part_number] for p in parts)
        return CompleteResult(etag=f'"final-{len(parts)}"', location=f"/{bucket}/{key}")

    def abort_multipart_upload(self, bucket: str, key: str, upload_id: str) -> None:
        self.calls.append(("abort_multipart_upload", {"upload_id": upload_id}))
        self._check("abort_multipart_upload")
        self.uploads.pop(upload_id, None)

    def get_object(self, bucket: str, key: str, chunk_size: int) -> Iterator[bytes]:
        self.calls.append(("get_object", {"bucket": bucket, "key": key}))
        self._check("get_object")
        if (bucket, key) not in self.objects:
            raise StoreError("get_object", "The specified key does not exist.", "NoSuchKey")
        data = self.objects[(bucket, key)]
        return iter([data[i:i + chunk_size] for i in range(0, len(data), chunk_size)])


@pytest.fixture
def fake_store() -> FakeObjectStore:
    """Create an empty in-memory object store."""
    return FakeObjectStore()


@pytest.fixture
def transfer_config() -> TransferConfig:
    """Create a transfer configuration with the default sizes."""
    return TransferConfig(
        access_key="minioadmin",
        secret_key="minioadmin",
        bucket="video",
    )
