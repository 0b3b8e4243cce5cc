"""Multipart upload session.

Handles the complete lifecycle of an S3 multipart upload:
- Initiate the upload
- Accumulate chunks into a part buffer
- Upload a part whenever the buffer reaches the threshold
- Complete the upload with the ordered part list, or abort it

Each part except the last is at least threshold bytes and exceeds it by
less than one chunk, so peak buffer memory stays near threshold + chunk
size regardless of the object size.
"""

import logging
from typing import Optional

from s3stream.errors import (
    CompleteFailed,
    InitiateFailed,
    PartUploadFailed,
    SessionStateError,
    StoreError,
)
from s3stream.models import DEFAULT_PART_SIZE, Chunk, CompleteResult, Part, SessionState
from s3stream.reporters.base import Reporter
from s3stream.store import ObjectStoreClient

logger = logging.getLogger(__name__)


class MultipartSession:
    """Manages the lifecycle of one multipart upload.

    State machine: UNINITIATED -> ACTIVE -> COMPLETED. A store failure
    while ACTIVE moves the session to FAILED; abort() moves an ACTIVE
    session to ABORTED. COMPLETED, FAILED and ABORTED are terminal.

    Can be used as a context manager: entering initiates the upload and
    an exception inside the block aborts it when abort_on_failure is set.
    """

    def __init__(
        self,
        store: ObjectStoreClient,
        bucket: str,
        key: str,
        threshold: int = DEFAULT_PART_SIZE,
        abort_on_failure: bool = True,
        reporter: Optional[Reporter] = None,
    ):
        """Initialize the session.

        Args:
            store: Object store the parts are sent to
            bucket: Target bucket
            key: Target object key
            threshold: Minimum size of every part but the last
            abort_on_failure: Abort the store-side upload when the
                              context manager exits with an exception
            reporter: Optional reporter notified of each uploaded part
        """
        if threshold <= 0:
            raise ValueError(f"threshold must be positive, got {threshold}")
        self.store = store
        self.bucket = bucket
        self.key = key
        self.threshold = threshold
        self.abort_on_failure = abort_on_failure
        self.reporter = reporter
        self.upload_id: Optional[str] = None
        self.parts: list[Part] = []
        self.state = SessionState.UNINITIATED
        self.abort_attempted = False
        self._buffer = bytearray()

    @property
    def buffered(self) -> int:
        """Bytes accepted but not yet uploaded."""
        return len(self._buffer)

    def _require(self, state: SessionState, action: str) -> None:
        if self.state != state:
            raise SessionStateError(
                f"Cannot {action}: session for {self.bucket}/{self.key} is {self.state.value}"
            )

    def initiate(self) -> str:
        """Create the multipart upload on the store.

        Returns:
            The upload ID for the new multipart upload.

        Raises:
            InitiateFailed: If the store rejects the call.
        """
        self._require(SessionState.UNINITIATED, "initiate")
        try:
            upload_id = self.store.create_multipart_upload(self.bucket, self.key)
        except StoreError as e:
            self.state = SessionState.FAILED
            raise InitiateFailed(e) from e

        self.upload_id = upload_id
        self.state = SessionState.ACTIVE
        logger.debug("Initiated multipart upload %s for %s/%s", upload_id, self.bucket, self.key)
        return upload_id

    def accept(self, chunk: Chunk) -> None:
        """Append a chunk to the part buffer. Performs no store I/O."""
        self._require(SessionState.ACTIVE, "accept data")
        self._buffer += chunk.data

    def maybe_flush(self, is_final: bool = False) -> Optional[Part]:
        """Upload the buffer as the next part if it is due.

        A part is due when the buffer has reached the threshold, or when
        is_final is set and the buffer holds any bytes.

        Args:
            is_final: True once all input has been accepted.

        Returns:
            The uploaded Part, or None if nothing was flushed.

        Raises:
            PartUploadFailed: If the store rejects the part.
        """
        self._require(SessionState.ACTIVE, "flush")

        size = len(self._buffer)
        if size == 0 or (size < self.threshold and not is_final):
            return None

        part_number = len(self.parts) + 1
        try:
            etag = self.store.upload_part(
                self.bucket,
                self.key,
                self.upload_id,
                part_number,
                bytes(self._buffer),
            )
        except StoreError as e:
            self.state = SessionState.FAILED
            raise PartUploadFailed(part_number, e) from e

        part = Part(part_number=part_number, etag=etag, size=size)
        self.parts.append(part)
        self._buffer.clear()

        logger.debug("Uploaded part %d (%d bytes) of %s", part_number, size, self.upload_id)
        if self.reporter:
            self.reporter.on_part_uploaded(part)
        return part

    def get_parts(self) -> list[Part]:
        """Get a copy of the uploaded parts, in part-number order."""
        return list(self.parts)

    def finalize(self) -> CompleteResult:
        """Complete the multipart upload with the ordered part list.

        Must be called exactly once, after every accepted byte has been
        flushed.

        Returns:
            CompleteResult with the final ETag and location.

        Raises:
            SessionStateError: If bytes are still buffered or no part
                               was uploaded.
            CompleteFailed: If the store rejects the call.
        """
        self._require(SessionState.ACTIVE, "finalize")
        if self._buffer:
            raise SessionStateError(
                f"Cannot finalize: {len(self._buffer)} bytes have not been flushed"
            )
        if not self.parts:
            raise SessionStateError("Cannot finalize a multipart upload without parts")

        try:
            result = self.store.complete_multipart_upload(
                self.bucket,
                self.key,
                self.upload_id,
                self.get_parts(),
            )
        except StoreError as e:
            self.state = SessionState.FAILED
            raise CompleteFailed(e) from e

        self.state = SessionState.COMPLETED
        logger.debug("Completed multipart upload %s with %d parts", self.upload_id, len(self.parts))
        return result

    def abort(self) -> None:
        """Abort the multipart upload.

        Cleans up any uploaded parts on the store's side. Safe to call
        even if the upload was not initiated or already ended. Abort
        errors are logged, never raised.
        """
        if self.upload_id is None:
            return
        if self.abort_attempted or self.state == SessionState.COMPLETED:
            return

        self.abort_attempted = True
        try:
            self.store.abort_multipart_upload(self.bucket, self.key, self.upload_id)
        except StoreError as e:
            logger.warning("Could not abort multipart upload %s: %s", self.upload_id, e)
        else:
            logger.info("Aborted multipart upload %s for %s/%s", self.upload_id, self.bucket, self.key)

        self._buffer.clear()
        if self.state == SessionState.ACTIVE:
            self.state = SessionState.ABORTED

    def __enter__(self) -> "MultipartSession":
        """Enter context manager - initiates upload."""
        self.initiate()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Exit context manager - aborts on exception."""
        if exc_type is not None and self.abort_on_failure:
            self.abort()
        return False
