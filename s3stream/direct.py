"""Single-shot upload for payloads below the part-size threshold."""

import logging
from typing import Optional

from s3stream.errors import StoreError, UploadFailed
from s3stream.models import PutResult
from s3stream.reader import ChunkReader
from s3stream.reporters.base import Reporter
from s3stream.store import ObjectStoreClient

logger = logging.getLogger(__name__)


class DirectUploader:
    """Uploads a small payload with one put-object call.

    The whole payload is held in memory, so this path is only chosen
    when the total size is below the part-size threshold.
    """

    def __init__(self, store: ObjectStoreClient, reporter: Optional[Reporter] = None):
        self.store = store
        self.reporter = reporter

    def upload(
        self,
        reader: ChunkReader,
        total_size: int,
        bucket: str,
        key: str,
    ) -> PutResult:
        """Drain the reader and put its bytes as one object.

        Args:
            reader: Source of chunks; consumed to the end.
            total_size: Announced payload size, used for progress only.
            bucket: Target bucket.
            key: Target object key.

        Returns:
            PutResult carrying the store-assigned ETag.

        Raises:
            SourceUnavailable: If the source fails while being read.
            UploadFailed: If the store rejects the put.
        """
        payload = bytearray()
        for chunk in reader:
            payload += chunk.data
            if self.reporter:
                self.reporter.on_chunk(chunk, total_size)

        logger.debug("Putting %d bytes to %s/%s", len(payload), bucket, key)
        try:
            return self.store.put_object(bucket, key, bytes(payload), len(payload))
        except StoreError as e:
            raise UploadFailed(e) from e
