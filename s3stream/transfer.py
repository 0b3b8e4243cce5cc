"""Transfer orchestrator.

Coordinates one upload or download end to end:
- Opening and sizing the local source
- Choosing between a direct put and a multipart upload
- Driving chunks from the reader into the chosen upload path
- Streaming downloads to a local file
- Reporter callbacks and the final TransferResult

Component errors are raised as TransferError subclasses and turned into
a FAILED TransferResult here; callers inspect the result instead of
catching exceptions.
"""

import logging
import os
import time
from typing import BinaryIO, Optional

from s3stream.direct import DirectUploader
from s3stream.errors import (
    DestinationUnavailable,
    DownloadFailed,
    SourceUnavailable,
    StoreError,
    TransferError,
)
from s3stream.models import (
    Chunk,
    Strategy,
    TransferConfig,
    TransferResult,
    TransferStatus,
)
from s3stream.multipart import MultipartSession
from s3stream.planner import decide
from s3stream.reader import ChunkReader, source_size
from s3stream.reporters.base import Reporter
from s3stream.store import ObjectStoreClient

logger = logging.getLogger(__name__)


def drive_multipart(
    session: MultipartSession,
    reader: ChunkReader,
    total_size: int,
    reporter: Optional[Reporter] = None,
) -> None:
    """Feed every chunk of reader into an active session.

    Each chunk is accepted and then offered for flushing, with the last
    chunk announced once total_size bytes have been read. A final flush
    after the reader is exhausted covers sources shorter than announced.
    """
    for chunk in reader:
        session.accept(chunk)
        if reporter:
            reporter.on_chunk(chunk, total_size)
        session.maybe_flush(is_final=reader.total_read >= total_size)
    session.maybe_flush(is_final=True)


class StreamTransfer:
    """Uploads and downloads objects through a fixed-size memory buffer.

    Args:
        store: Object store client shared by every transfer
        config: Transfer configuration (bucket, chunk and part sizes)
        reporter: Optional reporter for progress callbacks
    """

    def __init__(
        self,
        store: ObjectStoreClient,
        config: TransferConfig,
        reporter: Optional[Reporter] = None,
    ):
        self.store = store
        self.config = config
        self.reporter = reporter

    def upload_file(
        self,
        path: str,
        key: Optional[str] = None,
        bucket: Optional[str] = None,
    ) -> TransferResult:
        """Upload a local file.

        Args:
            path: Local file to upload
            key: Object key (defaults to the file's base name)
            bucket: Target bucket (defaults to the configured bucket)

        Returns:
            TransferResult describing the outcome
        """
        bucket = bucket or self.config.bucket
        key = key or os.path.basename(path)

        try:
            total_size = source_size(path)
            reader = ChunkReader.open(path, chunk_size=self.config.chunk_size)
        except SourceUnavailable as e:
            # Nothing reached the store
            return self._source_failed(path, bucket, key, e)

        with reader:
            return self._upload(reader, total_size, path, bucket, key)

    def upload_stream(
        self,
        stream: BinaryIO,
        total_size: int,
        key: str,
        bucket: Optional[str] = None,
    ) -> TransferResult:
        """Upload total_size bytes read from a binary stream.

        The stream is read to its end and left open.
        """
        bucket = bucket or self.config.bucket
        reader = ChunkReader(stream, chunk_size=self.config.chunk_size)
        return self._upload(reader, total_size, reader.name, bucket, key)

    def _source_failed(
        self,
        source: str,
        bucket: str,
        key: str,
        error: SourceUnavailable,
    ) -> TransferResult:
        if self.reporter:
            self.reporter.on_transfer_start(source, f"{bucket}/{key}", 0, None)

        result = TransferResult(
            source=source,
            bucket=bucket,
            key=key,
            status=TransferStatus.FAILED,
            error_kind=type(error).__name__,
            error_message=str(error),
        )
        logger.error("Upload of %s failed: %s", source, error)

        if self.reporter:
            self.reporter.on_transfer_complete(result)
        return result

    def _upload(
        self,
        reader: ChunkReader,
        total_size: int,
        source: str,
        bucket: str,
        key: str,
    ) -> TransferResult:
        start_time = time.time()
        strategy = decide(total_size, self.config.part_size)
        result = TransferResult(
            source=source,
            bucket=bucket,
            key=key,
            status=TransferStatus.FAILED,
            strategy=strategy,
            total_size=total_size,
        )

        if self.reporter:
            self.reporter.on_transfer_start(source, f"{bucket}/{key}", total_size, strategy)
        logger.info(
            "Uploading %s to %s/%s (%d bytes, %s)",
            source, bucket, key, total_size, strategy.value,
        )

        session: Optional[MultipartSession] = None
        try:
            if strategy == Strategy.DIRECT:
                uploader = DirectUploader(self.store, reporter=self.reporter)
                put_result = uploader.upload(reader, total_size, bucket, key)
                result.etag = put_result.etag
            else:
                session = MultipartSession(
                    self.store,
                    bucket,
                    key,
                    threshold=self.config.part_size,
                    abort_on_failure=self.config.abort_on_failure,
                    reporter=self.reporter,
                )
                with session:
                    drive_multipart(session, reader, total_size, self.reporter)
                    completed = session.finalize()
                result.etag = completed.etag
                result.location = completed.location
            result.status = TransferStatus.SUCCESS
        except TransferError as e:
            result.error_kind = type(e).__name__
            result.error_message = str(e)
            logger.error("Upload of %s failed: %s", source, e)

        if session is not None:
            result.parts = len(session.parts)
        result.bytes_transferred = reader.total_read
        result.duration_seconds = time.time() - start_time

        if self.reporter:
            self.reporter.on_transfer_complete(result)
        return result

    def download(
        self,
        key: str,
        destination: str,
        bucket: Optional[str] = None,
    ) -> TransferResult:
        """Download an object to a local file, one chunk at a time.

        A partially written file is removed when the download fails.

        Args:
            key: Object key to fetch
            destination: Local path to write
            bucket: Source bucket (defaults to the configured bucket)

        Returns:
            TransferResult describing the outcome
        """
        bucket = bucket or self.config.bucket
        start_time = time.time()
        result = TransferResult(
            source=f"{bucket}/{key}",
            bucket=bucket,
            key=key,
            status=TransferStatus.FAILED,
        )

        if self.reporter:
            self.reporter.on_transfer_start(result.source, destination, 0, None)
        logger.info("Downloading %s/%s to %s", bucket, key, destination)

        created = False
        try:
            try:
                out = open(destination, "wb")
            except OSError as e:
                raise DestinationUnavailable(destination, e.strerror or str(e), e) from e
            created = True

            with out:
                self._receive(bucket, key, destination, out, result)
            result.status = TransferStatus.SUCCESS
        except TransferError as e:
            result.error_kind = type(e).__name__
            result.error_message = str(e)
            logger.error("Download of %s/%s failed: %s", bucket, key, e)
            if created and os.path.exists(destination):
                os.remove(destination)

        result.total_size = result.bytes_transferred
        result.duration_seconds = time.time() - start_time

        if self.reporter:
            self.reporter.on_transfer_complete(result)
        return result

    def _receive(
        self,
        bucket: str,
        key: str,
        destination: str,
        out: BinaryIO,
        result: TransferResult,
    ) -> None:
        try:
            for data in self.store.get_object(bucket, key, self.config.chunk_size):
                chunk = Chunk(data=data, offset=result.bytes_transferred)
                try:
                    out.write(data)
                except OSError as e:
                    raise DestinationUnavailable(destination, e.strerror or str(e), e) from e
                result.bytes_transferred += chunk.size
                if self.reporter:
                    self.reporter.on_chunk(chunk, 0)
        except StoreError as e:
            raise DownloadFailed(e) from e
