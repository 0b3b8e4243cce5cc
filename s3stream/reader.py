"""Fixed-size chunked reading of a finite byte source.

ChunkReader pulls at most chunk_size bytes per read and never buffers
beyond the current chunk. The produced sequence ends at the first
zero-length read and cannot be restarted.
"""

import os
from typing import BinaryIO, Iterator, Optional

from s3stream.errors import SourceUnavailable
from s3stream.models import DEFAULT_CHUNK_SIZE, Chunk


def source_size(path: str) -> int:
    """Return the size of a local file in bytes.

    Raises:
        SourceUnavailable: If the path is not a readable regular file.
    """
    try:
        if not os.path.isfile(path):
            raise SourceUnavailable(path, "not a regular file")
        return os.path.getsize(path)
    except OSError as e:
        raise SourceUnavailable(path, e.strerror or str(e), e) from e


class ChunkReader:
    """Reads a binary stream in fixed-size chunks.

    Can be used as an iterator (``for chunk in reader``) or driven by
    hand through next_chunk(). Closes the stream on exit only when it
    opened the stream itself.
    """

    def __init__(
        self,
        stream: BinaryIO,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        name: Optional[str] = None,
        owns_stream: bool = False,
    ):
        """Initialize the reader.

        Args:
            stream: Binary readable positioned at the first byte to send.
            chunk_size: Maximum bytes per chunk.
            name: Label used in error messages.
            owns_stream: Close the stream in close().
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.stream = stream
        self.chunk_size = chunk_size
        self.name = name or getattr(stream, "name", "<stream>")
        self.owns_stream = owns_stream
        self.total_read = 0
        self._exhausted = False

    @classmethod
    def open(cls, path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> "ChunkReader":
        """Open a local file for chunked reading.

        Raises:
            SourceUnavailable: If the file cannot be opened.
        """
        try:
            stream = open(path, "rb")
        except OSError as e:
            raise SourceUnavailable(path, e.strerror or str(e), e) from e
        return cls(stream, chunk_size=chunk_size, name=path, owns_stream=True)

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def next_chunk(self) -> Optional[Chunk]:
        """Read the next chunk.

        Returns:
            The next Chunk, or None once the source is exhausted.

        Raises:
            SourceUnavailable: If the source fails or was closed mid-read.
        """
        if self._exhausted:
            return None

        try:
            data = self.stream.read(self.chunk_size)
        except (OSError, ValueError) as e:
            raise SourceUnavailable(self.name, f"read failed: {e}", e) from e

        if not data:
            self._exhausted = True
            return None

        chunk = Chunk(data=bytes(data), offset=self.total_read)
        self.total_read += len(data)
        return chunk

    def __iter__(self) -> Iterator[Chunk]:
        while True:
            chunk = self.next_chunk()
            if chunk is None:
                return
            yield chunk

    def close(self) -> None:
        if self.owns_stream:
            self.stream.close()

    def __enter__(self) -> "ChunkReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
