"""Tests for reader.py module."""

import io
import os

import pytest

from s3stream.errors import SourceUnavailable
from s3stream.models import DEFAULT_CHUNK_SIZE
from s3stream.reader import ChunkReader, source_size


class TestChunking:
    """Tests for fixed-size chunk production."""

    @pytest.mark.parametrize("length", [1, 1023, 1024, 1025, 10 * 1024 + 7])
    def test_concatenation_equals_source(self, length):
        """Chunks should reassemble into the original bytes."""
        data = os.urandom(length)
        reader = ChunkReader(io.BytesIO(data), chunk_size=1024)

        chunks = list(reader)

        assert b"".join(c.data for c in chunks) == data
        assert len(chunks) == -(-length // 1024)
        assert all(c.size == 1024 for c in chunks[:-1])
        assert 0 < chunks[-1].size <= 1024

    def test_empty_source_yields_no_chunks(self):
        """An empty source should produce zero chunks."""
        reader = ChunkReader(io.BytesIO(b""), chunk_size=1024)

        assert list(reader) == []
        assert reader.total_read == 0
        assert reader.exhausted is True

    def test_offsets_are_cumulative(self):
        """Each chunk's offset should equal the bytes read before it."""
        reader = ChunkReader(io.BytesIO(b"a" * 2500), chunk_size=1000)

        offsets = [c.offset for c in reader]

        assert offsets == [0, 1000, 2000]

    def test_total_read_tracks_progress(self):
        """total_read should advance with every chunk."""
        reader = ChunkReader(io.BytesIO(b"x" * 3000), chunk_size=1000)

        reader.next_chunk()
        assert reader.total_read == 1000
        reader.next_chunk()
        assert reader.total_read == 2000

    def test_million_bytes_with_default_chunk_size(self):
        """1,000,000 bytes read as 30 full chunks plus one of 17,920 bytes."""
        reader = ChunkReader(io.BytesIO(bytes(1_000_000)))

        sizes = [c.size for c in reader]

        assert len(sizes) == 31
        assert sizes[:30] == [DEFAULT_CHUNK_SIZE] * 30
        assert sizes[30] == 17_920

    def test_sequence_is_not_restartable(self):
        """After end-of-input, further reads keep returning None."""
        stream = io.BytesIO(b"abc")
        reader = ChunkReader(stream, chunk_size=2)
        list(reader)

        # New data appended after exhaustion must not be picked up
        stream.write(b"more")

        assert reader.next_chunk() is None
        assert list(reader) == []

    def test_invalid_chunk_size(self):
        """chunk_size must be positive."""
        with pytest.raises(ValueError):
            ChunkReader(io.BytesIO(b""), chunk_size=0)


class TestSourceErrors:
    """Tests for SourceUnavailable handling."""

    def test_open_missing_file(self, tmp_path):
        """Opening a missing file should raise SourceUnavailable."""
        missing = tmp_path / "missing.bin"

        with pytest.raises(SourceUnavailable) as exc_info:
            ChunkReader.open(str(missing))

        assert exc_info.value.source == str(missing)

    def test_open_directory(self, tmp_path):
        """A directory is not a readable byte source."""
        with pytest.raises(SourceUnavailable):
            ChunkReader.open(str(tmp_path))

    def test_closed_source_mid_read(self):
        """Closing the source surfaces as SourceUnavailable on the next read."""
        stream = io.BytesIO(b"x" * 4096)
        reader = ChunkReader(stream, chunk_size=1024)
        reader.next_chunk()

        stream.close()

        with pytest.raises(SourceUnavailable, match="read failed"):
            reader.next_chunk()

    def test_source_size(self, tmp_path):
        """source_size should report the file length."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"x" * 1234)

        assert source_size(str(path)) == 1234

    def test_source_size_missing(self, tmp_path):
        """source_size should raise SourceUnavailable for a missing file."""
        with pytest.raises(SourceUnavailable):
            source_size(str(tmp_path / "nope"))


class TestOwnership:
    """Tests for stream ownership and closing."""

    def test_open_reads_file_and_closes(self, tmp_path):
        """A reader opened from a path closes its file on exit."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"hello world")

        with ChunkReader.open(str(path), chunk_size=4) as reader:
            data = b"".join(c.data for c in reader)

        assert data == b"hello world"
        assert reader.stream.closed

    def test_borrowed_stream_left_open(self):
        """A reader wrapping a caller's stream does not close it."""
        stream = io.BytesIO(b"data")

        with ChunkReader(stream) as reader:
            list(reader)

        assert not stream.closed
