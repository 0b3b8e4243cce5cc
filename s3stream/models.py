"""Data models for streamed object store transfers."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

# Bytes pulled from the source per read
DEFAULT_CHUNK_SIZE = 32 * 1024

# Part-size threshold: 5 MiB (S3 minimum size of a non-final part)
DEFAULT_PART_SIZE = 5 * 1024 * 1024


class Strategy(Enum):
    """Upload strategy picked by the transfer planner."""

    DIRECT = "direct"
    MULTIPART = "multipart"


class SessionState(Enum):
    """Lifecycle state of a multipart upload session."""

    UNINITIATED = "uninitiated"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    ABORTED = "aborted"


class TransferStatus(Enum):
    """Terminal status of a transfer."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class TransferConfig:
    """Connection and transfer settings for an S3-compatible store."""

    access_key: str
    secret_key: str
    bucket: str
    endpoint: str = "localhost:9000"
    secure: bool = False
    region: str = "us-east-1"
    addressing_style: str = "path"
    chunk_size: int = DEFAULT_CHUNK_SIZE
    part_size: int = DEFAULT_PART_SIZE
    abort_on_failure: bool = True
    http_timeout: float = 60.0

    @property
    def endpoint_url(self) -> str:
        """Endpoint as a URL, honoring an explicit scheme if one is given."""
        if "://" in self.endpoint:
            return self.endpoint
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.endpoint}"


@dataclass(frozen=True)
class Chunk:
    """A block of bytes read from a source.

    offset is the number of bytes read before this chunk.
    """

    data: bytes
    offset: int

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Part:
    """A part acknowledged by the store during a multipart upload."""

    part_number: int
    etag: str
    size: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Render the part the way complete-multipart expects it."""
        return {"PartNumber": self.part_number, "ETag": self.etag}


@dataclass(frozen=True)
class PutResult:
    """Result of a single-shot put."""

    etag: str


@dataclass(frozen=True)
class CompleteResult:
    """Result of completing a multipart upload."""

    etag: str
    location: str = ""


@dataclass
class TransferResult:
    """Outcome of one upload or download."""

    source: str
    bucket: str
    key: str
    status: TransferStatus
    strategy: Optional[Strategy] = None
    total_size: int = 0
    bytes_transferred: int = 0
    etag: Optional[str] = None
    location: Optional[str] = None
    parts: int = 0
    duration_seconds: float = 0.0
    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """Check if the transfer finished successfully."""
        return self.status == TransferStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "bucket": self.bucket,
            "key": self.key,
            "status": self.status.value,
            "strategy": self.strategy.value if self.strategy else None,
            "total_size": self.total_size,
            "bytes_transferred": self.bytes_transferred,
            "etag": self.etag,
            "location": self.location,
            "parts": self.parts,
            "duration_seconds": self.duration_seconds,
            "error_kind": self.error_kind,
            "error_message": self.error_message,
        }
