"""Error taxonomy for streamed transfers.

Every error raised by the transfer engine derives from TransferError and
names the operation that failed together with the underlying store error:

- SourceUnavailable: the local byte source cannot be opened or read
- UploadFailed: a direct put was rejected by the store
- PartUploadFailed: a multipart part upload was rejected
- InitiateFailed / CompleteFailed: multipart bootstrap or finalize rejected
- DownloadFailed: an object download was rejected
- DestinationUnavailable: a download target cannot be written

StoreError is what an object store binding raises; the engine wraps it in
one of the errors above.
"""

from typing import Optional


class StoreError(Exception):
    """Raised by an object store binding when the store rejects a call."""

    def __init__(self, operation: str, message: str, code: Optional[str] = None):
        """Initialize the store error.

        Args:
            operation: Name of the store operation (e.g. "upload_part").
            message: Error string reported by the store or SDK.
            code: Optional store error code or HTTP status.
        """
        detail = f"{code}: {message}" if code else message
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.message = message
        self.code = code


class TransferError(Exception):
    """Base class for all transfer failures."""

    operation = "transfer"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class SourceUnavailable(TransferError):
    """Raised when the local byte source cannot be opened or read."""

    operation = "read source"

    def __init__(self, source: str, reason: str, cause: Optional[BaseException] = None):
        super().__init__(f"Source unavailable: {source} ({reason})", cause)
        self.source = source
        self.reason = reason


class DestinationUnavailable(TransferError):
    """Raised when a download target cannot be created or written."""

    operation = "write destination"

    def __init__(self, destination: str, reason: str, cause: Optional[BaseException] = None):
        super().__init__(f"Destination unavailable: {destination} ({reason})", cause)
        self.destination = destination
        self.reason = reason


class UploadFailed(TransferError):
    """Raised when a single-shot put is rejected by the store."""

    operation = "put object"

    def __init__(self, cause: BaseException):
        super().__init__(f"Upload failed: {cause}", cause)


class InitiateFailed(TransferError):
    """Raised when a multipart upload cannot be created."""

    operation = "create multipart upload"

    def __init__(self, cause: BaseException):
        super().__init__(f"Initiate multipart upload failed: {cause}", cause)


class PartUploadFailed(TransferError):
    """Raised when uploading one part of a multipart upload fails."""

    operation = "upload part"

    def __init__(self, part_number: int, cause: BaseException):
        super().__init__(f"Part {part_number} upload failed: {cause}", cause)
        self.part_number = part_number


class CompleteFailed(TransferError):
    """Raised when the store rejects the complete-multipart call."""

    operation = "complete multipart upload"

    def __init__(self, cause: BaseException):
        super().__init__(f"Complete multipart upload failed: {cause}", cause)


class DownloadFailed(TransferError):
    """Raised when an object cannot be fetched from the store."""

    operation = "get object"

    def __init__(self, cause: BaseException):
        super().__init__(f"Download failed: {cause}", cause)


class SessionStateError(TransferError):
    """Raised when a multipart session operation is called in the wrong state."""

    operation = "multipart session"
