"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from s3stream.models import Chunk, Part, Strategy, TransferResult


class Reporter(ABC):
    """Abstract base class for transfer progress reporters."""

    @abstractmethod
    def on_transfer_start(
        self,
        source: str,
        destination: str,
        total_size: int,
        strategy: Optional["Strategy"],
    ) -> None:
        """Called when a transfer begins."""
        pass

    @abstractmethod
    def on_chunk(self, chunk: "Chunk", total_size: int) -> None:
        """Called after each chunk is read or received."""
        pass

    @abstractmethod
    def on_part_uploaded(self, part: "Part") -> None:
        """Called when the store acknowledges a multipart part."""
        pass

    @abstractmethod
    def on_transfer_complete(self, result: "TransferResult") -> None:
        """Called when a transfer succeeds or fails."""
        pass

    @abstractmethod
    def on_run_complete(self, results: list["TransferResult"]) -> None:
        """Called when all transfers of a run are done."""
        pass
