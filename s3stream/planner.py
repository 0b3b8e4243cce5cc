"""Choice between a single put and a multipart upload."""

from s3stream.models import DEFAULT_PART_SIZE, Strategy


def decide(total_size: int, threshold: int = DEFAULT_PART_SIZE) -> Strategy:
    """Pick the upload strategy for a payload of total_size bytes.

    Payloads smaller than threshold go out in one put; anything at or
    above it is uploaded in parts of at least threshold bytes.

    Args:
        total_size: Payload size in bytes.
        threshold: Part-size threshold in bytes.

    Returns:
        Strategy.DIRECT or Strategy.MULTIPART.

    Raises:
        ValueError: If total_size is negative or threshold is not positive.
    """
    if total_size < 0:
        raise ValueError(f"total_size must be non-negative, got {total_size}")
    if threshold <= 0:
        raise ValueError(f"threshold must be positive, got {threshold}")

    if total_size < threshold:
        return Strategy.DIRECT
    return Strategy.MULTIPART
