"""
s3stream - streamed uploads and downloads for S3-compatible object stores.

Reads local data in fixed-size chunks and sends it either as a single
put or as a multipart upload, keeping memory use bounded by the part
size no matter how large the object is.
"""

import logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from s3stream.cli import main  # noqa: E402

__all__ = ["main", "__version__"]
