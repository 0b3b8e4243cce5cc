#!/usr/bin/env python3
"""
s3stream - stream files to and from an S3-compatible object store.

Usage:
    python run.py upload video.mp4                  # Use config.json
    python run.py -c custom.json upload a.bin b.bin # Use custom config
    python run.py upload video.mp4 -k media/v.mp4   # Explicit object key
    python run.py download media/v.mp4 -o v.mp4     # Download an object
    python run.py -q -j results.json upload big.iso # Summary + JSON results
    python run.py --presigned upload video.mp4      # Bodies via presigned URLs
"""

import sys
from s3stream.cli import main

if __name__ == "__main__":
    sys.exit(main())
