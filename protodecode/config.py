"""
protodecode configuration.

Module-level settings. The ones a user may want to tune per shell
can be overridden through environment variables.
"""

import os

# Recursion ceiling for nested messages (matches protobuf's own default).
# Capped at MAX_DEPTH_LIMIT: each nesting level costs three interpreter frames.
MAX_DEPTH_LIMIT = 200
MAX_DEPTH = min(int(os.environ.get("PROTODECODE_MAX_DEPTH", "100")), MAX_DEPTH_LIMIT)

# Text detection
TEXT_SAMPLE_SIZE = 1024  # Bytes inspected by looks_like_text
TEXT_THRESHOLD = 0.8     # Printable fraction needed to call a buffer text

# Byte payloads up to this size get their hex shown in the summary
SHORT_BYTES_LIMIT = 8

# Payload fetching
HTTP_TIMEOUT = float(os.environ.get("PROTODECODE_HTTP_TIMEOUT", "30"))

GZIP_MAGIC = b"\x1f\x8b"
