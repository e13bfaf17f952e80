"""Protocol-wide constants for the remote-control transport."""

ENCODING = "utf-8"
FRAME_DELIMITER = "---Message--End---"
DEFAULT_HOST = "127.0.0.1"
MAX_RETRIES = 60
RETRY_DELAY = 1.0  # seconds
MAX_PAYLOAD_SIZE = 16 * 1024 * 1024  # 16 MB upper bound for a single frame

__all__ = [
    "ENCODING",
    "FRAME_DELIMITER",
    "DEFAULT_HOST",
    "MAX_RETRIES",
    "RETRY_DELAY",
    "MAX_PAYLOAD_SIZE",
]
