"""Project-wide constants (default ports, wire conventions)."""

DEFAULT_MASTER_PORT: int = 9333
DEFAULT_FILER_PORT: int = 8888
DEFAULT_S3_PORT: int = 8333

DEFAULT_TIMEOUT_SECONDS: float = 30.0

# Filer listings default to 100 entries per page server-side
DEFAULT_LIST_LIMIT: int = 100

TAG_PREFIX: str = "Seaweed-"

FID_DELIMITER: str = ","
COOKIE_HEX_DIGITS: int = 8
MAX_FILE_KEY_HEX_DIGITS: int = 16
MAX_VOLUME_ID: int = 2**32 - 1

UPLOAD_FORM_FIELD: str = "file"
STREAM_CHUNK_SIZE: int = 64 * 1024

REQUEST_ID_HEADER: str = "X-Request-ID"
