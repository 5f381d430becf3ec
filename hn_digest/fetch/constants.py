"""HTTP constants for the fetch layer."""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_SERVER_ERROR_MAX = 600

# Pages and API records are small; anything bigger is not worth reading
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 2 * 1024 * 1024  # 2 MB

# Chunk size for streaming reads
DEFAULT_CHUNK_SIZE = 8192

DEFAULT_TIMEOUT_SECONDS = 10.0

DEFAULT_USER_AGENT = "hn-digest/0.1 (+https://news.ycombinator.com)"

# Supported URL schemes
VALID_URL_SCHEMES = ("http://", "https://")

# What a request was made for; metrics are kept per purpose
PURPOSE_SOURCE = "source"
PURPOSE_ENRICH = "enrich"
