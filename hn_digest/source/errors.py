"""Error types for the content source."""


class SourceError(Exception):
    """The candidate id list could not be retrieved.

    Attributes:
        status_code: HTTP status code, 0 if no response was received.
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code
