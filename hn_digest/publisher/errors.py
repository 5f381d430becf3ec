"""Error types for webhook publishing."""


class PublishError(Exception):
    """The webhook rejected the message or could not be reached.

    Attributes:
        status_code: HTTP status code, 0 if no response was received.
        body: Response body text, empty if none.
    """

    def __init__(self, message: str, status_code: int = 0, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
