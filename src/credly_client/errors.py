BADGE_ALREADY_ISSUED = "User already has this badge"


class CredlyError(Exception):
    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation


class BadgeAlreadyIssuedError(CredlyError):
    def __init__(self, operation: str = "issue_badge") -> None:
        super().__init__(BADGE_ALREADY_ISSUED, operation)


class APIRequestError(CredlyError):
    def __init__(self, operation: str, status_code: int, body: str | None = None) -> None:
        super().__init__(
            f"[credly.{operation}] API request failed with status code: {status_code}",
            operation,
        )
        self.status_code = status_code
        self.body = body


class DecodeError(CredlyError):
    """Raised when a response body is not the expected ``{"data": ...}`` envelope.

    The underlying pydantic error is chained as ``__cause__``.
    """

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"[credly.{operation}] Failed to parse JSON data: {reason}", operation)
        self.reason = reason


class ConfigError(CredlyError):
    pass
