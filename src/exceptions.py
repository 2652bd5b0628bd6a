"""Project-wide custom exception types."""


class InvalidRecordError(ValueError):
    """Raised when a response or session record cannot be loaded."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(f"Invalid {kind} record: {message}")
        self.kind = kind
