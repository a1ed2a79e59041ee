class NotInitializedError(RuntimeError):
    """Raised when a matching engine is queried before initialization."""


class AlreadyInitializedError(RuntimeError):
    """Raised when a matching engine is initialized a second time."""
