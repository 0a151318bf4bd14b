"""Error types for Twig.

Nothing in the core recovers from these locally; they propagate to the
caller, and the CLI turns them into a message and a non-zero exit.
"""


class TwigError(Exception):
    """Base exception for all Twig errors."""
    pass


class ObjectNotFoundError(TwigError):
    """Raised when no object is stored at an address."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Object not found: {address}")


class CorruptObjectError(TwigError):
    """Raised when stored bytes fail to decompress or decode."""

    def __init__(self, reason: str, address: str = None):
        self.reason = reason
        self.address = address
        msg = f"Corrupt object: {reason}"
        if address:
            msg += f" (address: {address})"
        super().__init__(msg)


class MalformedInputError(TwigError):
    """Raised when a caller passes a bad address, mode or object kind."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed input: {reason}")


class ObjectIOError(TwigError):
    """Raised when a filesystem operation fails."""

    def __init__(self, operation: str, path, cause: Exception = None):
        self.operation = operation
        self.path = str(path)
        self.cause = cause
        msg = f"I/O error during {operation}: {self.path}"
        if cause:
            msg += f" ({cause})"
        super().__init__(msg)


class RepositoryExistsError(TwigError):
    """Raised by init when the repository directory is already there."""

    def __init__(self, path):
        self.path = str(path)
        super().__init__(f"Repository already exists at {self.path}")
