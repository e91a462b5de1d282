class DomainError(Exception):
    """Base class for errors raised by the music services."""


class NotFoundError(DomainError):
    """Resource is absent, expired, or not visible to the caller."""


class PermissionDeniedError(DomainError):
    """Resource exists but belongs to someone else.

    Routers answer 404 for this as well, so callers cannot discover the
    existence of other users' rows.
    """


class InvalidInputError(DomainError):
    """Missing field, unsupported file type, oversized upload and the like."""


class RangeNotSatisfiableError(InvalidInputError):
    def __init__(self, size: int):
        super().__init__(f"Requested range not satisfiable for {size} bytes")
        self.size = size


class StorageError(DomainError):
    """The file store failed to read, write, or delete content."""
