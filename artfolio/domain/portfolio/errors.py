"""
Domain-specific errors for the portfolio bounded context.

All errors raised from the domain and application layers are defined here.
They are mapped to HTTP responses at the interface layer.
No framework imports allowed.

Absence of a row is never an error at the data-access layer; lookups
return None or an empty list and only the interface layer turns that
into a 404.
"""


class StorageError(Exception):
    """Base error for storage gateway failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class StorageConflictError(StorageError):
    """Raised when a write violates a storage constraint (e.g. unique slug)."""

    def __init__(self, table: str, detail: str = "") -> None:
        super().__init__(f"Constraint violation on {table}: {detail}".rstrip(": "))
        self.table = table
        self.detail = detail


class StorageUnavailableError(StorageError):
    """Raised when the storage backend cannot be reached or times out."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Storage unavailable: {reason}")
        self.reason = reason


class PortfolioDomainError(Exception):
    """Base error for all portfolio domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class PortfolioNotFoundError(PortfolioDomainError):
    """Raised when a portfolio cannot be resolved from a slug, id or alias."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Portfolio not found: {identifier}")
        self.identifier = identifier


class UserNotFoundError(PortfolioDomainError):
    """Raised when an operation requires a user row that does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class SlugConflictError(PortfolioDomainError):
    """Raised when a portfolio slug is already taken."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug already in use: {slug}")
        self.slug = slug


class InvalidImageError(PortfolioDomainError):
    """Raised when an image cannot be saved as requested."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid image: {reason}")
        self.reason = reason


class InvalidEventError(PortfolioDomainError):
    """Raised when an event is missing required fields."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid event: {reason}")
        self.reason = reason


class InvalidUpdateError(PortfolioDomainError):
    """Raised when a sparse update names fields that cannot be changed,
    or clears a field that must keep a value."""

    def __init__(self, fields: list[str], reason: str = "cannot be updated") -> None:
        super().__init__(f"Fields {reason}: {', '.join(sorted(fields))}")
        self.fields = fields
        self.reason = reason


class EmptyUpdateError(PortfolioDomainError):
    """Raised when an update that requires changes carries none."""

    def __init__(self) -> None:
        super().__init__("No fields to update")


class NotAuthenticatedError(PortfolioDomainError):
    """Raised when an operation needs the current user and there is none."""

    def __init__(self) -> None:
        super().__init__("Not authenticated")


class FileHostingError(PortfolioDomainError):
    """Raised when the file host rejects or fails an upload."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"Upload of {filename} failed: {reason}")
        self.filename = filename
        self.reason = reason
