"""Error taxonomy for database link operations.

User cancellation is deliberately absent: it is reported as data
(`ABORTED`, `None`, `False` or `LinkOutcome.NOT_UPDATED`), never raised.
"""


class CloudLinkError(RuntimeError):
    """Base class for all failures surfaced to the CLI."""


class AuthError(CloudLinkError):
    """Raised when no usable cloud connection configuration is found."""


class NotFoundError(CloudLinkError):
    """Raised when a referenced database, app or link does not exist."""


class AlreadyExistsError(CloudLinkError):
    """Raised when creating a database whose name is already taken."""


class AlreadyLinkedError(CloudLinkError):
    """Raised when the label is already bound to the requested database."""


class ConflictError(CloudLinkError):
    """Raised when the label is bound to another database and no relink was confirmed."""

    def __init__(self, message: str, *, current_database: str) -> None:
        super().__init__(message)
        self.current_database = current_database


class DuplicateDeclarationError(CloudLinkError):
    """Raised when a scripted run declares the same label twice."""


class MissingDeclarationError(CloudLinkError):
    """Raised when a scripted run has no declaration for a requested label."""


class GenerationExhaustedError(CloudLinkError):
    """Raised when no unused name could be generated within the attempt bound."""


class UpstreamError(CloudLinkError):
    """Raised when the remote catalog call fails (transport or HTTP status)."""
