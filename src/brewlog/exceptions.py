"""Application exceptions raised by decoders, services and repositories.

Exception handlers in main.py translate them into the standard error
envelope: {"error": {"code": "...", "message": "..."}}.

ValidationError -> 400, NotFoundError -> 404, ConflictError -> 409,
UnexpectedError -> 500 (message logged, never sent to the client).
"""


class AppError(Exception):
    """Base class for all application exceptions."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AppError):
    """Raised for malformed input: bad content type, undecodable body, empty update."""

    status_code = 400
    code = "validation_error"


class NotFoundError(AppError):
    """Raised when a requested entity does not exist."""

    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class ConflictError(AppError):
    """Raised when an operation conflicts with existing state (duplicate, still referenced)."""

    status_code = 409
    code = "conflict"


class UnexpectedError(AppError):
    """Raised for internal failures such as a template that fails to render."""
