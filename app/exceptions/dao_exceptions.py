class DAOError(Exception):
    """Base class for user store errors raised by the data-access layer."""

    status_code = 400
    code = "DAO_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidUsernameError(DAOError):
    """Raised when a username is missing, empty or whitespace-only."""

    code = "INVALID_USERNAME"


class DuplicateUsernameError(DAOError):
    """Raised when creating a user whose username is already stored."""

    status_code = 409
    code = "DUPLICATE_USERNAME"


class InvalidUserError(DAOError):
    """Raised when a user attribute cannot be stored as a DynamoDB value."""

    code = "INVALID_USER"
