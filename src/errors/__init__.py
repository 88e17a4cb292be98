# List of exceptions
import http


class AuctionError(Exception):
    """Base class for auction exceptions."""
    status_code = http.HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self):
        data = {'error': self.message}
        data.update(self.extra)
        return data


class ValidationError(AuctionError):
    """Raised when input data fails validation."""
    status_code = http.HTTPStatus.BAD_REQUEST


class InvalidRequestError(AuctionError):
    """Raised when a request is valid but cannot be applied."""
    status_code = http.HTTPStatus.BAD_REQUEST


class AuthenticationError(AuctionError):
    """Raised when there is no authenticated user."""
    status_code = http.HTTPStatus.UNAUTHORIZED


class AccessDeniedError(AuctionError):
    """Raised when access is denied."""
    status_code = http.HTTPStatus.FORBIDDEN


class NotFoundError(AuctionError):
    """Raised when a referenced record does not exist."""
    status_code = http.HTTPStatus.NOT_FOUND


class ConflictError(AuctionError):
    status_code = http.HTTPStatus.CONFLICT


class StoreError(AuctionError):
    """Raised when the database fails underneath an operation."""
    status_code = http.HTTPStatus.INTERNAL_SERVER_ERROR
