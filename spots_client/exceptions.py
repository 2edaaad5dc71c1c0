"""
Client exception hierarchy.

Every failure raised by the client derives from ApiException, which carries
the HTTP status code when there is one.
"""


class ApiException(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self):
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ValidationException(ApiException):
    """Rejected input, raised locally or for HTTP 400/422."""


class NotFoundException(ApiException):
    """HTTP 404."""


class ConflictException(ApiException):
    """HTTP 409."""


class ServerException(ApiException):
    """Any other non-2xx status."""


class NetworkException(ApiException):
    """The request never produced a response."""


class RequestTimeoutException(ApiException):
    """The request timed out."""


class DataException(ApiException):
    """A 2xx response whose body could not be decoded."""


class PostCreationError(ApiException):
    """A community or list post could not be created.

    ``step`` names the stage that failed: validate, create_list, add_spots
    or create_post. The underlying error is chained as ``__cause__``.
    """

    STEPS = ("validate", "create_list", "add_spots", "create_post")

    def __init__(self, step, message, status_code=None):
        super().__init__(message, status_code)
        self.step = step


STATUS_EXCEPTIONS = {
    400: ValidationException,
    404: NotFoundException,
    409: ConflictException,
    422: ValidationException,
}

DEFAULT_MESSAGES = {
    400: "Invalid request",
    404: "Resource not found",
    409: "Resource conflict",
    422: "Unprocessable request",
}


def exception_for_status(status_code, message=None):
    """Map an HTTP error status to its exception type."""
    exception_class = STATUS_EXCEPTIONS.get(status_code, ServerException)
    message = message or DEFAULT_MESSAGES.get(status_code, f"Server error ({status_code})")
    return exception_class(message, status_code)
