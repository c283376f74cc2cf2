"""Domain error taxonomy shared by every app.

Services raise these exceptions; they carry a short upper-case ``code`` (the
same style the API uses for ``detail``), a human-readable ``message`` and
the HTTP ``status_code`` the API maps them to. Structured extras (missing
measurement names, offending value, ...) travel in ``extra`` and are merged
into the error body by ``apps.common.exceptions.api_exception_handler``.

The module is framework-free so domain code can import it without Django.
"""


class DomainError(Exception):
    """Base class for errors that are part of the API contract."""

    status_code = 400
    code = "ERROR"
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None, *, code: str | None = None, **extra):
        self.message = message or self.default_message
        if code:
            self.code = code
        self.extra = extra
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.code


class ValidationFailed(DomainError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid request payload"


class Unauthenticated(DomainError):
    status_code = 401
    code = "UNAUTHENTICATED"
    default_message = "Authentication required"


class Forbidden(DomainError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action"


class NotFound(DomainError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class Conflict(DomainError):
    status_code = 409
    code = "CONFLICT"
    default_message = "The resource was modified concurrently"


class EmailAlreadyRegistered(Conflict):
    status_code = 400
    code = "EMAIL_ALREADY_REGISTERED"
    default_message = "This email is already registered"


class Unavailable(DomainError):
    status_code = 400
    code = "PRODUCT_UNAVAILABLE"
    default_message = "Product is not available for ordering"


class InvalidTransition(DomainError):
    status_code = 400
    code = "INVALID_TRANSITION"
    default_message = "Status transition is not allowed"


class MissingMeasurements(ValidationFailed):
    code = "MISSING_MEASUREMENTS"
    default_message = "Required measurements are missing"

    def __init__(self, names: list[str]):
        super().__init__(missing=list(names))
        self.names = list(names)


class ExtraMeasurements(ValidationFailed):
    code = "EXTRA_MEASUREMENTS"
    default_message = "Measurements supplied are not required for this product"

    def __init__(self, names: list[str]):
        super().__init__(extra=list(names))
        self.names = list(names)


class InvalidMeasurementValue(ValidationFailed):
    code = "INVALID_MEASUREMENT_VALUE"
    default_message = "Invalid measurement value"

    def __init__(self, name: str, value, message: str | None = None):
        super().__init__(message, measurement=name, value=value)
        self.name = name
        self.value = value
