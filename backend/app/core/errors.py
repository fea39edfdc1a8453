"""Errors raised while accepting a biometric record."""

MISSING_FIELDS_MESSAGE = "Missing required health data fields"
INVALID_BODY_METRICS_MESSAGE = "Invalid age, height, or weight values"
INVALID_LIFESTYLE_MESSAGE = "Invalid sleep hours or water intake values"
INVALID_REQUEST_BODY_MESSAGE = "Invalid request body"


class ValidationError(ValueError):
    """Input record rejected; message is safe to show to the caller."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


def invalid_field_message(field: str) -> str:
    return f"Invalid value for field '{field}'"
