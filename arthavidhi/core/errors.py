"""
Error taxonomy shared by services and routes.

Services raise these; main.py turns them into {"error": message} responses.
"""


class BillingError(Exception):
    status_code = 500
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BillingError):
    """Malformed or missing input. Raised before any transaction starts."""

    status_code = 422
    default_message = "Invalid fields!"


class NotFoundError(BillingError):
    status_code = 404
    default_message = "Not found."


class ConflictError(BillingError):
    """Unique constraint hit: invoice number race, duplicate email."""

    status_code = 409
    default_message = "Conflict."


class StorageError(BillingError):
    """Connection/query failure. Callers only see the generic message."""

    status_code = 500
    default_message = "Database Error."
