"""
Domain errors for Telecare.

Services raise these; the HTTP layer turns them into ``{"error": message}``
responses with the status code each class carries.
"""


class TelecareError(Exception):
    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEmail(TelecareError):
    status_code = 400
    default_message = "Email already exists"


class DuplicatePhone(TelecareError):
    status_code = 400
    default_message = "Phone already exists"


class InvalidCredentials(TelecareError):
    status_code = 401
    default_message = "Wrong email or password"


class Unauthenticated(TelecareError):
    status_code = 401
    default_message = "Not logged in"


class NotFound(TelecareError):
    status_code = 404
    default_message = "Not found"


class NoPrescription(NotFound):
    default_message = "Prescription not found"


class Forbidden(TelecareError):
    status_code = 403
    default_message = "Not authorized"


class ValidationError(TelecareError):
    status_code = 400
    default_message = "Invalid input"


class StorageError(TelecareError):
    status_code = 500
    default_message = "Could not write file"


class SignInRequired(Exception):
    """Raised by page dependencies; answered with a redirect to a sign-in view."""

    def __init__(self, redirect_url: str):
        self.redirect_url = redirect_url
        super().__init__(redirect_url)
