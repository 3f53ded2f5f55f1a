"""Domain errors raised by the stores and the coach; rendered as JSON by main."""


class FocusMateError(Exception):
    """Base error. `code` is stable for clients, `status_code` is the HTTP mapping."""

    code = "error"
    status_code = 400
    default_message = "Request failed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateAccount(FocusMateError):
    code = "duplicate_account"
    status_code = 409
    default_message = "Account already exists with this email."


class AccountNotFound(FocusMateError):
    code = "account_not_found"
    status_code = 404
    default_message = "No account found. Please sign up first."


class InvalidCredentials(FocusMateError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Incorrect password."


class NotAuthenticated(FocusMateError):
    code = "not_authenticated"
    status_code = 401
    default_message = "User not authenticated."


class ValidationError(FocusMateError):
    code = "validation_error"
    status_code = 422
    default_message = "Invalid data."


class ConfigurationError(FocusMateError):
    code = "configuration_error"
    status_code = 503
    default_message = "API key is missing or invalid."


class ProviderError(FocusMateError):
    code = "provider_error"
    status_code = 502
    default_message = "The AI provider failed. Please try again."
