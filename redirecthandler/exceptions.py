class RedirectHandlerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:redirect_handler_error'


class ValidationError(RedirectHandlerError):
    """Base exception for rejected redirect field values."""

    error_code = 'validation:validation_error'


class InvalidStatusCodeError(ValidationError):
    """Raised when a status code is not an integer within [100, 599]."""

    error_code = 'validation:invalid_status_code_error'


class InvalidUriPathError(ValidationError):
    """Raised when a URI path does not fit its persisted column."""

    error_code = 'validation:invalid_uri_path_error'


class ConfigurationError(RedirectHandlerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'
