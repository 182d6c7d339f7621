"""Typed failures raised by the job extraction pipeline.

Every error carries an HTTP ``status_code`` so the API layer can render it
without knowing which stage failed.
"""


class ExtractionError(Exception):
    """Base class for all extraction failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputTooShortError(ExtractionError):
    status_code = 400


class FetchError(ExtractionError):
    """The job page could not be retrieved."""

    status_code = 502

    def __init__(self, message: str, attempts: int = 0, timed_out: bool = False) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.timed_out = timed_out


class InvalidUrlError(FetchError):
    status_code = 400


class CredentialMissingError(ExtractionError):
    """No model API key is configured for the user."""

    status_code = 404


class ContentBlockedError(ExtractionError):
    """The model refused the prompt on content-policy grounds."""

    status_code = 422

    def __init__(self, message: str, block_reason: str | None = None) -> None:
        super().__init__(message)
        self.block_reason = block_reason


class ModelInvocationError(ExtractionError):
    """Transport or API failure while calling the model."""

    status_code = 502


class ParseError(ExtractionError):
    """The model reply could not be decoded as JSON."""

    status_code = 502


class ValidationError(ExtractionError):
    """Decoded JSON is missing required fields or has the wrong types."""

    status_code = 422


class ExtractionIncompleteError(ValidationError):
    pass
