"""
Remote policy error taxonomy.

Every failure on either side of the remote call maps to one of these classes; the
orchestrator and the remote handlers catch them and turn them into an ABORT verdict.
"""

from remote_policy.utils.error_codes import ErrorCode


class RemotePolicyError(Exception):
    error_code = ErrorCode.UNEXPECTED_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class EncodingError(RemotePolicyError):
    """Raised when a host accessor fails while building the wire message."""
    error_code = ErrorCode.ENCODING_FAILED


class TransportError(RemotePolicyError):
    """Raised when the remote round trip fails."""
    error_code = ErrorCode.TRANSPORT_FAILED

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ProtocolViolationError(RemotePolicyError):
    error_code = ErrorCode.PROTOCOL_VIOLATION


class ExtractionError(RemotePolicyError, KeyError):
    error_code = ErrorCode.EXTRACTION_FAILED

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.message


class ExecutionValidationError(RemotePolicyError, ValueError):
    error_code = ErrorCode.VALIDATION_FAILED


class ConversionError(RemotePolicyError, ValueError):
    error_code = ErrorCode.CONVERSION_FAILED


class ConfigurationError(RemotePolicyError):
    error_code = ErrorCode.CONFIGURATION_INVALID


def describe_exception(exc: BaseException) -> str:
    """Render ``ClassName: message`` for error responses and diagnostic variables."""
    message = str(exc)
    name = type(exc).__name__
    return f'{name}: {message}' if message else name
