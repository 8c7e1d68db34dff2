from enum import Enum


class ErrorCodes:
    """Numeric error codes reported by the backend."""

    OTHER_CAUSE = -1
    INTERNAL_SERVER_ERROR = 1
    CONNECTION_FAILED = 100
    OBJECT_NOT_FOUND = 101
    INVALID_JSON = 107
    OPERATION_FORBIDDEN = 119
    SCRIPT_FAILED = 141
    VALIDATION_ERROR = 142


class ErrorKind(str, Enum):
    """Error categories surfaced to callers."""

    SCRIPT_FAILED = "SCRIPT_FAILED"
    INVALID_FUNCTION = "INVALID_FUNCTION"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    CONNECTION_FAILED = "CONNECTION_FAILED"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    INTERNAL = "INTERNAL"
    TIMEOUT = "TIMEOUT"
    OTHER = "OTHER"


# Kind for server-reported codes that have no dedicated exception class
KIND_BY_CODE = {
    ErrorCodes.OTHER_CAUSE: ErrorKind.OTHER,
    ErrorCodes.INTERNAL_SERVER_ERROR: ErrorKind.INTERNAL,
    ErrorCodes.CONNECTION_FAILED: ErrorKind.CONNECTION_FAILED,
    ErrorCodes.OBJECT_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCodes.INVALID_JSON: ErrorKind.INVALID_RESPONSE,
    ErrorCodes.SCRIPT_FAILED: ErrorKind.SCRIPT_FAILED,
    ErrorCodes.VALIDATION_ERROR: ErrorKind.VALIDATION,
}
