import re
from typing import Optional

from cloud_code_client.constants.error_codes import ErrorCodes, ErrorKind, KIND_BY_CODE
from cloud_code_client.exceptions.base_exception import CloudCodeExceptionBase

INVALID_FUNCTION_PATTERN = re.compile(r'^Invalid function: "(?P<name>.*)"$', re.DOTALL)
INVALID_JOB_MESSAGE = "Invalid job."
OBJECT_NOT_FOUND_MESSAGE = "Object not found."


class ScriptFailedException(CloudCodeExceptionBase):
    """The invoked function or job raised a failure on the server."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.SCRIPT_FAILED):
        super().__init__(
            code=ErrorCodes.SCRIPT_FAILED,
            kind=kind,
            message_template=message,
            message_parameters=None,
            is_permanent=True
        )


class InvalidFunctionException(ScriptFailedException):
    """No cloud function is registered under the requested name."""

    def __init__(self, function_name: str):
        super().__init__(f'Invalid function: "{function_name}"', kind=ErrorKind.INVALID_FUNCTION)
        self.function_name = function_name


class InvalidJobException(ScriptFailedException):
    """No background job is registered under the requested name."""

    def __init__(self, message: str = INVALID_JOB_MESSAGE):
        super().__init__(message)


class ObjectNotFoundException(CloudCodeExceptionBase):
    """Exception raised when a requested server-side object does not exist."""

    def __init__(self, message: str = OBJECT_NOT_FOUND_MESSAGE):
        super().__init__(
            code=ErrorCodes.OBJECT_NOT_FOUND,
            kind=ErrorKind.NOT_FOUND,
            message_template=message,
            message_parameters=None,
            is_permanent=True
        )


class ValidationException(CloudCodeExceptionBase):
    """Client-side validation failure, raised before any request is sent."""

    def __init__(self, message: str):
        super().__init__(
            code=ErrorCodes.VALIDATION_ERROR,
            kind=ErrorKind.VALIDATION,
            message_template=message,
            message_parameters=None,
            is_permanent=True
        )


class EntityReferenceNotAllowedException(ValidationException):
    """A call parameter refers to a persisted server-side entity."""

    def __init__(self):
        super().__init__("Entity references not allowed here")


class UnsupportedValueException(ValidationException):
    """A call parameter cannot be serialized."""

    def __init__(self, value_type: str):
        super().__init__(f"Value of type '{value_type}' cannot be sent to the server")
        self.value_type = value_type


class InvalidParameterException(ValidationException):
    """Exception for invalid parameters."""

    def __init__(self, parameter_name: str, message: str):
        super().__init__(f"Invalid parameter '{parameter_name}': {message}")
        self.parameter_name = parameter_name


class MasterKeyRequiredException(ValidationException):
    def __init__(self, operation: str):
        super().__init__(f"{operation} requires a master key, but none is configured")


class ConnectionFailedException(CloudCodeExceptionBase):
    """The server could not be reached."""

    def __init__(self, message: str):
        super().__init__(
            code=ErrorCodes.CONNECTION_FAILED,
            kind=ErrorKind.CONNECTION_FAILED,
            message_template=message,
            message_parameters=None,
            is_permanent=False
        )


class InvalidResponseException(CloudCodeExceptionBase):
    """The server answered with a payload the client cannot interpret."""

    def __init__(self, message: str):
        super().__init__(
            code=ErrorCodes.INVALID_JSON,
            kind=ErrorKind.INVALID_RESPONSE,
            message_template=message,
            message_parameters=None,
            is_permanent=False
        )


class ServerErrorException(CloudCodeExceptionBase):
    """Any server-reported error without a dedicated exception class."""

    def __init__(self, code: int, message: str):
        super().__init__(
            code=code,
            kind=KIND_BY_CODE.get(code, ErrorKind.OTHER),
            message_template=message,
            message_parameters=None,
            is_permanent=code != ErrorCodes.INTERNAL_SERVER_ERROR
        )


class InternalErrorException(CloudCodeExceptionBase):
    """Exception for internal errors."""

    def __init__(self, message: str):
        super().__init__(
            code=ErrorCodes.OTHER_CAUSE,
            kind=ErrorKind.INTERNAL,
            message_template=message,
            message_parameters=None,
            is_permanent=False
        )
        self.internal_message = message

    def to_telemetry_string(self) -> str:
        return self.internal_message


class InvariantViolationException(InternalErrorException):
    """Exception for invariant violations."""

    def __init__(self, message: str):
        super().__init__(message)

    def to_telemetry_string(self) -> str:
        return f"INVARIANT VIOLATION: {self.internal_message}"


class JobStatusMismatchException(CloudCodeExceptionBase):
    """A job reached a terminal status other than the one being waited for."""

    def __init__(self, job_status_id: str, expected: str, actual: str, message: Optional[str] = None):
        super().__init__(
            code=ErrorCodes.OTHER_CAUSE,
            kind=ErrorKind.SCRIPT_FAILED if actual == "failed" else ErrorKind.OTHER,
            message_template="Job {0} finished with status '{1}' while waiting for '{2}'",
            message_parameters=[job_status_id, actual, expected],
            is_permanent=True
        )
        self.job_status_id = job_status_id
        self.expected = expected
        self.actual = actual
        self.job_message = message


class JobWaitTimeoutException(CloudCodeExceptionBase):
    def __init__(self, job_status_id: str, timeout: float):
        super().__init__(
            code=ErrorCodes.OTHER_CAUSE,
            kind=ErrorKind.TIMEOUT,
            message_template="Job {0} did not reach the expected status within {1}s",
            message_parameters=[job_status_id, f"{timeout:g}"],
            is_permanent=False
        )
        self.job_status_id = job_status_id
        self.timeout = timeout


def exception_from_response(code: Optional[int], message: Optional[str]) -> CloudCodeExceptionBase:
    """Map a server-reported ``{code, error}`` body to the matching exception."""
    message = message or ""
    if code == ErrorCodes.SCRIPT_FAILED:
        match = INVALID_FUNCTION_PATTERN.match(message)
        if match:
            return InvalidFunctionException(match.group("name"))
        if message == INVALID_JOB_MESSAGE:
            return InvalidJobException(message)
        return ScriptFailedException(message)
    if code == ErrorCodes.OBJECT_NOT_FOUND:
        return ObjectNotFoundException(message or OBJECT_NOT_FOUND_MESSAGE)
    if code is None:
        return ServerErrorException(ErrorCodes.OTHER_CAUSE, message)
    return ServerErrorException(code, message)
