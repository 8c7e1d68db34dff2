from typing import Any, Dict, List, Optional

from cloud_code_client.constants.error_codes import ErrorKind


class CloudCodeExceptionBase(Exception):
    """Base class for every error raised by the client."""

    def __init__(
        self,
        code: int,
        kind: ErrorKind,
        message_template: str,
        message_parameters: Optional[List[str]] = None,
        is_permanent: bool = False
    ):
        self.code = code
        self.kind = kind
        self.message_template = message_template
        self.message_parameters = message_parameters or []
        self.is_permanent = is_permanent

        # Format the message with parameters
        if message_parameters:
            formatted_message = message_template.format(*message_parameters)
        else:
            formatted_message = message_template

        super().__init__(formatted_message)

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> Dict[str, Any]:
        """Error shape surfaced to callers: code, kind and message."""
        return {
            "code": self.code,
            "kind": self.kind.value,
            "message": str(self),
        }

    def to_telemetry_string(self) -> str:
        """Convert to string for log output."""
        return f"[{self.kind.value}/{self.code}] {self}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, kind={self.kind.value}, message={str(self)!r})"
