"""Contact error codes and the exception raised at the save/remove/find boundary."""

from enum import IntEnum


class ContactErrorCode(IntEnum):
    UNKNOWN_ERROR = 0
    INVALID_ARGUMENT_ERROR = 1
    TIMEOUT_ERROR = 2
    PENDING_OPERATION_ERROR = 3
    IO_ERROR = 4
    NOT_SUPPORTED_ERROR = 5
    PERMISSION_DENIED_ERROR = 20


class ContactError(Exception):
    """Raised when a contact operation fails; `code` is a ContactErrorCode."""
    def __init__(self, code: ContactErrorCode, message: str = ""):
        self.code = ContactErrorCode(code)
        self.message = message or self.code.name
        super().__init__(f"{self.code.name}: {self.message}")
