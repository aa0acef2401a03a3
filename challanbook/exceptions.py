"""Application error types.

Routers catch these and turn them into an alert on the page; nothing here
knows about HTTP.
"""
from typing import List


class ChallanBookError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ChallanBookError):
    """One or more input rules were violated. All of them are reported."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(". ".join(self.errors))


class RecordNotFound(ChallanBookError):
    def __init__(self, label: str, record_id: str):
        self.label = label
        self.record_id = record_id
        super().__init__(f"{label.capitalize()} not found")


class ConflictError(ChallanBookError):
    """The record changed since it was read."""

    def __init__(self, label: str, record_id: str):
        self.label = label
        self.record_id = record_id
        super().__init__(
            f"This {label} was modified by someone else. Reload it and try again."
        )


class StoreOperationError(ChallanBookError):
    """A database call failed. The message is safe to show; the cause is only logged."""


class IdentityError(ChallanBookError):
    def __init__(self, code: str, message: str = ""):
        self.code = code
        self.raw_message = message
        super().__init__(f"{code}: {message}" if message else code)
