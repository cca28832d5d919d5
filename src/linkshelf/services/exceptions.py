"""Shared exceptions for service layer operations."""


class InvalidStateError(Exception):
    """
    Raised when an operation is invalid for a link's current state.

    For example restoring a link that is not in the trash.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
