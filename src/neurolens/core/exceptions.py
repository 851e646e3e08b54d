"""
Exception Classes
=================

Error taxonomy for the classification client. Transport and remote failures
come from the classifier endpoint, persistence failures from the history
store, and validation failures from malformed input or responses.
"""

from typing import Optional


class NeurolensError(Exception):
    """
    Base class for all neurolens errors.

    Attributes:
        message (str): Explanation of the error
    """

    def __init__(self, message: str = "An error occurred.") -> None:
        super().__init__(message)
        self.message = message


class TransportError(NeurolensError):
    """
    Raised on network-level failure: unreachable host, timeout, or a
    response body that is not valid JSON.
    """

    def __init__(self, message: str = "Could not reach the classification service.") -> None:
        super().__init__(message)


class RemoteError(NeurolensError):
    """
    Raised when the classification service answers with a non-success status.

    Attributes:
        status (int): HTTP status code of the response
        message (str): Error message reported by the service
    """

    def __init__(self, status: int, message: Optional[str] = None) -> None:
        self.status = status
        super().__init__(message or "Unknown error")

    def __str__(self) -> str:
        return f"Server error ({self.status}): {self.message}"


class PersistError(NeurolensError):
    """
    Raised when the history store cannot read, write or clear a key.

    Attributes:
        key (Optional[str]): Store key the operation targeted
    """

    def __init__(self, message: str = "History could not be saved.", key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class ValidationError(NeurolensError):
    """
    Raised for malformed input: an unknown label, a probability vector of
    the wrong length, or an unsupported resolution.
    """

    def __init__(self, message: str = "Invalid value.") -> None:
        super().__init__(message)
