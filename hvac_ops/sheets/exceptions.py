"""
Spreadsheet API Exceptions

Exception classes raised by the gateway and repositories.
"""

from typing import Optional


GENERIC_FAILURE_MESSAGE = "Request failed"


class SheetsAPIError(Exception):
    """Base exception for spreadsheet endpoint errors"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 response: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response


class NotConnectedError(SheetsAPIError):
    """No endpoint URL is configured"""

    def __init__(self, message: str = "Spreadsheet endpoint is not configured"):
        super().__init__(message)


class TransportError(SheetsAPIError):
    """The request could not complete or the body was not a JSON envelope"""
    pass


class RequestFailed(SheetsAPIError):
    """The remote store answered with success: false"""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None,
                 response: Optional[str] = None):
        super().__init__(message or GENERIC_FAILURE_MESSAGE, status_code=status_code,
                         response=response)


class InvalidCredentials(RequestFailed):
    """Login was rejected by the remote store"""
    pass


class DecodeError(SheetsAPIError):
    """The data payload did not match the expected record shape"""
    pass


class UnsupportedOperation(NotImplementedError):
    """A repository was asked for a verb its sheet does not offer"""
    pass
