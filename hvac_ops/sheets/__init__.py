"""
Spreadsheet data layer

Gateway, record models and per-sheet repositories for the remote
spreadsheet store.
"""

from .config import SheetsConfig, Sheet, Action
from .client import SheetsGateway, Envelope, decode_envelope
from .exceptions import (
    SheetsAPIError,
    NotConnectedError,
    TransportError,
    RequestFailed,
    InvalidCredentials,
    DecodeError,
    UnsupportedOperation,
)
from .services import Repositories

__all__ = [
    'SheetsConfig',
    'Sheet',
    'Action',
    'SheetsGateway',
    'Envelope',
    'decode_envelope',
    'SheetsAPIError',
    'NotConnectedError',
    'TransportError',
    'RequestFailed',
    'InvalidCredentials',
    'DecodeError',
    'UnsupportedOperation',
    'Repositories',
]
