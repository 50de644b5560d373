"""
Spreadsheet Endpoint Configuration

Holds the single remote endpoint (a Google Apps Script web app) that fronts
the company spreadsheet, plus request settings.
"""

import os
from typing import Optional
from dataclasses import dataclass
from enum import Enum


class Sheet(str, Enum):
    """Named collections in the remote spreadsheet"""
    CUSTOMERS = "Customers"
    PROJECTS = "Projects"
    EQUIPMENT = "Equipment"
    WORK_DAYS = "WorkDays"
    PAYMENTS = "Payments"
    PHOTOS = "Photos"
    USERS = "Users"


class Action(str, Enum):
    """Verbs understood by the remote endpoint"""
    LOGIN = "login"
    GET_ALL = "getAll"
    GET_BY_ID = "getById"
    GET_BY_PROJECT = "getByProject"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class SheetsConfig:
    """Configuration settings for the spreadsheet endpoint"""

    endpoint_url: Optional[str] = None
    timeout: float = 30.0

    # Apps Script only accepts simple CORS requests, so bodies go out as text
    POST_CONTENT_TYPE = "text/plain;charset=utf-8"

    @property
    def is_connected(self) -> bool:
        """True when an endpoint URL has been configured"""
        return bool(self.endpoint_url and self.endpoint_url.strip())

    @property
    def headers(self) -> dict:
        """Headers sent with POST requests"""
        return {"Content-Type": self.POST_CONTENT_TYPE}

    @classmethod
    def from_env(cls) -> 'SheetsConfig':
        """Create configuration from environment variables.

        A missing endpoint is not an error here: it yields a config that
        reports ``is_connected == False``.
        """
        endpoint_url = os.getenv('HVAC_SHEETS_ENDPOINT_URL') or os.getenv('VITE_GOOGLE_SCRIPT_URL')
        timeout = float(os.getenv('HVAC_SHEETS_TIMEOUT', '30'))

        return cls(
            endpoint_url=endpoint_url.strip() if endpoint_url else None,
            timeout=timeout,
        )
