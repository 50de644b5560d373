"""
Session and company profile, kept on the local machine.

Both live as plain JSON blobs under fixed keys in a state directory. Neither
goes through the spreadsheet gateway except for the login and account-update
calls themselves.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError as SchemaError
from pydantic.alias_generators import to_camel

from .core.validation import validate_required
from .sheets.models import User
from .sheets.services import UsersService


logger = logging.getLogger(__name__)

USER_KEY = "user"
COMPANY_INFO_KEY = "companyInfo"


class LocalStore:
    """JSON blobs keyed by name, one file per key"""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Discarding unreadable {key} record: {e}")
            self.remove(key)
            return None
        if not isinstance(data, dict):
            logger.warning(f"Discarding {key} record that is not an object")
            self.remove(key)
            return None
        return data

    def write(self, key: str, value: Dict[str, Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(json.dumps(value), encoding="utf-8")

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class SessionContext:
    """The logged-in user, passed explicitly to whatever needs it"""

    def __init__(self, store: LocalStore):
        self.store = store
        self.current_user: Optional[User] = None
        saved = store.read(USER_KEY)
        if saved is not None:
            try:
                self.current_user = User.model_validate(saved)
            except SchemaError as e:
                logger.warning(f"Discarding invalid session record: {e}")
                store.remove(USER_KEY)

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def _persist(self, user: User) -> None:
        self.store.write(USER_KEY, user.to_session())
        self.current_user = User.model_validate(user.to_session())

    async def login(self, users: UsersService, email: str, password: str) -> User:
        """
        Log in against the remote store and remember the user locally

        Raises:
            ValidationError: If email or password is blank
            InvalidCredentials: If the store rejects them
        """
        validate_required("login", {"email": email, "password": password})
        user = await users.login(email, password)
        self._persist(user)
        logger.info(f"Session started for {user.email}")
        return self.current_user

    def logout(self) -> None:
        self.store.remove(USER_KEY)
        self.current_user = None
        logger.info("Session cleared")

    async def update_account(self, users: UsersService, name: str, email: str) -> User:
        """
        Send new name/email for the current user, then update the local session

        Updates replace the whole row, so the stored row (password included)
        is fetched first and sent back with the new values merged in.
        """
        if self.current_user is None:
            raise RuntimeError("No user is logged in")
        changes = {"name": name, "email": email}
        validate_required("account", changes)
        stored = await users.find_by_id(self.current_user.id)
        await users.update(self.current_user.id, stored.model_copy(update=changes))
        self._persist(self.current_user.model_copy(update=changes))
        return self.current_user


class CompanyProfile(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    company_name: str = "EDCO Heating & Air"
    license_number: str = "#837114"
    phone: str = "(408) 425-3800"
    email: str = "info@edcoheating.com"


def load_company_profile(store: LocalStore) -> CompanyProfile:
    saved = store.read(COMPANY_INFO_KEY)
    if saved is None:
        return CompanyProfile()
    try:
        return CompanyProfile.model_validate(saved)
    except SchemaError as e:
        logger.warning(f"Discarding invalid company profile record: {e}")
        store.remove(COMPANY_INFO_KEY)
        return CompanyProfile()


def save_company_profile(store: LocalStore, profile: CompanyProfile) -> None:
    store.write(COMPANY_INFO_KEY, profile.model_dump(by_alias=True))
