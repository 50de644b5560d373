"""
Users Service

Account listing, account updates and login. Credentials are checked by the
remote store; no token is issued, the caller keeps the returned user as its
session record.
"""

import logging

from ..config import Action, Sheet
from ..exceptions import InvalidCredentials, RequestFailed
from ..models import User, decode_one
from .base import SheetRepository


logger = logging.getLogger(__name__)


class UsersService(SheetRepository[User]):
    """Service for the Users sheet"""

    sheet = Sheet.USERS
    model = User
    supported = frozenset({Action.GET_ALL, Action.UPDATE})

    async def login(self, email: str, password: str) -> User:
        """
        Check credentials against the remote store

        Returns:
            The matching user

        Raises:
            InvalidCredentials: If the store rejects the email/password pair
        """
        logger.info(f"Logging in: {email}")
        try:
            data = await self.gateway.get({
                "action": Action.LOGIN.value,
                "email": email,
                "password": password,
            })
        except RequestFailed as e:
            logger.warning(f"Login rejected for {email}: {e.message}")
            raise InvalidCredentials(e.message, status_code=e.status_code, response=e.response)

        user = decode_one(User, data)
        logger.info(f"Logged in user ID: {user.id}")
        return user

    async def find_by_id(self, user_id: str) -> User:
        """
        Full user row, password included, looked up through getAll

        Raises:
            RequestFailed: If no row has this id
        """
        for user in await self.get_all():
            if user.id == str(user_id):
                return user
        raise RequestFailed(f"User not found: {user_id}")
