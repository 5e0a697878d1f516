"""
Session-cookie authentication against /api/auth.

Produces explicit StoreSession objects; nothing here is global.
"""

import logging

from rfstore.client.api import StoreApiClient
from rfstore.models.failure import StoreError
from rfstore.models.records import User
from rfstore.models.session import StoreSession
from rfstore.parsers.payloads import parse_record

logger = logging.getLogger(__name__)


class AuthService:
    """Login, logout and session status for one API client."""

    def __init__(self, api: StoreApiClient) -> None:
        self.api = api

    async def login(self, email: str, password: str) -> StoreSession:
        """
        Log in and return a session for the user.

        Raises:
            OperationFailedError: If the server rejects the credentials
            PayloadError: If the answer does not describe a user
        """
        data = await self.api.post("/auth/login", json={"email": email, "password": password})
        user = parse_record(User, data)
        logger.info("Logged in as %s (%s)", user.email, user.role.value)
        return StoreSession(api=self.api, user=user)

    async def logout(self, session: StoreSession) -> StoreSession:
        """Log out. The returned session is anonymous even if the call failed."""
        try:
            await self.api.post("/auth/logout")
        except StoreError as e:
            logger.warning("Logout error: %s", e.message)
        return session.with_user(None)

    async def status(self) -> StoreSession:
        """Ask the server who the session cookie belongs to."""
        try:
            data = await self.api.get("/auth/status")
            if isinstance(data, dict) and data.get("authenticated"):
                return StoreSession(api=self.api, user=parse_record(User, data))
        except StoreError as e:
            logger.error("Error checking auth status: %s", e.message)
        return StoreSession(api=self.api)
