"""
Scarch Client — Auth Service
==============================

What:  Login, registration and logout.
How:   Successful login/registration stores the returned bearer token in the
       client's token store; every later request carries it. A 401 anywhere
       clears it (see the response interceptor); logging in again is the
       caller's decision.
"""

import logging
from typing import Optional

from scarch_client.exceptions import ScarchClientError
from scarch_client.schemas import ApiResponse, AuthSession
from scarch_client.services.base import ApiService

logger = logging.getLogger(__name__)


class AuthService(ApiService):

    async def _open_session(self, response: ApiResponse) -> AuthSession:
        payload = response.data if isinstance(response.data, dict) else {}
        token = payload.get("token") or payload.get("access_token")
        if not token:
            raise ScarchClientError(
                message="The server did not return an authentication token.",
                context={"status_code": response.status_code},
            )
        await self.client.token_store.set(token)
        return AuthSession(token=token, user=payload.get("user") or {})

    async def login(self, email: str, password: str) -> AuthSession:
        response = await self.client.post(
            "/auth/login", body={"email": email, "password": password}
        )
        session = await self._open_session(response)
        logger.info("Logged in")
        return session

    async def register(self, email: str, password: str, name: Optional[str] = None) -> AuthSession:
        response = await self.client.post(
            "/auth/register",
            body={"email": email, "password": password, "name": name},
        )
        return await self._open_session(response)

    async def logout(self) -> None:
        await self.client.token_store.clear()
