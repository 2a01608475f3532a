"""
Scarch Client — Token Store
=============================

What:  Key-value home of the bearer token: get, set, clear.
How:   `MemoryTokenStore` keeps it in the process; `FileTokenStore` persists
       it to `settings.token_file` with aiofiles so a restart stays logged in.
Who:   Read by the request interceptor, cleared by the response interceptor
       on 401, written by AuthService on login.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import aiofiles

from scarch_client.config import settings

logger = logging.getLogger(__name__)


class TokenStore(ABC):
    """Abstract bearer-token storage."""

    @abstractmethod
    async def get(self) -> Optional[str]:
        """The stored token, or None when logged out."""
        ...

    @abstractmethod
    async def set(self, token: str) -> None:
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Forget the token. Clearing an empty store is a no-op."""
        ...


class MemoryTokenStore(TokenStore):
    def __init__(self, token: Optional[str] = None):
        self._token = token

    async def get(self) -> Optional[str]:
        return self._token

    async def set(self, token: str) -> None:
        self._token = token

    async def clear(self) -> None:
        self._token = None


class FileTokenStore(TokenStore):
    """
    Token persisted as a single line in a file.

    A missing or blank file means "no token". The file is created with
    0600 permissions; its parent directory is created on first write.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.token_file).expanduser()

    async def get(self) -> Optional[str]:
        if not self.path.exists():
            return None
        async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
            token = (await f.read()).strip()
        return token or None

    async def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
            await f.write(token.strip())
        os.chmod(self.path, 0o600)
        logger.debug("Token stored at %s", self.path)

    async def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        logger.debug("Token file %s removed", self.path)
