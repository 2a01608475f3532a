"""
Scarch Client — Token Store Tests
===================================

What we test:
    ✅ FileTokenStore: missing file, round trip, 0600 permissions, clear
    ✅ Blank token files read as logged out
"""

import os
import stat

import pytest

from scarch_client.token_store import FileTokenStore, MemoryTokenStore


class TestMemoryTokenStore:

    @pytest.mark.asyncio
    async def test_set_and_clear(self):
        """Memory store forgets the token on clear."""
        store = MemoryTokenStore()
        await store.set("abc")
        assert await store.get() == "abc"

        await store.clear()
        assert await store.get() is None


class TestFileTokenStore:

    @pytest.mark.asyncio
    async def test_missing_file_means_no_token(self, tmp_path):
        """No token file yet should read as logged out."""
        store = FileTokenStore(str(tmp_path / "token"))
        assert await store.get() is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, tmp_path):
        """Stored token is read back stripped, in an owner-only file."""
        store = FileTokenStore(str(tmp_path / "nested" / "token"))

        await store.set("abc123\n")

        assert await store.get() == "abc123"
        mode = stat.S_IMODE(os.stat(store.path).st_mode)
        assert mode == 0o600

    @pytest.mark.asyncio
    async def test_blank_file_means_no_token(self, tmp_path):
        """A whitespace-only file should not produce an empty bearer token."""
        path = tmp_path / "token"
        path.write_text("  \n")
        assert await FileTokenStore(str(path)).get() is None

    @pytest.mark.asyncio
    async def test_clear_is_idempotent(self, tmp_path):
        """Clearing twice removes the file and does not raise."""
        store = FileTokenStore(str(tmp_path / "token"))
        await store.set("abc")

        await store.clear()
        await store.clear()

        assert await store.get() is None
        assert not store.path.exists()
