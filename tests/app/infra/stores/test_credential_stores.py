"""Testes dos stores de credenciais (memória, arquivo, Redis mockado)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.infra.stores import FileCredentialStore, MemoryCredentialStore, RedisCredentialStore
from utils.errors import PersistenceError


class TestMemoryCredentialStore:
    @pytest.mark.asyncio
    async def test_save_load_delete(self) -> None:
        store = MemoryCredentialStore()

        assert await store.load("s") is None
        await store.save("s", b"blob")
        assert await store.load("s") == b"blob"
        assert store.save_count == 1
        assert await store.delete("s") is True
        assert await store.delete("s") is False
        await store.aclose()


class TestFileCredentialStore:
    @pytest.mark.asyncio
    async def test_writes_one_directory_per_session(self, tmp_path: Path) -> None:
        store = FileCredentialStore(tmp_path)

        await store.save("loja", b"v1")
        await store.save("loja", b"v2")

        assert (tmp_path / "loja" / "creds.bin").read_bytes() == b"v2"
        assert [p.name for p in (tmp_path / "loja").iterdir()] == ["creds.bin"]
        assert await store.load("loja") == b"v2"
        assert await store.load("outra") is None

    @pytest.mark.asyncio
    async def test_delete_removes_session_directory(self, tmp_path: Path) -> None:
        store = FileCredentialStore(tmp_path)
        await store.save("loja", b"v1")

        assert await store.delete("loja") is True
        assert not (tmp_path / "loja").exists()
        assert await store.delete("loja") is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "..", "a/b"])
    async def test_invalid_session_name(self, tmp_path: Path, name: str) -> None:
        store = FileCredentialStore(tmp_path)

        with pytest.raises(PersistenceError):
            await store.save(name, b"x")

    @pytest.mark.asyncio
    async def test_unwritable_location_raises_persistence_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "arquivo"
        blocker.write_text("não é diretório")
        store = FileCredentialStore(blocker)

        with pytest.raises(PersistenceError):
            await store.save("loja", b"x")


class TestRedisCredentialStore:
    @pytest.mark.asyncio
    async def test_uses_prefixed_key(self) -> None:
        redis = MagicMock()
        redis.get = AsyncMock(return_value=b"blob")
        redis.set = AsyncMock()
        redis.delete = AsyncMock(return_value=1)
        store = RedisCredentialStore(redis)

        await store.save("loja", b"blob")
        assert await store.load("loja") == b"blob"
        assert await store.delete("loja") is True

        redis.set.assert_awaited_once_with("credentials:loja", b"blob")
        redis.get.assert_awaited_once_with("credentials:loja")
        redis.delete.assert_awaited_once_with("credentials:loja")

    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self) -> None:
        redis = MagicMock()
        redis.get = AsyncMock(return_value=None)
        store = RedisCredentialStore(redis, key_prefix="wa:")

        assert await store.load("loja") is None
        redis.get.assert_awaited_once_with("wa:loja")

    @pytest.mark.asyncio
    async def test_redis_errors_become_persistence_errors(self) -> None:
        redis = MagicMock()
        redis.get = AsyncMock(side_effect=RedisConnectionError("down"))
        redis.set = AsyncMock(side_effect=RedisConnectionError("down"))
        store = RedisCredentialStore(redis)

        with pytest.raises(PersistenceError):
            await store.load("loja")
        with pytest.raises(PersistenceError):
            await store.save("loja", b"x")

    @pytest.mark.asyncio
    async def test_aclose_closes_client(self) -> None:
        redis = MagicMock()
        redis.aclose = AsyncMock()
        store = RedisCredentialStore(redis)

        await store.aclose()

        redis.aclose.assert_awaited_once()
