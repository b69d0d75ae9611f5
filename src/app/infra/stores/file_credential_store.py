"""Store de credenciais em disco — um diretório por sessão.

Layout:
    <sessions_dir>/<session_name>/creds.bin

A escrita usa arquivo temporário + os.replace para nunca deixar um
blob truncado caso o processo caia no meio. I/O roda fora do event
loop via asyncio.to_thread.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from pathlib import Path

from app.protocols.credential_store import CredentialStoreProtocol
from utils.errors import PersistenceError

logger = logging.getLogger(__name__)

CREDENTIALS_FILENAME = "creds.bin"


class FileCredentialStore(CredentialStoreProtocol):
    """Store de credenciais em sistema de arquivos.

    Args:
        sessions_dir: Diretório base (criado sob demanda)
    """

    def __init__(self, sessions_dir: str | Path) -> None:
        self._base_dir = Path(sessions_dir)

    def _session_dir(self, session_name: str) -> Path:
        if not session_name or "/" in session_name or session_name in (".", ".."):
            raise PersistenceError(f"Nome de sessão inválido: {session_name!r}")
        return self._base_dir / session_name

    async def load(self, session_name: str) -> bytes | None:
        path = self._session_dir(session_name) / CREDENTIALS_FILENAME
        try:
            return await asyncio.to_thread(_read_bytes, path)
        except OSError as exc:
            logger.error(
                "credentials_load_failed",
                extra={"session_name": session_name, "error_type": type(exc).__name__},
            )
            raise PersistenceError(f"Falha ao ler credenciais: {exc}") from exc

    async def save(self, session_name: str, credentials: bytes) -> None:
        session_dir = self._session_dir(session_name)
        try:
            await asyncio.to_thread(_write_atomic, session_dir, credentials)
        except OSError as exc:
            logger.error(
                "credentials_save_failed",
                extra={"session_name": session_name, "error_type": type(exc).__name__},
            )
            raise PersistenceError(f"Falha ao gravar credenciais: {exc}") from exc
        logger.debug(
            "credentials_saved",
            extra={"session_name": session_name, "size_bytes": len(credentials)},
        )

    async def delete(self, session_name: str) -> bool:
        session_dir = self._session_dir(session_name)
        try:
            return await asyncio.to_thread(_remove_dir, session_dir)
        except OSError as exc:
            raise PersistenceError(f"Falha ao remover credenciais: {exc}") from exc


def _read_bytes(path: Path) -> bytes | None:
    if not path.exists():
        return None
    return path.read_bytes()


def _write_atomic(session_dir: Path, data: bytes) -> None:
    session_dir.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=session_dir, prefix=".creds-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as tmp_file:
            tmp_file.write(data)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        os.replace(tmp_name, session_dir / CREDENTIALS_FILENAME)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _remove_dir(session_dir: Path) -> bool:
    if not session_dir.exists():
        return False
    shutil.rmtree(session_dir)
    return True
