"""Token persistence.

All stores share one contract: ``save(token)``, ``load() -> Token | None``
and ``clear()``. "No token" is a normal state, so ``load`` returns None
instead of raising when nothing has been saved yet.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import os
from pathlib import Path
from typing import Any, Awaitable, Callable, Protocol, Union, runtime_checkable

from minimax.config import TokenStoreSettings
from minimax.models.auth import Token

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_FILE = ".minimax-token.json"
DEFAULT_ENV_NAME = "MINIMAX_TOKEN"


@runtime_checkable
class TokenStore(Protocol):
    async def save(self, token: Token) -> None: ...

    async def load(self) -> Token | None: ...

    async def clear(self) -> None: ...


def _serialize(token: Token) -> str:
    return json.dumps(token.model_dump(exclude_none=True), indent=2)


def _deserialize(raw: str, source: str) -> Token | None:
    try:
        return Token.model_validate(json.loads(raw))
    except ValueError as e:
        logger.warning(f"Ignoring unreadable token in {source}: {e}")
        return None


class MemoryTokenStore:
    """Keeps the token for the lifetime of the process."""

    def __init__(self) -> None:
        self._token: Token | None = None

    async def save(self, token: Token) -> None:
        self._token = token

    async def load(self) -> Token | None:
        return self._token

    async def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Stores the token as JSON in a file readable only by its owner."""

    def __init__(
        self,
        file_path: str | Path | None = None,
        create_dir: bool = True,
        file_mode: int = 0o600,
    ) -> None:
        self._path = Path(file_path) if file_path else Path.cwd() / DEFAULT_TOKEN_FILE
        self._create_dir = create_dir
        self._file_mode = file_mode

    @property
    def path(self) -> Path:
        return self._path

    async def save(self, token: Token) -> None:
        await asyncio.to_thread(self._write, _serialize(token))

    async def load(self) -> Token | None:
        try:
            raw = await asyncio.to_thread(self._path.read_text)
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Cannot read token file {self._path}: {e}")
            return None
        return _deserialize(raw, str(self._path))

    async def clear(self) -> None:
        await asyncio.to_thread(self._path.unlink, missing_ok=True)

    def _write(self, data: str) -> None:
        if self._create_dir:
            self._path.parent.mkdir(parents=True, exist_ok=True)

        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, self._file_mode)
        with os.fdopen(fd, "w") as f:
            f.write(data)
        # os.open only applies the mode to newly created files
        os.chmod(self._path, self._file_mode)


class EnvTokenStore:
    """Stores the token as JSON in an environment variable of this process.

    Intended for development and tests; the environment is not a secure place
    for credentials.
    """

    def __init__(self, env_name: str = DEFAULT_ENV_NAME) -> None:
        self._env_name = env_name

    async def save(self, token: Token) -> None:
        os.environ[self._env_name] = _serialize(token)

    async def load(self) -> Token | None:
        raw = os.environ.get(self._env_name)
        if not raw:
            return None
        return _deserialize(raw, f"${self._env_name}")

    async def clear(self) -> None:
        os.environ.pop(self._env_name, None)


MaybeAwaitable = Union[Any, Awaitable[Any]]


async def _resolve(value: MaybeAwaitable) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class CallbackTokenStore:
    """Delegates to user-supplied callables (plain functions or coroutines)."""

    def __init__(
        self,
        save: Callable[[Token], MaybeAwaitable],
        load: Callable[[], MaybeAwaitable],
        clear: Callable[[], MaybeAwaitable],
    ) -> None:
        self._save = save
        self._load = load
        self._clear = clear

    async def save(self, token: Token) -> None:
        await _resolve(self._save(token))

    async def load(self) -> Token | None:
        value = await _resolve(self._load())
        if value is None or isinstance(value, Token):
            return value
        return Token.model_validate(value)

    async def clear(self) -> None:
        await _resolve(self._clear())


def build_token_store(settings: TokenStoreSettings) -> TokenStore:
    """Create the store selected in configuration."""
    if settings.kind == "file":
        return FileTokenStore(settings.file_path, settings.create_dir, settings.file_mode)
    if settings.kind == "env":
        return EnvTokenStore(settings.env_name)
    return MemoryTokenStore()
