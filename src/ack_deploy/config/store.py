"""Read/write access to the project's ``.env.ack`` file."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values, set_key
from loguru import logger


class EnvAckStore:
    """Configuration store backed by a dotenv-style file.

    Every read parses the file again so edits made outside the tool are
    picked up immediately. A missing file, a missing key and an empty
    value are all reported as ``None``.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read_all(self) -> dict[str, str]:
        """Return every non-empty key in the file."""
        if not self.exists():
            return {}
        values = dotenv_values(self._path, interpolate=False)
        return {key: value.strip() for key, value in values.items() if value}

    def read(self, key: str) -> str | None:
        """Return the value stored for ``key``, or None."""
        value = self.read_all().get(key)
        return value or None

    def write(self, values: Mapping[str, str]) -> None:
        """Update existing keys in place and append new ones.

        The file is created if it does not exist yet.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.touch(exist_ok=True)
        for key, value in values.items():
            set_key(self._path, key, value, quote_mode="never")
            logger.debug(f"Saved {key} to {self._path}")
