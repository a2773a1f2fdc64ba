"""File Storage — investment documents kept on local disk under one root directory.

Invariants:
    - Keys are relative paths; a key resolving outside the root is refused
    - save never overwrites: an existing key raises FileExistsError
    - delete of a missing key is a no-op

Design Decisions:
    - Blocking filesystem calls run in asyncio.to_thread so the event loop never waits
      on disk IO
    - get_file_storage() is cached per process and overridable in tests through
      dependency_overrides
"""

import asyncio
from functools import lru_cache
from pathlib import Path

from app.config import get_settings


class LocalFileStorage:
    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def _resolve(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root):
            raise ValueError(f"Storage key escapes the storage root: {key!r}")
        return path

    async def save(self, key: str, data: bytes) -> None:
        await asyncio.to_thread(_write_new, self._resolve(key), data)

    async def read(self, key: str) -> bytes:
        return await asyncio.to_thread(self._resolve(key).read_bytes)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._resolve(key).unlink, missing_ok=True)


def _write_new(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("xb") as fh:
        fh.write(data)


@lru_cache
def get_file_storage() -> LocalFileStorage:
    return LocalFileStorage(get_settings().file_storage_dir)
