import os
import tempfile
from typing import List
from urllib.parse import quote, unquote


class FileStorageBackend:
    """One file per key under a directory, so data survives restarts."""

    suffix = ".json"

    def __init__(self, directory: str) -> None:
        self.directory = directory
        os.makedirs(self.directory, exist_ok=True)

    def _path(self, key: str) -> str:
        # Keys may contain characters that are not safe in file names
        return os.path.join(self.directory, quote(key, safe="") + self.suffix)

    async def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    async def set_item(self, key: str, value: str) -> None:
        # Write to a temp file first so a crash never leaves a half-written value
        with tempfile.NamedTemporaryFile("w", encoding="utf-8", dir=self.directory, suffix=".tmp", delete=False) as tmp:
            tmp.write(value)
            tmp_path = tmp.name
        os.replace(tmp_path, self._path(key))

    async def remove_item(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass

    async def keys(self) -> List[str]:
        return [
            unquote(name[: -len(self.suffix)])
            for name in sorted(os.listdir(self.directory))
            if name.endswith(self.suffix)
        ]
