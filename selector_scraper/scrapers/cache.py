"""File system cache of page markup, grouped by host."""

import hashlib
import os
import uuid
from typing import Optional
from urllib.parse import urlparse

import aiofiles
import aiofiles.os


class PageCache:
    """
    Key-value store of page markup on disk.

    Entries live under ``<root_dir>/<namespace>/<key>``. They never expire,
    and concurrent writers to the same key are last-writer-wins.
    """

    def __init__(self, root_dir: str):
        self.root_dir = root_dir

    @staticmethod
    def key_for(url: str) -> str:
        """Hex SHA-256 of the URL path. Query and fragment are ignored."""
        path = urlparse(url).path
        return hashlib.sha256(path.encode("utf-8")).hexdigest()

    @staticmethod
    def namespace_for(url: str) -> str:
        return urlparse(url).hostname or ""

    def _entry_path(self, namespace: str, key: str) -> str:
        return os.path.join(self.root_dir, namespace, key)

    async def get(self, namespace: str, key: str) -> Optional[str]:
        """
        Read a cache entry.

        Returns:
            The cached markup, or None on a miss
        """
        try:
            async with aiofiles.open(
                self._entry_path(namespace, key), "r", encoding="utf-8"
            ) as f:
                return await f.read()
        except FileNotFoundError:
            return None

    async def set(self, namespace: str, key: str, content: str) -> None:
        """Write a cache entry, replacing any previous one."""
        path = self._entry_path(namespace, key)
        await aiofiles.os.makedirs(os.path.dirname(path), exist_ok=True)

        # readers never see a partially written entry
        tmp_path = f"{path}.{uuid.uuid4().hex}.tmp"
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(content)
        await aiofiles.os.replace(tmp_path, path)
