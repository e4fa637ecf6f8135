"""
Hebrew Reader — Client Key-Value Storage
========================================

What:  The small string store the client state containers persist into.
How:   `KeyValueStorage` is the async interface. Two implementations:
         MemoryStorage    → a dict, lives as long as the process
         JsonFileStorage  → one JSON object on disk, written via aiofiles

Values are plain strings; callers serialize anything richer themselves.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

import aiofiles

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):

    async def get_item(self, key: str) -> Optional[str]: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...


class MemoryStorage:

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """
    Key-value pairs kept in a single JSON file.

    A missing file reads as empty. The whole file is rewritten on every
    change; the store is meant for a handful of small entries.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
            content = await f.read()
        if not content.strip():
            return {}
        data = json.loads(content)
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    async def _save(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(items, ensure_ascii=False, indent=2))

    async def get_item(self, key: str) -> Optional[str]:
        return (await self._load()).get(key)

    async def set_item(self, key: str, value: str) -> None:
        items = await self._load()
        items[key] = value
        await self._save(items)

    async def remove_item(self, key: str) -> None:
        items = await self._load()
        if items.pop(key, None) is not None:
            await self._save(items)
