import logging
from typing import Any, Awaitable, Callable, Dict

logger = logging.getLogger(__name__)


def _base_path(key: str) -> str:
    return key.split("?", 1)[0]


class ViewCache:
    """Page payloads cached by path until a mutation revalidates the path.

    Empty payloads are the degraded defaults of failed loads, so they are
    returned but never stored.
    """

    def __init__(self):
        self._entries: Dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        if key in self._entries:
            return self._entries[key]
        value = await loader()
        if value:
            self._entries[key] = value
        return value

    def revalidate(self, path: str) -> None:
        """Drops the path, including every query variant of it; the next read reloads."""
        dropped = [key for key in self._entries if _base_path(key) == path]
        for key in dropped:
            del self._entries[key]
        logger.debug("Revalidated %s (%d cached entries dropped)", path, len(dropped))

    def is_stale(self, key: str) -> bool:
        return key not in self._entries

    def clear(self) -> None:
        self._entries.clear()


view_cache = ViewCache()
