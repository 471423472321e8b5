"""
Client-side mirror of server entities.

Entries are keyed by id and never edited locally: after a mutating call the
affected keys are invalidated and fetched again from the server.
"""
import logging
from typing import Any, Callable, Dict, Hashable, Iterable, Optional

logger = logging.getLogger(__name__)


class EntityCache:
    def __init__(self, fetch_one: Callable[[Hashable], Any], fetch_all: Optional[Callable[[], Iterable[Any]]] = None):
        self._fetch_one = fetch_one
        self._fetch_all = fetch_all
        self._entries: Dict[Hashable, Any] = {}
        self._order: list = []

    def __contains__(self, key):
        return key in self._entries

    def __len__(self):
        return len(self._entries)

    def get(self, key):
        """Cached entity, fetched on a miss."""
        if key not in self._entries:
            self._entries[key] = self._fetch_one(key)
        return self._entries[key]

    def all(self) -> list:
        """Every entity in server order; a full refresh when nothing is cached."""
        if not self._order and self._fetch_all is not None:
            self.refresh_all()
        return [self._entries[k] for k in self._order if k in self._entries]

    def refresh_all(self) -> list:
        if self._fetch_all is None:
            raise RuntimeError("no list fetcher configured")
        items = list(self._fetch_all())
        self._entries = {item["id"]: item for item in items}
        self._order = [item["id"] for item in items]
        return items

    def invalidate(self, key=None):
        """Drop one entry, or everything when key is None."""
        if key is None:
            self._entries.clear()
            self._order = []
            return
        self._entries.pop(key, None)
        if key in self._order:
            self._order.remove(key)

    def refetch(self, key):
        """Invalidate then fetch again; the list order is rebuilt on the next all()."""
        self.invalidate(key)
        self._order = []
        logger.debug("refetching %s", key)
        return self.get(key)

    def after_mutation(self, *keys):
        """Call after any write: invalidates the given keys and the list."""
        for key in keys:
            self.invalidate(key)
        self._order = []
