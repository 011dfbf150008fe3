"""
In-memory caching for GitProof.

The manifest-existence cache remembers, per ``owner/repo``, whether the
repository has a dependency manifest. Entries are written once and never
expire or get evicted; the store is injected so callers (and tests) control
its lifetime.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol


class KeyValueStore(Protocol):
    """Minimal key-value store interface used by the caches."""

    def get(self, key: str) -> bool | None: ...

    def set(self, key: str, value: bool) -> None: ...


class InMemoryStore:
    """Dict-backed KeyValueStore with no expiry."""

    def __init__(self) -> None:
        self._data: dict[str, bool] = {}

    def get(self, key: str) -> bool | None:
        return self._data.get(key)

    def set(self, key: str, value: bool) -> None:
        self._data[key] = value

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data


def make_repo_key(owner: str, repo: str) -> str:
    return f"{owner}/{repo}"


class ManifestExistenceCache:
    """
    Memoize "does this repository have a manifest" checks.

    The first lookup for a key runs the supplied check and stores the boolean;
    later lookups return the stored value without calling the check.
    Concurrent lookups for a key that is still being checked await the same
    in-flight task instead of issuing a second request.
    """

    def __init__(self, store: KeyValueStore | None = None) -> None:
        self.store = store if store is not None else InMemoryStore()
        self._in_flight: dict[str, asyncio.Task[bool]] = {}

    async def get_or_check(
        self, owner: str, repo: str, check: Callable[[], Awaitable[bool]]
    ) -> bool:
        """
        Return the cached existence flag, running ``check`` on a miss.

        Exceptions raised by ``check`` propagate and nothing is stored.
        """
        key = make_repo_key(owner, repo)

        cached = self.store.get(key)
        if cached is not None:
            return cached

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(check())
            self._in_flight[key] = task
            try:
                exists = bool(await task)
            finally:
                self._in_flight.pop(key, None)
            self.store.set(key, exists)
            return exists

        return bool(await asyncio.shield(task))
