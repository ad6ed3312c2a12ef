"""
KeyValueStore port — short-lived records with a mandatory time-to-live.

Holds are written here as serialized JSON under `hold:{hold_id}`.
The store owns only the lifetime of a record, never its meaning.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """
    Port: expiring key-value storage.

    Implementations (Redis, in-process) must be indistinguishable to the
    caller: an expired entry reads exactly like an absent one.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent or expired."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        """
        Store value under key, replacing any existing entry.

        The entry becomes unreadable ttl_seconds after this call.
        A non-positive ttl stores an entry that is already expired.
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry. Deleting an absent key is not an error."""
        ...

    @abstractmethod
    async def delete_if_equals(self, key: str, expected: str) -> bool:
        """
        Atomically remove the entry only if its current value is `expected`.

        Returns True if this call removed it, False if the entry was absent,
        expired, or held a different value.
        """
        ...


class StoreUnavailableError(Exception):
    """The backend could not be reached; the operation was not applied."""
