"""
Credential cache for secrets fetched from an external secret store.

``CredentialCache`` owns its own lifecycle: a secret is fetched on first use
(populate-on-miss), served from memory until its TTL expires, and refetched
after expiry or an explicit ``invalidate()``. Each cache instance carries its
own lock, so one instance can be shared by concurrent callers without any
module-level state.

The secret store is any callable ``name -> str``. ``EnvSecretFetcher`` is the
local stand-in: it reads ``COMMITMENT_FORECASTER_SECRET_<NAME>`` environment
variables (typically loaded from ``.env``).

Usage::

    cache = CredentialCache(EnvSecretFetcher(), ttl_seconds=3600)
    api_key = cache.get("ai-foundry")
"""

from __future__ import annotations

import logging
import os
import re
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

SecretFetcher = Callable[[str], str]


class SecretNotFoundError(KeyError):
    """Raised when the secret store has no value for a name.

    Attributes:
        name: The requested secret name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Secret '{name}' not found in the secret store.")


class EnvSecretFetcher:
    """Reads secrets from ``<prefix><NAME>`` environment variables.

    The secret name is upper-cased and non-alphanumerics become ``_``:
    ``"ai-foundry"`` → ``COMMITMENT_FORECASTER_SECRET_AI_FOUNDRY``.
    """

    def __init__(self, prefix: str = "COMMITMENT_FORECASTER_SECRET_") -> None:
        self.prefix = prefix

    def env_var(self, name: str) -> str:
        return self.prefix + re.sub(r"[^A-Za-z0-9]", "_", name).upper()

    def __call__(self, name: str) -> str:
        value = os.environ.get(self.env_var(name))
        if not value:
            raise SecretNotFoundError(name)
        return value


@dataclass
class _Entry:
    value: str
    expires_at: float


class CredentialCache:
    """TTL cache in front of a secret fetcher.

    Attributes:
        fetcher: Callable resolving a secret name to its value.
        ttl_seconds: Lifetime of a cached value.
    """

    def __init__(
        self,
        fetcher: SecretFetcher,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}.")
        self.fetcher = fetcher
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> str:
        """Return the secret ``name``, fetching it on miss or expiry.

        The lock is held across the fetch so concurrent misses for the same
        cache trigger a single store call.

        Raises:
            SecretNotFoundError: If the fetcher has no value for ``name``.
        """
        with self._lock:
            now = self._clock()
            entry = self._entries.get(name)
            if entry is not None and now < entry.expires_at:
                return entry.value

            if entry is not None:
                logger.debug("Cached secret '%s' expired; refreshing", name)
            value = self.fetcher(name)
            if not value:
                raise SecretNotFoundError(name)
            self._entries[name] = _Entry(value=value, expires_at=now + self.ttl_seconds)
            logger.info("Fetched secret '%s' from secret store", name)
            return value

    def invalidate(self, name: Optional[str] = None) -> None:
        """Drop one cached secret, or all of them when ``name`` is ``None``."""
        with self._lock:
            if name is None:
                self._entries.clear()
            else:
                self._entries.pop(name, None)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            entry = self._entries.get(name)
            return entry is not None and self._clock() < entry.expires_at
