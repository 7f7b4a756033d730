"""
Signing key sources for Google ID token verification.

A key source answers one question: which public keys does Google currently
sign ID tokens with? The production source fetches Google's JWKS document
and caches it for JWKS_CACHE_SECONDS; tests plug in a static key set.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Protocol

import httpx

from authgate.errors import ProviderUnavailable


logger = logging.getLogger(__name__)


class KeySource(Protocol):
    """Capability returning the provider's current signing keys (JWK dicts)."""

    async def current_keys(self, force_refresh: bool = False) -> List[Dict[str, Any]]:
        ...


# =============================================================================
# JWKS over HTTP
# =============================================================================

class JWKSKeySource:
    """
    Fetch JWKS from Google with caching.

    Results are cached for ``cache_seconds``. A refresh is serialized behind
    a lock so that concurrent requests arriving on a cold cache trigger a
    single fetch.
    """

    def __init__(self, http_client: httpx.AsyncClient, jwks_url: str, cache_seconds: int = 3600):
        self._client = http_client
        self._jwks_url = jwks_url
        self._cache_seconds = cache_seconds
        self._keys: Optional[List[Dict[str, Any]]] = None
        self._fetched_at: float = 0.0
        self._lock = asyncio.Lock()

    def _is_fresh(self) -> bool:
        return self._keys is not None and (time.monotonic() - self._fetched_at) < self._cache_seconds

    async def current_keys(self, force_refresh: bool = False) -> List[Dict[str, Any]]:
        """
        Return the cached key set, fetching it when stale or when forced.

        Raises:
            ProviderUnavailable: If the JWKS endpoint is unreachable or
                returns something that is not a key set
        """
        if not force_refresh and self._is_fresh():
            return self._keys

        async with self._lock:
            # another coroutine may have refreshed while we waited
            if not force_refresh and self._is_fresh():
                return self._keys

            try:
                response = await self._client.get(self._jwks_url)
                response.raise_for_status()
                jwks_data = response.json()
            except httpx.HTTPError as e:
                raise ProviderUnavailable(f"JWKS fetch failed: {type(e).__name__}") from e
            except ValueError as e:
                raise ProviderUnavailable("JWKS response is not JSON") from e

            if not isinstance(jwks_data, dict) or not isinstance(jwks_data.get("keys"), list):
                raise ProviderUnavailable("Invalid JWKS response: missing 'keys' field")

            self._keys = jwks_data["keys"]
            self._fetched_at = time.monotonic()

            logger.debug(
                "Refreshed Google signing keys",
                extra={"key_count": len(self._keys), "forced": force_refresh},
            )
            return self._keys


class StaticKeySource:
    """Fixed key set, for tests and air-gapped deployments."""

    def __init__(self, keys: List[Dict[str, Any]]):
        self._keys = list(keys)

    async def current_keys(self, force_refresh: bool = False) -> List[Dict[str, Any]]:
        return self._keys


def find_signing_key(kid: str, keys: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return the JWK whose 'kid' matches, or None."""
    for key in keys:
        if key.get("kid") == kid:
            return key
    return None
