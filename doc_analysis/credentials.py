"""Bearer tokens for the Document Intelligence resource.

On Azure the token comes from ``DefaultAzureCredential`` (managed identity,
workload identity, az login, ...).  The token is cached and refreshed 5 minutes
before expiry.  Local runs can set ``DOCINTEL_ACCESS_TOKEN`` to skip Azure AD
entirely.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from typing import Protocol

from azure.identity.aio import DefaultAzureCredential

from doc_analysis.config import DOCINTEL_TOKEN_SCOPE

logger = logging.getLogger(__name__)

# Refresh this many seconds before the token actually expires.
_REFRESH_MARGIN_SECONDS = 300


class TokenProvider(Protocol):
    async def get_token(self) -> str: ...

    async def close(self) -> None: ...


class StaticTokenProvider:
    def __init__(self, token: str) -> None:
        if not token:
            raise ValueError("Static access token must not be empty")
        self._token = token

    async def get_token(self) -> str:
        return self._token

    async def close(self) -> None:
        return None


@dataclass
class _CachedToken:
    token: str
    expires_at: float  # unix timestamp


class AzureTokenProvider:
    """Cached ``DefaultAzureCredential`` tokens for a single scope.

    Safe to share between concurrent ``analyze`` calls: refreshes are
    serialized so a burst of documents mints one token, not one each.
    """

    def __init__(self, *, scope: str = DOCINTEL_TOKEN_SCOPE, credential: DefaultAzureCredential | None = None) -> None:
        self._scope = scope
        self._credential = credential or DefaultAzureCredential()
        self._cache: _CachedToken | None = None
        self._lock = asyncio.Lock()

    async def get_token(self) -> str:
        async with self._lock:
            now = time.time()
            if self._cache is not None and now < self._cache.expires_at - _REFRESH_MARGIN_SECONDS:
                return self._cache.token

            try:
                access = await self._credential.get_token(self._scope)
            except Exception:
                # Stale fallback: the old token is still usable until it truly expires.
                if self._cache is not None and now < self._cache.expires_at:
                    logger.warning("Token refresh for %s failed; using cached token", self._scope, exc_info=True)
                    return self._cache.token
                raise

            self._cache = _CachedToken(token=access.token, expires_at=float(access.expires_on))
            return access.token

    def clear_cache(self) -> None:
        self._cache = None

    async def close(self) -> None:
        await self._credential.close()


def token_provider_from_env() -> TokenProvider:
    static = os.getenv("DOCINTEL_ACCESS_TOKEN")
    if static:
        logger.info("Using static DOCINTEL_ACCESS_TOKEN for Document Intelligence auth")
        return StaticTokenProvider(static)
    return AzureTokenProvider()
