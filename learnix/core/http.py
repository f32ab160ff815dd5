from typing import Optional

from httpx import AsyncClient

from learnix.core.config import settings

_backend_client: Optional[AsyncClient] = None
_identity_client: Optional[AsyncClient] = None


def get_backend_client() -> AsyncClient:
    global _backend_client
    if _backend_client is None or _backend_client.is_closed:
        _backend_client = AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout_seconds,
        )
    return _backend_client


def get_identity_client() -> AsyncClient:
    global _identity_client
    if _identity_client is None or _identity_client.is_closed:
        _identity_client = AsyncClient(
            base_url=settings.identity_api_url,
            timeout=settings.identity_timeout_seconds,
            headers={"Authorization": f"Bearer {settings.identity_secret_key}"},
        )
    return _identity_client


async def close_http_clients() -> None:
    global _backend_client, _identity_client
    for client in (_backend_client, _identity_client):
        if client and not client.is_closed:
            await client.aclose()
    _backend_client = None
    _identity_client = None
