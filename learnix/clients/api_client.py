import logging
from typing import Any, Callable, Mapping, Optional

from httpx import AsyncClient, HTTPError, Response

from learnix.core.http import get_backend_client
from learnix.schemas.common import ApiResponse

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error occurred. Please ensure backend is running."
INVALID_RESPONSE_MESSAGE = "Backend returned an invalid response"
_BODY_METHODS = {"POST", "PUT", "PATCH"}


class ApiClient:
    """JSON client for the backend API.

    Every ordinary failure (transport error, non-2xx status, unreadable body)
    comes back as an `ApiResponse` with `success=False`; only malformed calls raise.
    """

    def __init__(self, client_provider: Callable[[], AsyncClient] = get_backend_client):
        self.client_provider = client_provider

    async def get(self, path: str, token: Optional[str] = None, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        return await self.request("GET", path, token=token, params=params)

    async def post(self, path: str, body: Any = None, token: Optional[str] = None) -> ApiResponse:
        return await self.request("POST", path, body={} if body is None else body, token=token)

    async def put(self, path: str, body: Any = None, token: Optional[str] = None) -> ApiResponse:
        return await self.request("PUT", path, body={} if body is None else body, token=token)

    async def delete(self, path: str, token: Optional[str] = None) -> ApiResponse:
        return await self.request("DELETE", path, token=token)

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        token: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ApiResponse:
        method = method.upper()
        if not path.startswith("/"):
            raise ValueError(f"API path must start with '/': {path!r}")
        if body is not None and method not in _BODY_METHODS:
            raise ValueError(f"{method} requests cannot carry a body")

        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        query = {key: value for key, value in (params or {}).items() if value is not None}

        client = self.client_provider()
        try:
            response = await client.request(
                method,
                path,
                json=body,
                headers=headers,
                params=query or None,
            )
        except HTTPError as exc:
            logger.error("%s %s network error: %s", method, path, exc)
            return ApiResponse(success=False, message=NETWORK_ERROR_MESSAGE)

        return self._to_envelope(method, path, response)

    def _to_envelope(self, method: str, path: str, response: Response) -> ApiResponse:
        ok = response.is_success
        if not ok:
            if response.status_code in (401, 404):
                logger.warning("%s %s returned %s", method, path, response.status_code)
            else:
                logger.error("%s %s failed: %s %s", method, path, response.status_code, response.reason_phrase)

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict) or "success" not in payload:
            if ok:
                logger.error("%s %s returned a body without an envelope", method, path)
                return ApiResponse(success=False, message=INVALID_RESPONSE_MESSAGE)
            return ApiResponse(success=False, message=f"{response.status_code} {response.reason_phrase}".strip())

        envelope = ApiResponse(
            success=bool(payload.get("success")) and ok,
            data=payload.get("data"),
            message=payload.get("message"),
            errors=payload.get("errors") if isinstance(payload.get("errors"), dict) else None,
        )
        if not ok and not envelope.message:
            envelope.message = f"{response.status_code} {response.reason_phrase}".strip()
        return envelope
