import logging
from typing import Any, Callable, Dict, List, Optional

from httpx import AsyncClient, HTTPError, HTTPStatusError
from pydantic import ValidationError

from learnix.core.exceptions import IdentityProviderError
from learnix.core.http import get_identity_client
from learnix.schemas.user import ExternalIdentity

logger = logging.getLogger(__name__)


class IdentityProviderClient:
    """Backend REST API of the hosted identity provider."""

    def __init__(self, client_provider: Callable[[], AsyncClient] = get_identity_client):
        self.client_provider = client_provider

    async def get_user(self, external_id: str) -> Optional[ExternalIdentity]:
        client = self.client_provider()
        try:
            response = await client.get(f"/users/{external_id}")
            if response.status_code == 404:
                return None
            response.raise_for_status()
        except HTTPStatusError as exc:
            raise IdentityProviderError(
                f"Identity lookup failed: {exc.response.status_code}"
            ) from exc
        except HTTPError as exc:
            raise IdentityProviderError(f"Identity provider unreachable: {exc}") from exc
        try:
            return ExternalIdentity.model_validate(response.json())
        except ValueError as exc:
            # ValidationError is a ValueError, as is a body that is not JSON.
            raise IdentityProviderError(f"Unreadable profile for {external_id}: {exc}") from exc

    async def list_users(self, limit: int = 100, order_by: str = "-created_at") -> List[ExternalIdentity]:
        """Newest provider users first; malformed entries are logged and skipped."""
        client = self.client_provider()
        try:
            response = await client.get("/users", params={"limit": limit, "order_by": order_by})
            response.raise_for_status()
            payload = response.json()
        except HTTPError as exc:
            raise IdentityProviderError(f"Identity user listing failed: {exc}") from exc
        except ValueError as exc:
            raise IdentityProviderError(f"Identity user listing is not JSON: {exc}") from exc

        # The listing endpoint answers with a bare list or a {"data": [...]} page.
        items = payload.get("data", []) if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise IdentityProviderError("Identity user listing has no user list")

        identities = []
        for item in items:
            try:
                identities.append(ExternalIdentity.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed identity %s: %s", _item_id(item), exc)
        return identities

    async def update_user_metadata(self, external_id: str, public_metadata: Dict[str, Any]) -> None:
        client = self.client_provider()
        try:
            response = await client.patch(
                f"/users/{external_id}/metadata",
                json={"public_metadata": public_metadata},
            )
            response.raise_for_status()
        except HTTPError as exc:
            raise IdentityProviderError(f"Metadata update failed for {external_id}: {exc}") from exc


def _item_id(item: Any) -> Any:
    return item.get("id") if isinstance(item, dict) else item
