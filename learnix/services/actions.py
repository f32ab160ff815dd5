import logging

from learnix.clients.api_client import ApiClient
from learnix.clients.identity import IdentityProviderClient
from learnix.core.config import settings
from learnix.core.context import RequestContext
from learnix.core.exceptions import AuthorizationError, IdentityProviderError, ProvisioningError
from learnix.models.user import normalize_role
from learnix.schemas.common import ActionResult
from learnix.services.authorization import AuthorizationGate
from learnix.services.session import UserProvisioner, default_provisioner
from learnix.services.view_cache import ViewCache, view_cache

logger = logging.getLogger(__name__)

USERS_VIEW = "/admin/users"
MENTORS_VIEW = "/admin/mentors"


class AdminActions:
    """Mutations behind the admin user table; results are reported, never raised."""

    def __init__(
        self,
        api: ApiClient | None = None,
        cache: ViewCache | None = None,
        identity_client: IdentityProviderClient | None = None,
        provisioner: UserProvisioner | None = None,
        gate: AuthorizationGate | None = None,
    ):
        self.api = api or ApiClient()
        self.cache = cache or view_cache
        self.identity_client = identity_client or IdentityProviderClient()
        self.provisioner = provisioner or default_provisioner()
        self.gate = gate or AuthorizationGate()

    async def toggle_user_ban(self, ctx: RequestContext, user_id: str) -> ActionResult:
        token = ctx.auth_token
        if not token:
            return ActionResult(success=False, message="Unauthorized")
        response = await self.api.put(f"/admin/users/{user_id}/ban", {}, token=token)
        if not response.success:
            return ActionResult(success=False, message=response.message or "Failed to update ban status")
        self.cache.revalidate(USERS_VIEW)
        return ActionResult(success=True)

    async def update_user_role(self, ctx: RequestContext, user_id: str, role: str) -> ActionResult:
        token = ctx.auth_token
        if not token:
            return ActionResult(success=False, message="Unauthorized")
        normalized = normalize_role(role)
        if normalized is None:
            return ActionResult(success=False, message=f"Invalid role: {role}")
        response = await self.api.put(f"/admin/users/{user_id}/role", {"role": normalized.value}, token=token)
        if not response.success:
            return ActionResult(success=False, message=response.message or "Failed to update role")
        self.cache.revalidate(USERS_VIEW)
        self.cache.revalidate(MENTORS_VIEW)
        return ActionResult(success=True)

    async def sync_users_from_provider(self, ctx: RequestContext) -> ActionResult:
        """Provisions the newest provider users locally; one bad user does not stop the rest."""
        try:
            await self.gate.require_admin(ctx, json=True)
        except AuthorizationError as exc:
            return ActionResult(success=False, message=exc.detail)

        try:
            identities = await self.identity_client.list_users(limit=settings.user_sync_limit)
        except IdentityProviderError as exc:
            logger.error("Error syncing users: %s", exc)
            return ActionResult(success=False, message="Failed to sync users")

        synced = 0
        for identity in identities:
            try:
                await self.provisioner.provision(ctx, identity)
            except ProvisioningError as exc:
                logger.error("Failed to sync user %s: %s", identity.id, exc)
                continue
            synced += 1

        self.cache.revalidate(USERS_VIEW)
        return ActionResult(success=True, count=synced)


class LearnerActions:
    def __init__(self, api: ApiClient | None = None, cache: ViewCache | None = None):
        self.api = api or ApiClient()
        self.cache = cache or view_cache

    async def mark_lesson_complete(self, ctx: RequestContext, lesson_id: str, slug: str) -> ActionResult:
        token = ctx.auth_token
        if not token:
            return ActionResult(success=False, message="Authentication required")
        response = await self.api.post(f"/progress/lesson/{lesson_id}", {"completed": True}, token=token)
        if not response.success:
            return ActionResult(success=False, message=response.message or "Failed to mark lesson as complete")
        self.cache.revalidate(f"/dashboard/{slug}")
        return ActionResult(success=True, message="Lesson marked as complete")
