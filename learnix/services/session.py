import logging
from typing import Optional, Protocol

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from learnix.clients.api_client import ApiClient
from learnix.clients.identity import IdentityProviderClient
from learnix.core.config import settings
from learnix.core.context import RequestContext
from learnix.core.database import require_db
from learnix.core.exceptions import IdentityProviderError, ProvisioningError, RedirectRequired
from learnix.models.user import normalize_role
from learnix.repositories.user_repository import UserRepository
from learnix.schemas.user import CurrentUser, ExternalIdentity

logger = logging.getLogger(__name__)

_MEMO_KEY = "user"


class UserProvisioner(Protocol):
    async def provision(self, ctx: RequestContext, identity: ExternalIdentity) -> CurrentUser:
        ...


class LocalUserProvisioner:
    """Get-or-create of the local User row: by external id, then by email, else insert."""

    def __init__(self, user_repo: UserRepository | None = None):
        self.user_repo = user_repo or UserRepository()

    async def provision(self, ctx: RequestContext, identity: ExternalIdentity) -> CurrentUser:
        db = require_db(ctx.db)
        email = identity.primary_email
        if not email:
            raise ProvisioningError(f"Identity {identity.id} has no email address")
        return await run_in_threadpool(self._get_or_create, db, identity, email)

    def _get_or_create(self, db: Session, identity: ExternalIdentity, email: str) -> CurrentUser:
        try:
            user = self.user_repo.get_by_external_id(db, identity.id)
            if user:
                user = self.user_repo.update_profile(db, user, name=identity.display_name, image=identity.image_url)
            else:
                user = self.user_repo.get_by_email(db, email)
                if user:
                    user = self.user_repo.update_profile(
                        db,
                        user,
                        name=identity.display_name,
                        image=identity.image_url,
                        external_id=identity.id,
                    )
                else:
                    user = self.user_repo.create(
                        db,
                        external_id=identity.id,
                        name=identity.display_name,
                        email=email,
                        image=identity.image_url,
                    )
        except SQLAlchemyError as exc:
            db.rollback()
            raise ProvisioningError(f"Could not provision user {identity.id}: {exc}") from exc
        return CurrentUser.model_validate(user)


class RemoteUserProvisioner:
    """Delegates get-or-create to the backend's user sync endpoint."""

    def __init__(self, api: ApiClient | None = None):
        self.api = api or ApiClient()

    async def provision(self, ctx: RequestContext, identity: ExternalIdentity) -> CurrentUser:
        if not ctx.auth_token:
            raise ProvisioningError("User sync requires a session token")
        response = await self.api.post(
            "/users/sync",
            {
                "clerkId": identity.id,
                "email": identity.primary_email,
                "firstName": identity.first_name,
                "lastName": identity.last_name,
                "imageUrl": identity.image_url,
            },
            token=ctx.auth_token,
        )
        user = response.data.get("user") if isinstance(response.data, dict) else None
        if not response.success or not isinstance(user, dict):
            raise ProvisioningError(response.message or f"User sync failed for {identity.id}")
        return CurrentUser.model_validate(user)


def default_provisioner() -> UserProvisioner:
    return LocalUserProvisioner() if settings.database_enabled else RemoteUserProvisioner()


class SessionResolver:
    """Resolves the caller's user record at most once per request."""

    def __init__(
        self,
        identity_client: IdentityProviderClient | None = None,
        provisioner: UserProvisioner | None = None,
    ):
        self.identity_client = identity_client or IdentityProviderClient()
        self.provisioner = provisioner or default_provisioner()

    async def current_user(self, ctx: RequestContext) -> Optional[CurrentUser]:
        async with ctx.user_lock:
            if _MEMO_KEY not in ctx.user_memo:
                ctx.user_memo[_MEMO_KEY] = await self._resolve(ctx)
            return ctx.user_memo[_MEMO_KEY]

    async def require_user(self, ctx: RequestContext) -> CurrentUser:
        user = await self.current_user(ctx)
        if user is None:
            raise RedirectRequired(settings.login_path)
        return user

    async def sync_current_user(self, ctx: RequestContext) -> bool:
        return await self.current_user(ctx) is not None

    async def _resolve(self, ctx: RequestContext) -> Optional[CurrentUser]:
        if not ctx.external_id:
            return None
        try:
            identity = await self.identity_client.get_user(ctx.external_id)
        except IdentityProviderError as exc:
            logger.warning("Treating caller as signed out: %s", exc)
            return None
        if identity is None:
            logger.warning("Session subject %s is unknown to the identity provider", ctx.external_id)
            return None

        try:
            user = await self.provisioner.provision(ctx, identity)
        except ProvisioningError as exc:
            logger.error("User provisioning failed: %s", exc)
            return None

        await self._push_role_metadata(identity, user)
        return user

    async def _push_role_metadata(self, identity: ExternalIdentity, user: CurrentUser) -> None:
        """Mirrors the local role into the provider's public metadata when they disagree."""
        if not user.role:
            return
        if normalize_role(user.role) == normalize_role(identity.public_metadata.get("role")):
            return
        try:
            await self.identity_client.update_user_metadata(
                identity.id, {**identity.public_metadata, "role": user.role}
            )
        except IdentityProviderError as exc:
            logger.warning("Could not mirror role for %s: %s", identity.id, exc)
