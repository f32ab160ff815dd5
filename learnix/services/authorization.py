from typing import Iterable, Optional, Union

from learnix.core.config import settings
from learnix.core.context import RequestContext
from learnix.core.exceptions import AuthorizationError, RedirectRequired
from learnix.models.user import UserRole, normalize_role
from learnix.schemas.user import CurrentUser
from learnix.services.session import SessionResolver

ADMIN_ROLES = frozenset({UserRole.ADMIN})
MENTOR_ROLES = frozenset({UserRole.ADMIN, UserRole.MENTOR})
ANY_ROLE = frozenset(UserRole)


def effective_role(user: CurrentUser) -> UserRole:
    """Missing or unrecognised roles count as a plain user."""
    return normalize_role(user.role) or UserRole.USER


class AuthorizationGate:
    def __init__(self, resolver: SessionResolver | None = None):
        self.resolver = resolver or SessionResolver()

    async def require_roles(
        self,
        ctx: RequestContext,
        roles: Iterable[Union[UserRole, str]],
        redirect_to: str,
        json: bool = False,
    ) -> CurrentUser:
        required = {normalize_role(role) for role in roles} - {None}
        if not required:
            raise ValueError("require_roles needs at least one known role")

        user = await self.resolver.current_user(ctx)
        if user is None:
            if json:
                raise AuthorizationError("Authentication required", status_code=401)
            raise RedirectRequired(settings.login_path)

        if effective_role(user) not in required:
            if json:
                raise AuthorizationError("Insufficient permissions", status_code=403)
            raise RedirectRequired(redirect_to)
        return user

    async def require_admin(self, ctx: RequestContext, json: bool = False) -> CurrentUser:
        return await self.require_roles(ctx, ADMIN_ROLES, settings.not_admin_path, json=json)

    async def require_mentor(self, ctx: RequestContext, json: bool = False) -> CurrentUser:
        return await self.require_roles(ctx, MENTOR_ROLES, settings.default_landing_path, json=json)

    async def require_user(self, ctx: RequestContext, json: bool = False) -> CurrentUser:
        return await self.require_roles(ctx, ANY_ROLE, settings.login_path, json=json)

    async def is_admin(self, ctx: RequestContext) -> bool:
        user: Optional[CurrentUser] = await self.resolver.current_user(ctx)
        return user is not None and effective_role(user) == UserRole.ADMIN
