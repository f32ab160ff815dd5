from fastapi import Depends

from learnix.core.context import RequestContext, get_request_context
from learnix.schemas.user import CurrentUser
from learnix.services.authorization import AuthorizationGate
from learnix.services.session import SessionResolver

session_resolver = SessionResolver()
authorization_gate = AuthorizationGate(session_resolver)


def get_session_resolver() -> SessionResolver:
    return session_resolver


def get_authorization_gate() -> AuthorizationGate:
    return authorization_gate


async def user_required(
    ctx: RequestContext = Depends(get_request_context),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> CurrentUser:
    return await gate.require_user(ctx)


async def mentor_required(
    ctx: RequestContext = Depends(get_request_context),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> CurrentUser:
    return await gate.require_mentor(ctx)


async def admin_required(
    ctx: RequestContext = Depends(get_request_context),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> CurrentUser:
    return await gate.require_admin(ctx)


async def admin_api_required(
    ctx: RequestContext = Depends(get_request_context),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> CurrentUser:
    return await gate.require_admin(ctx, json=True)
