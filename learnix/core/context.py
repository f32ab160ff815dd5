import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from learnix.core.database import get_db
from learnix.core.security import decode_session_token, extract_session_token


@dataclass
class RequestContext:
    """Everything a data function may know about the current request.

    Built once per request and discarded with it, so the user memo never
    outlives the render pass that filled it.
    """

    token: Optional[str] = None
    claims: Optional[Dict[str, Any]] = None
    db: Optional[Session] = None
    user_memo: Dict[str, Any] = field(default_factory=dict)
    user_lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def external_id(self) -> Optional[str]:
        return self.claims.get("sub") if self.claims else None

    @property
    def auth_token(self) -> Optional[str]:
        """Bearer token to forward upstream; only a verified session counts."""
        return self.token if self.claims else None


def build_context(token: Optional[str], db: Optional[Session] = None) -> RequestContext:
    claims = decode_session_token(token) if token else None
    return RequestContext(token=token, claims=claims, db=db)


def get_request_context(request: Request, db: Optional[Session] = Depends(get_db)) -> RequestContext:
    ctx = getattr(request.state, "portal_context", None)
    if ctx is None:
        ctx = build_context(extract_session_token(request), db)
        request.state.portal_context = ctx
    return ctx
