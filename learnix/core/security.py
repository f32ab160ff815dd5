from typing import Any, Dict, Optional

from fastapi import Request
from jose import JWTError, jwt

from learnix.core.config import settings

BEARER_PREFIX = "bearer "


def extract_session_token(request: Request) -> Optional[str]:
    """Session token from the Authorization header, falling back to the session cookie."""
    header = request.headers.get("authorization")
    if header and header.lower().startswith(BEARER_PREFIX):
        token = header[len(BEARER_PREFIX):].strip()
        if token:
            return token
    return request.cookies.get(settings.session_cookie_name) or None


def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        claims = jwt.decode(
            token,
            settings.identity_jwt_key,
            algorithms=[settings.identity_jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError:
        return None
    if not claims.get("sub"):
        return None
    return claims
