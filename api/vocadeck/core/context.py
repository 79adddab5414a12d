"""
Caller identity passed explicitly into services.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Header

from vocadeck.core.exceptions import AuthenticationError


@dataclass(frozen=True)
class RequestContext:
    """Who is making the call. Token verification happens upstream."""
    user_id: str


def get_request_context(x_user_id: Optional[str] = Header(default=None)) -> RequestContext:
    """Dependency: build the context from the header set by the auth gateway."""
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("Missing authenticated user")
    return RequestContext(user_id=x_user_id.strip())
