"""Token-based auth helpers for the ScamShield API.

An ``X-API-KEY`` token is resolved by trying each strategy in order. A
strategy returns the user when the token is its own, ``None`` when it is not,
and raises :class:`AuthenticationError` when the token is recognisably broken,
which stops the chain.
"""

import hmac
from typing import Callable, Dict, Optional, Sequence

from fastapi import Depends, Header, HTTPException, status

from scamshield.services.reports import Reporter
from scamshield.settings import get_settings

TokenStrategy = Callable[[str], Optional[Dict[str, str]]]

# Minimal token -> user mapping for local development.
_API_TOKENS: Dict[str, Dict[str, str]] = {
    "dev-reporter-token": {"user_id": "user-dev-1", "username": "reporter_1", "role": "reporter"},
    "dev-admin-token": {"user_id": "user-admin", "username": "admin", "role": "admin"},
}


class AuthenticationError(Exception):
    """Raised by a strategy to abort token resolution."""


def static_token_strategy(token: str) -> Optional[Dict[str, str]]:
    return _API_TOKENS.get(token)


def configured_key_strategy(token: str) -> Optional[Dict[str, str]]:
    """Accept the service key from settings as an admin identity."""

    key = get_settings().api.key
    if not key:
        return None
    if hmac.compare_digest(token.encode("utf-8"), key.encode("utf-8")):
        return {"user_id": "service", "username": "service", "role": "admin"}
    return None


DEFAULT_STRATEGIES: Sequence[TokenStrategy] = (static_token_strategy, configured_key_strategy)


def resolve_token(token: str, strategies: Sequence[TokenStrategy] = DEFAULT_STRATEGIES) -> Optional[Dict[str, str]]:
    """Return the user for ``token`` from the first strategy that claims it."""

    if any(char.isspace() for char in token):
        raise AuthenticationError("Malformed API key")
    for strategy in strategies:
        user = strategy(token)
        if user:
            return user
    return None


def require_token(x_api_key: Optional[str] = Header(None)) -> Dict[str, str]:
    """Validate API key header and return user info.

    Raises:
        HTTPException: 401 if missing or malformed, 403 if unknown.
    """
    if not x_api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-API-KEY")
    try:
        user = resolve_token(x_api_key)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    if not user:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid API key")
    return user


def require_role(required_role: str) -> Callable:
    """Dependency factory that enforces a required role (reporter/admin)."""

    def _checker(user=Depends(require_token)):
        role = user.get("role")
        if role == required_role or role == "admin":
            return user
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")

    return _checker


def current_reporter(user=Depends(require_token)) -> Reporter:
    """Return the authenticated user as a :class:`Reporter`."""

    return Reporter(user_id=user["user_id"], display_name=user.get("username"))
