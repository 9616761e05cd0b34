"""
Edge authorization gate.

Decides, per request and without touching the database, whether a page
request passes or is redirected. The session token is decoded without
verifying its signature: this layer only steers users to the right
dashboard. Every API call still resolves the session with full signature,
expiry, and liveness checks (see ``auth.service.resolve_session``), so a
forged but well-formed cookie can reach a page shell but never data.
"""
from dataclasses import dataclass
from typing import Optional
import logging

from jose import JWTError

from .permissions import LOGIN_PATH, home_path_for, is_auth_only_path, parse_role, role_for_path
from .security import decode_unverified_claims

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateDecision:
    """
    Outcome of the gate for one request.

    Attributes:
        redirect_to: Target path, or None to let the request through
        clear_cookie: Whether the session cookie must be deleted
    """
    redirect_to: Optional[str] = None
    clear_cookie: bool = False

    @property
    def allowed(self) -> bool:
        return self.redirect_to is None


ALLOW = GateDecision()


def evaluate(path: str, token: Optional[str]) -> GateDecision:
    """
    Run the gate state machine for a request path and session cookie value.

    Args:
        path: Request path
        token: Raw session cookie value, if any

    Returns:
        GateDecision: pass, redirect, or redirect with cookie deletion
    """
    scoped_role = role_for_path(path)
    auth_only = is_auth_only_path(path)

    if scoped_role is None and not auth_only:
        return ALLOW

    if not token:
        if scoped_role is not None:
            return GateDecision(redirect_to=LOGIN_PATH)
        return ALLOW

    try:
        claims = decode_unverified_claims(token)
    except JWTError:
        logger.info(f"Corrupted session cookie on {path}, clearing it")
        return GateDecision(redirect_to=LOGIN_PATH, clear_cookie=True)

    role = parse_role(claims.get("role"))
    if role is None:
        logger.info(f"Session cookie without a usable role on {path}, clearing it")
        return GateDecision(redirect_to=LOGIN_PATH, clear_cookie=True)

    if auth_only:
        return GateDecision(redirect_to=home_path_for(role))

    if scoped_role != role:
        return GateDecision(redirect_to=home_path_for(role))

    return ALLOW
