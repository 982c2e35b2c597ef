"""
Identity middleware for Flask

Handles:
- Optional JWT validation on requests
- Attaching the authenticated Account to the request context (g.account)

Events logged while handling the request are attributed to that account.
A request without a valid token stays anonymous here; views that need an
account are wrapped in require_token (auditlog/web/auth.py).
"""

import logging
from typing import Optional

from flask import Flask, g, request
from flask_jwt_extended import decode_token

from auditlog.core.runtime import Account

logger = logging.getLogger(__name__)


def account_from_claims(claims: dict) -> Optional[Account]:
    """Build an Account from decoded JWT claims

    Expects "sub" (user id) and "username"; "email" and "trusted" are optional.
    """
    user_id = claims.get("sub")
    username = claims.get("username")
    if user_id in (None, "") or not username:
        return None
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        pass
    return Account(
        id=user_id,
        login=username,
        email=claims.get("email"),
        trusted=claims.get("trusted") is True,
    )


def setup_identity_middleware(app: Flask) -> None:
    """Register the identity middleware on a Flask app"""

    @app.before_request
    def load_account() -> None:
        """Decode the bearer token, if any, and store the account on g"""
        g.account = None

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return None

        token = auth_header[7:]  # Remove 'Bearer ' prefix
        try:
            claims = decode_token(token)
        except Exception as e:
            logger.warning(f"Token validation failed: {e}")
            return None

        g.account = account_from_claims(claims)
        if g.account is not None:
            logger.debug(f"Account {g.account.login} identified for {request.path}")
        return None

    @app.teardown_request
    def forget_account(exception: Optional[BaseException] = None) -> None:
        g.pop("account", None)


def get_current_account() -> Optional[Account]:
    """Get the account of the current request

    Returns:
        Account or None if the request is anonymous
    """
    return getattr(g, "account", None)
