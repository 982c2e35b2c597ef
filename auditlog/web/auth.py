"""
auditlog/web/auth.py
JWT setup and the token requirement of the write endpoints
"""

from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Callable

from flask import Flask, jsonify, request
from flask_jwt_extended import JWTManager, create_access_token

from auditlog.core.runtime import Account
from auditlog.web.identity import get_current_account
from config.settings import Config


def init_jwt(app: Flask) -> JWTManager:
    """
    Initialize JWT handling for the Flask app

    Args:
        app: Flask application instance

    Returns:
        JWTManager: Configured JWT manager instance
    """
    app.config.setdefault("JWT_SECRET_KEY", Config.JWT_SECRET_KEY)
    app.config.setdefault("JWT_ACCESS_TOKEN_EXPIRES", timedelta(hours=24))

    return JWTManager(app)


def create_account_token(account: Account, expires_in_hours: int = 24) -> str:
    """Create a JWT access token carrying an account's identity

    Must be called inside an application context.

    Args:
        account: Account to encode
        expires_in_hours: Token expiration in hours (default: 24)

    Returns:
        JWT access token
    """
    additional_claims = {"username": account.login}
    if account.email:
        additional_claims["email"] = account.email
    if account.trusted:
        additional_claims["trusted"] = True
    return create_access_token(
        identity=str(account.id),
        additional_claims=additional_claims,
        expires_delta=timedelta(hours=expires_in_hours),
    )


def require_token(f: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator to require a valid account token

    The identity middleware has already decoded the
    "Authorization: Bearer <token>" header; the view only runs when it
    found an account.

    Usage:
        @require_token
        def my_route():
            return {'data': 'value'}
    """

    @wraps(f)
    def decorated_function(*args: Any, **kwargs: Any) -> Any:
        if not request.headers.get("Authorization", "").startswith("Bearer "):
            return _unauthorized("Missing authorization header. Use: Authorization: Bearer <token>")

        if get_current_account() is None:
            return _unauthorized("Invalid or expired token")

        return f(*args, **kwargs)

    return decorated_function


def _unauthorized(error: str):
    return (
        jsonify({"error": error, "timestamp": datetime.now(timezone.utc).isoformat()}),
        401,
    )
