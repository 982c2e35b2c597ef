"""
Flask integration: JWT setup, token requirement and identity middleware
"""

from auditlog.web.auth import create_account_token, init_jwt, require_token
from auditlog.web.identity import (
    account_from_claims,
    get_current_account,
    setup_identity_middleware,
)

__all__ = [
    "account_from_claims",
    "create_account_token",
    "get_current_account",
    "init_jwt",
    "require_token",
    "setup_identity_middleware",
]
