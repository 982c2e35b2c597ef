"""
Ambient execution state consulted while an event is logged

Provides:
- Account: the end-user account an event is attributed to
- Markers for scheduled tasks, command-line runs and RPC / HTTP-API requests
- Access to the current HTTP request (Flask) for network-origin fields

State lives in context variables, so each thread or request sees its own
values.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Iterator, Mapping

from flask import g, has_app_context, has_request_context, request


@dataclass(frozen=True)
class Account:
    """End-user account captured at append time"""
    id: int | str
    login: str
    email: str | None = None
    # Trusted callers (import jobs, other services) may send reserved context keys
    trusted: bool = False

    def as_context(self) -> dict:
        return {
            "_user_id": self.id,
            "_user_login": self.login,
            "_user_email": self.email or "",
        }


@dataclass(frozen=True)
class RequestInfo:
    """Network details of the request an event is logged in"""
    remote_addr: str | None = None
    environ: Mapping[str, str] = field(default_factory=dict)
    referrer: str | None = None


_account: ContextVar[Account | None] = ContextVar("auditlog_account", default=None)
_scheduled_job: ContextVar[str | None] = ContextVar("auditlog_scheduled_job", default=None)
_command_line: ContextVar[bool] = ContextVar("auditlog_command_line", default=False)
_rpc_request: ContextVar[bool] = ContextVar("auditlog_rpc_request", default=False)
_rest_api_request: ContextVar[bool] = ContextVar("auditlog_rest_api_request", default=False)


@contextmanager
def _set(var: ContextVar, value) -> Iterator[None]:
    token = var.set(value)
    try:
        yield
    finally:
        var.reset(token)


def acting_as(account: Account | None):
    """Attribute events logged inside the block to an account

    For hosts that do not authenticate through the Flask identity middleware.
    """
    return _set(_account, account)


def scheduled_task(name: str):
    """Mark the block as a scheduled (background) job named `name`"""
    return _set(_scheduled_job, name)


def command_line():
    """Mark the block as running inside a command-line invocation"""
    return _set(_command_line, True)


def rpc_request():
    """Mark the block as handling a remote-procedure call"""
    return _set(_rpc_request, True)


def rest_api_request():
    """Mark the block as handling a programmatic HTTP-API request"""
    return _set(_rest_api_request, True)


def current_account() -> Account | None:
    """Account set with acting_as(), else the one the identity middleware put on g"""
    account = _account.get()
    if account is not None:
        return account
    if has_app_context():
        return getattr(g, "account", None)
    return None


def current_scheduled_job() -> str | None:
    return _scheduled_job.get()


def in_command_line() -> bool:
    return _command_line.get()


def is_rpc_request() -> bool:
    return _rpc_request.get()


def is_rest_api_request() -> bool:
    return _rest_api_request.get()


def current_request_info() -> RequestInfo | None:
    """Network details of the active Flask request, None outside a request"""
    if not has_request_context():
        return None
    return RequestInfo(
        remote_addr=request.remote_addr,
        environ=request.environ,
        referrer=request.referrer,
    )
