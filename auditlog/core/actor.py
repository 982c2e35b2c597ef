"""
Actor resolution for logged events
"""

from typing import Callable

from auditlog.core import runtime
from auditlog.core.levels import Initiator
from auditlog.core.runtime import Account


class ActorResolver:
    """Determines who or what caused an event

    Priority, first match wins:
    1. An authenticated account -> end_user
    2. A scheduled task -> automated_system
    3. A command-line invocation -> command_line_tool
    4. Anything else -> other
    """

    def __init__(
        self,
        account_provider: Callable[[], Account | None] = runtime.current_account,
        verbose_diagnostics: bool = False,
    ):
        self.account_provider = account_provider
        self.verbose_diagnostics = verbose_diagnostics

    def resolve(self) -> tuple[Initiator, dict]:
        """Resolve the actor of the event being logged

        Returns:
            Tuple of (initiator, extra context fields)
        """
        account = self.account_provider()
        if account is not None:
            return Initiator.END_USER, account.as_context()

        job_name = runtime.current_scheduled_job()
        if job_name is not None:
            extra = {"_cron_running": True}
            if self.verbose_diagnostics:
                extra["_cron_current_job"] = job_name
            return Initiator.AUTOMATED_SYSTEM, extra

        if runtime.in_command_line():
            return Initiator.COMMAND_LINE_TOOL, {}

        return Initiator.OTHER, {}
