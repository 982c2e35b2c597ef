"""
Producer for user sessions and accounts
"""

from auditlog.core.levels import Initiator
from auditlog.core.producer import Producer


class UserLogger(Producer):
    """Logs logins, logouts and failed login attempts"""

    slug = "UserLogger"

    def get_info(self) -> dict:
        return {
            "name": "User Logger",
            "description": "Logs user logins, logouts, and failed logins",
            "messages": {
                "user_logged_in": ("User logger: successful login", "Logged in"),
                "user_logged_out": ("User logger: logout", "Logged out"),
                "user_login_failed": (
                    "User logger: failed login",
                    'Failed to login with username "{login}" (incorrect password entered)',
                ),
                "user_unknown_login_failed": (
                    "User logger: failed login, unknown user",
                    'Failed to login with username "{failed_username}" (username does not exist)',
                ),
            },
        }

    def login_failed(self, username: str, user_exists: bool):
        """Log a failed login; the actor is the anonymous caller, not the account"""
        if user_exists:
            return self.warning_message(
                "user_login_failed",
                {
                    "login": username,
                    "_initiator": Initiator.UNKNOWN_USER,
                    "_occasionsID": f"{self.slug}/failed_user_login",
                },
            )
        return self.warning_message(
            "user_unknown_login_failed",
            {
                "failed_username": username,
                "_initiator": Initiator.UNKNOWN_USER,
                "_occasionsID": f"{self.slug}/failed_user_login",
            },
        )
