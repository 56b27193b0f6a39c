import logging
from urllib.parse import urlencode

from app.config import settings

logger = logging.getLogger("app.email")


def build_reset_link(username: str, token: str, base_url: str = settings.FRONTEND_BASE_URL) -> str:
    query = urlencode({"username": username, "token": token})
    return f"{base_url.rstrip('/')}/reset-password?{query}"


class EmailService:
    """
    Delivers password reset links. No mail transport is configured, so the
    link goes to the application log where an operator can pick it up.
    """

    def send_password_reset_email(self, recipient: str, reset_link: str) -> None:
        logger.info("Sending password reset email to %s", recipient)
        logger.info("Reset link: %s", reset_link)
