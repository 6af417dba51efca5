"""
Logging Token Notifier

Stands in for the mail queue: records that a token is ready for delivery.
The token itself is never written to the log.
"""

import logging
from datetime import datetime

from src.app.services.token_notifier import ITokenNotifier
from src.domain.base import isoformat_z

logger = logging.getLogger(__name__)


class LoggingTokenNotifier(ITokenNotifier):
    async def send_password_reset(self, email: str, token: str, expires_at: datetime) -> None:
        logger.info(
            f"Password reset link queued for {email}, expires {isoformat_z(expires_at)}"
        )

    async def send_email_verification(
        self, email: str, token: str, expires_at: datetime
    ) -> None:
        logger.info(
            f"Verification link queued for {email}, expires {isoformat_z(expires_at)}"
        )
