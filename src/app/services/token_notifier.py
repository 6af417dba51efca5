from abc import ABC, abstractmethod
from datetime import datetime


class ITokenNotifier(ABC):
    """Delivers one-time tokens to the owner of an email address"""

    @abstractmethod
    async def send_password_reset(self, email: str, token: str, expires_at: datetime) -> None:
        pass

    @abstractmethod
    async def send_email_verification(
        self, email: str, token: str, expires_at: datetime
    ) -> None:
        pass
