from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.login_attempt_repository import ILoginAttemptRepository
from src.domain.entities import LoginAttempt


class LoginAttemptRepository(ILoginAttemptRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, attempt: LoginAttempt) -> LoginAttempt:
        self.session.add(attempt)
        await self.session.flush()
        return attempt
