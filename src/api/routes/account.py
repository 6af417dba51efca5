from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import AuthContext
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account import ChangePasswordResponse, ChangePasswordUseCase
from src.depends import (
    get_current_principal,
    get_secret_hasher,
    get_session_policy,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Account"])

PASSWORD_ERROR_STATUS = {
    "INVALID_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "INVALID_CREDENTIALS": status.HTTP_403_FORBIDDEN,
    "ACCOUNT_UNUSABLE": status.HTTP_403_FORBIDDEN,
    "PRINCIPAL_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SESSION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=1, description="New password")


@router.put("/password", status_code=status.HTTP_200_OK, response_model=ChangePasswordResponse)
async def change_password(
    request: ChangePasswordRequest,
    auth: AuthContext = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
):
    """
    Change Password

    Members and admins only. Every other session of the caller is revoked;
    the current one stays active.

    Raises:
        - 400 Bad Request: New password outside the length policy
        - 401 Unauthorized: Missing or invalid access token
        - 403 Forbidden: Guest caller, wrong current password or unusable account
        - 404 Not Found: Principal no longer exists
    """
    result = await ChangePasswordUseCase(uow, hasher, policy).execute(
        auth, request.current_password, request.new_password
    )

    if result.is_err():
        error = result.error
        if error.code in PASSWORD_ERROR_STATUS:
            raise ClientError(error, status_code=PASSWORD_ERROR_STATUS[error.code])
        raise ServerError(error)

    return result.value
