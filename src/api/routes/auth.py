from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import ClientContext
from src.app.services.session_policy import SessionPolicy
from src.app.services.token_notifier import ITokenNotifier
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AuthorizedPrincipal,
    ConfirmPasswordResetUseCase,
    EmailVerificationRequested,
    EmailVerified,
    GuestJoinCommand,
    GuestJoinUseCase,
    JoinCommand,
    JoinUseCase,
    LoginCommand,
    LoginUseCase,
    PasswordResetConfirmed,
    PasswordResetRequested,
    RefreshTokenUseCase,
    RequestEmailVerificationUseCase,
    RequestPasswordResetUseCase,
    VerifyEmailUseCase,
)
from src.depends import (
    get_client_context,
    get_secret_hasher,
    get_session_policy,
    get_token_notifier,
    get_unit_of_work,
)
from src.domain.entities import PrincipalKind

router = APIRouter(prefix="/auth", tags=["Authentication"])

JOIN_ERROR_STATUS = {
    "EMAIL_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "INVALID_PASSWORD": status.HTTP_400_BAD_REQUEST,
}

LOGIN_ERROR_STATUS = {
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "ACCOUNT_UNUSABLE": status.HTTP_403_FORBIDDEN,
}

RESET_ERROR_STATUS = {
    "INVALID_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "INVALID_RESET_TOKEN": status.HTTP_400_BAD_REQUEST,
}

VERIFY_ERROR_STATUS = {
    "INVALID_VERIFICATION_TOKEN": status.HTTP_400_BAD_REQUEST,
}


class JoinRequest(BaseModel):
    """
    Join HTTP request payload

    Password length policy is enforced by the use case so that the limits
    follow configuration.
    """

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class GuestJoinRequest(BaseModel):
    nickname: Optional[str] = Field(None, max_length=64, description="Display name")


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Password")
    keep_me_signed_in: bool = Field(
        False, description="Use the extended refresh window for this session"
    )


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token")


class EmailRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")


class ConfirmPasswordResetRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Password reset token")
    new_password: str = Field(..., min_length=1, description="New password")


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Verification token")


def _raise_for(error, status_map):
    if error.code in status_map:
        raise ClientError(error, status_code=status_map[error.code])
    raise ServerError(error)


async def _join(kind, request, uow, hasher, policy, client) -> AuthorizedPrincipal:
    command = JoinCommand(
        kind=kind, email=request.email, password=request.password, client=client
    )
    result = await JoinUseCase(uow, hasher, policy).execute(command)
    if result.is_err():
        _raise_for(result.error, JOIN_ERROR_STATUS)
    return result.value


async def _login(kind, request, uow, hasher, policy, client) -> AuthorizedPrincipal:
    command = LoginCommand(
        kind=kind,
        email=request.email,
        password=request.password,
        keep_me_signed_in=request.keep_me_signed_in,
        client=client,
    )
    result = await LoginUseCase(uow, hasher, policy).execute(command)
    if result.is_err():
        _raise_for(result.error, LOGIN_ERROR_STATUS)
    return result.value


@router.post(
    "/members/join",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthorizedPrincipal,
)
async def member_join(
    request: JoinRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
    client: ClientContext = Depends(get_client_context),
):
    """
    Member Join

    Registers a member and issues the first session.

    Raises:
        - 400 Bad Request: Password outside the length policy
        - 409 Conflict: Email already registered
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    return await _join(PrincipalKind.member, request, uow, hasher, policy, client)


@router.post(
    "/members/login",
    status_code=status.HTTP_200_OK,
    response_model=AuthorizedPrincipal,
)
async def member_login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
    client: ClientContext = Depends(get_client_context),
):
    """
    Member Login

    Raises:
        - 401 Unauthorized: Unknown email or wrong password (same response)
        - 403 Forbidden: Account suspended or deleted
    """
    return await _login(PrincipalKind.member, request, uow, hasher, policy, client)


@router.post(
    "/admins/join",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthorizedPrincipal,
    dependencies=[Depends(verify_admin_api_key)],
)
async def admin_join(
    request: JoinRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
    client: ClientContext = Depends(get_client_context),
):
    """
    Admin Join

    Requires the X-Admin-API-Key header.

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 400 Bad Request: Password outside the length policy
        - 409 Conflict: Email already registered
    """
    return await _join(PrincipalKind.admin, request, uow, hasher, policy, client)


@router.post(
    "/admins/login",
    status_code=status.HTTP_200_OK,
    response_model=AuthorizedPrincipal,
)
async def admin_login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
    client: ClientContext = Depends(get_client_context),
):
    return await _login(PrincipalKind.admin, request, uow, hasher, policy, client)


@router.post(
    "/guests/join",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthorizedPrincipal,
)
async def guest_join(
    request: GuestJoinRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
    client: ClientContext = Depends(get_client_context),
):
    """Create a guest principal without credentials and issue a session"""
    command = GuestJoinCommand(nickname=request.nickname, client=client)
    result = await GuestJoinUseCase(uow, hasher, policy).execute(command)
    if result.is_err():
        raise ServerError(result.error)
    return result.value


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=AuthorizedPrincipal)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
):
    """
    Rotate a refresh token

    The presented token becomes unusable; the response carries a new pair
    for the same session.

    Raises:
        - 401 Unauthorized: Token unknown, reused, revoked, expired or its
          owner is no longer usable (one error for all cases)
    """
    result = await RefreshTokenUseCase(uow, hasher, policy).execute(request.refresh_token)
    if result.is_err():
        _raise_for(result.error, {"INVALID_REFRESH_TOKEN": status.HTTP_401_UNAUTHORIZED})
    return result.value


async def _request_password_reset(kind, request, uow, hasher, policy, notifier):
    use_case = RequestPasswordResetUseCase(uow, hasher, policy, notifier)
    result = await use_case.execute(kind, request.email)
    if result.is_err():
        raise ServerError(result.error)
    return result.value


async def _confirm_password_reset(kind, request, uow, hasher, policy):
    result = await ConfirmPasswordResetUseCase(uow, hasher, policy).execute(
        kind, request.token, request.new_password
    )
    if result.is_err():
        _raise_for(result.error, RESET_ERROR_STATUS)
    return result.value


async def _request_email_verification(kind, request, uow, hasher, policy, notifier):
    use_case = RequestEmailVerificationUseCase(uow, hasher, policy, notifier)
    result = await use_case.execute(kind, request.email)
    if result.is_err():
        raise ServerError(result.error)
    return result.value


async def _verify_email(kind, request, uow, hasher):
    result = await VerifyEmailUseCase(uow, hasher).execute(kind, request.token)
    if result.is_err():
        _raise_for(result.error, VERIFY_ERROR_STATUS)
    return result.value


@router.post(
    "/members/password-reset/request",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=PasswordResetRequested,
)
async def member_request_password_reset(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
    notifier: ITokenNotifier = Depends(get_token_notifier),
):
    """
    Request Password Reset

    Always answers 202 with the same body so the response does not reveal
    whether the email is registered. The token is delivered out of band.
    """
    return await _request_password_reset(
        PrincipalKind.member, request, uow, hasher, policy, notifier
    )


@router.post(
    "/members/password-reset/confirm",
    status_code=status.HTTP_200_OK,
    response_model=PasswordResetConfirmed,
)
async def member_confirm_password_reset(
    request: ConfirmPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
):
    """
    Confirm Password Reset

    Sets the new password and revokes every session of the member.

    Raises:
        - 400 Bad Request: Token invalid, expired or already used, or new
          password outside the length policy
    """
    return await _confirm_password_reset(PrincipalKind.member, request, uow, hasher, policy)


@router.post(
    "/members/email/verify/resend",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=EmailVerificationRequested,
)
async def member_request_email_verification(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
    notifier: ITokenNotifier = Depends(get_token_notifier),
):
    return await _request_email_verification(
        PrincipalKind.member, request, uow, hasher, policy, notifier
    )


@router.post(
    "/members/email/verify",
    status_code=status.HTTP_200_OK,
    response_model=EmailVerified,
)
async def member_verify_email(
    request: VerifyEmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
):
    """
    Verify Email

    Raises:
        - 400 Bad Request: Token invalid, expired or already used
    """
    return await _verify_email(PrincipalKind.member, request, uow, hasher)


@router.post(
    "/admins/password-reset/request",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=PasswordResetRequested,
)
async def admin_request_password_reset(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
    notifier: ITokenNotifier = Depends(get_token_notifier),
):
    return await _request_password_reset(
        PrincipalKind.admin, request, uow, hasher, policy, notifier
    )


@router.post(
    "/admins/password-reset/confirm",
    status_code=status.HTTP_200_OK,
    response_model=PasswordResetConfirmed,
)
async def admin_confirm_password_reset(
    request: ConfirmPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
):
    return await _confirm_password_reset(PrincipalKind.admin, request, uow, hasher, policy)


@router.post(
    "/admins/email/verify/resend",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=EmailVerificationRequested,
)
async def admin_request_email_verification(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
    notifier: ITokenNotifier = Depends(get_token_notifier),
):
    return await _request_email_verification(
        PrincipalKind.admin, request, uow, hasher, policy, notifier
    )


@router.post(
    "/admins/email/verify",
    status_code=status.HTTP_200_OK,
    response_model=EmailVerified,
)
async def admin_verify_email(
    request: VerifyEmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
):
    return await _verify_email(PrincipalKind.admin, request, uow, hasher)
