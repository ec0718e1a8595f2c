"""
FastAPI router for authentication.

All routes delegate to use cases. No business logic here.
Signup and login carry a stricter per-IP rate limit than the default.
"""

from fastapi import APIRouter, Depends, Request, status

from app.application.exchange.change_password import ChangePasswordUseCase
from app.application.exchange.dtos import (
    AuthSession,
    ChangePasswordCommand,
    LoginCommand,
    SignUpCommand,
)
from app.application.exchange.login import LoginUseCase
from app.application.exchange.refresh_session import RefreshSessionUseCase
from app.application.exchange.signup import SignUpUseCase
from app.domain.exchange.entities import User
from app.interfaces.exchange.dependencies import (
    get_change_password_use_case,
    get_current_user,
    get_login_use_case,
    get_refresh_session_use_case,
    get_signup_use_case,
)
from app.interfaces.exchange.schemas import (
    ChangePasswordRequest,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    RefreshSessionRequest,
    SessionResponse,
    SignUpRequest,
    SignUpResponse,
    UserSchema,
)
from app.shared.security.rate_limiting import AUTH_RATE_LIMIT, limiter

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_response(message: str, session: AuthSession) -> SessionResponse:
    return SessionResponse(
        message=message,
        user=UserSchema.from_entity(session.user),
        access_token=session.access_token,
        refresh_token=session.refresh_token,
    )


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Register a trader account",
)
@limiter.limit(AUTH_RATE_LIMIT)
def signup(
    request: Request,
    payload: SignUpRequest,
    use_case: SignUpUseCase = Depends(get_signup_use_case),
) -> SignUpResponse:
    user = use_case.execute(
        SignUpCommand(name=payload.name, email=payload.email, password=payload.password)
    )
    return SignUpResponse(message="User created successfully", user_id=user.id)


@router.post(
    "/login",
    response_model=SessionResponse,
    responses={401: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
    summary="Log in with email and password",
)
@limiter.limit(AUTH_RATE_LIMIT)
def login(
    request: Request,
    payload: LoginRequest,
    use_case: LoginUseCase = Depends(get_login_use_case),
) -> SessionResponse:
    client_ip = request.client.host if request.client else "unknown"
    session = use_case.execute(
        LoginCommand(email=payload.email, password=payload.password, client_ip=client_ip)
    )
    return _session_response("Login successful", session)


@router.post(
    "/session",
    response_model=SessionResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Refresh the session",
    description="Exchange a refresh token for a new access/refresh token pair.",
)
def refresh_session(
    payload: RefreshSessionRequest,
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
) -> SessionResponse:
    return _session_response("Session refreshed", use_case.execute(payload.refresh_token))


@router.get("/me", response_model=UserSchema, summary="Current user")
def me(user: User = Depends(get_current_user)) -> UserSchema:
    return UserSchema.from_entity(user)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Change password",
)
def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
) -> MessageResponse:
    use_case.execute(
        ChangePasswordCommand(
            user_id=user.id,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    )
    return MessageResponse(message="Password updated successfully")
