"""Sign-up, sign-in and session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response

from brandlens.api.deps import AuthDep, OptionalUserDep, SettingsDep, session_token
from brandlens.api.schemas import (
    AuthResponse,
    SessionResponse,
    SigninRequest,
    SignupRequest,
    UserResponse,
)

if TYPE_CHECKING:
    from brandlens.config import Settings
    from brandlens.models import AuthSession, User

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, email=user.email, name=user.name)


def _login_response(
    response: Response, settings: Settings, user: User, session: AuthSession
) -> AuthResponse:
    response.set_cookie(
        settings.session_cookie_name,
        session.token,
        expires=session.expires_at,
        httponly=True,
        samesite="lax",
    )
    return AuthResponse(
        user=_user_response(user), token=session.token, expires_at=session.expires_at
    )


def _client_info(request: Request) -> tuple[str | None, str | None]:
    host = request.client.host if request.client else None
    return host, request.headers.get("User-Agent")


@router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(
    body: SignupRequest,
    request: Request,
    response: Response,
    auth: AuthDep,
    settings: SettingsDep,
) -> AuthResponse:
    ip_address, user_agent = _client_info(request)
    user, session = auth.signup(body.email, body.password, body.name, ip_address, user_agent)
    return _login_response(response, settings, user, session)


@router.post("/signin", response_model=AuthResponse)
def signin(
    body: SigninRequest,
    request: Request,
    response: Response,
    auth: AuthDep,
    settings: SettingsDep,
) -> AuthResponse:
    ip_address, user_agent = _client_info(request)
    user, session = auth.signin(body.email, body.password, ip_address, user_agent)
    return _login_response(response, settings, user, session)


@router.post("/signout", status_code=204)
def signout(
    request: Request,
    response: Response,
    auth: AuthDep,
    settings: SettingsDep,
) -> None:
    token = session_token(request)
    if token:
        auth.signout(token)
    response.delete_cookie(settings.session_cookie_name)


@router.get("/session", response_model=SessionResponse)
def get_session(user: OptionalUserDep) -> SessionResponse:
    if user is None:
        return SessionResponse(authenticated=False)
    return SessionResponse(authenticated=True, user=_user_response(user))
