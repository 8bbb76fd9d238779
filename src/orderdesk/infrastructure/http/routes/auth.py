"""Registration and login endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from orderdesk.application.login import LoginHandler
from orderdesk.application.register_user import RegisterUserHandler
from orderdesk.application.verify_two_factor_login import VerifyTwoFactorLoginHandler
from orderdesk.infrastructure.bootstrap import Container, user_repository
from orderdesk.infrastructure.http.dependencies import get_container
from orderdesk.infrastructure.http.schemas import (
    Credentials,
    TwoFactorLoginRequest,
    optional_code,
)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", status_code=201)
def register(body: Credentials, container: Container = Depends(get_container)) -> dict:
    with container.transaction() as session:
        handler = RegisterUserHandler(user_repository(session), container.hasher)
        handler.handle(body.email, body.password)
    return {"message": "User created successfully"}


@router.post("/login")
def login(body: Credentials, container: Container = Depends(get_container)) -> dict:
    settings = container.settings
    with container.transaction() as session:
        handler = LoginHandler(
            user_repository(session),
            container.hasher,
            container.tokens,
            session_ttl=settings.token_ttl,
            pending_ttl=settings.pending_token_ttl,
        )
        result = handler.handle(body.email, body.password)
    return result.to_dict()


@router.post("/2fa/login")
def verify_two_factor_login(
    body: TwoFactorLoginRequest,
    container: Container = Depends(get_container),
) -> dict:
    settings = container.settings
    with container.transaction() as session:
        handler = VerifyTwoFactorLoginHandler(
            user_repository(session),
            container.tokens,
            container.totp,
            session_ttl=settings.token_ttl,
            valid_window=settings.totp_login_window,
        )
        token = handler.handle(body.temp_token, optional_code(body.code))
    return {"token": token}
