"""Two-factor enrolment endpoints; all require a full session token."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from orderdesk.application.disable_two_factor import DisableTwoFactorHandler
from orderdesk.application.enable_two_factor import EnableTwoFactorHandler
from orderdesk.application.setup_two_factor import SetupTwoFactorHandler
from orderdesk.domain.model.user import User
from orderdesk.infrastructure.bootstrap import Container, user_repository
from orderdesk.infrastructure.http.dependencies import current_user, get_container
from orderdesk.infrastructure.http.schemas import EnableTwoFactorRequest, optional_code

router = APIRouter(prefix="/api/2fa", tags=["two-factor"])


@router.post("/setup")
def setup(
    user: User = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict:
    handler = SetupTwoFactorHandler(container.totp, container.settings.totp_issuer)
    return handler.handle(user).to_dict()


@router.post("/enable")
def enable(
    body: EnableTwoFactorRequest,
    user: User = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict:
    with container.transaction() as session:
        handler = EnableTwoFactorHandler(user_repository(session), container.totp)
        handler.handle(user.id, body.secret, optional_code(body.code))  # type: ignore[arg-type]
    return {"message": "2FA enabled successfully"}


@router.post("/disable")
def disable(
    user: User = Depends(current_user),
    container: Container = Depends(get_container),
) -> dict:
    with container.transaction() as session:
        DisableTwoFactorHandler(user_repository(session)).handle(user.id)  # type: ignore[arg-type]
    return {"message": "2FA disabled successfully"}
