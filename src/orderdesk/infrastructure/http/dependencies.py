"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from orderdesk.application.authenticate import AuthenticateHandler
from orderdesk.domain.model.user import User
from orderdesk.infrastructure.bootstrap import Container, user_repository

bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    return request.app.state.container


def current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    container: Container = Depends(get_container),
) -> User:
    """The fully authenticated caller; pending two-factor tokens are refused."""
    token = credentials.credentials if credentials else None
    with container.transaction() as session:
        handler = AuthenticateHandler(user_repository(session), container.tokens)
        return handler.handle(token)
