"""FastAPI transport for the Chaum-Pedersen authentication service."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .auth import AuthService
from .config import Settings
from .encoding import hex_to_int, int_to_hex
from .exceptions import AuthError

logger = logging.getLogger(__name__)


class RegisterRequest(BaseModel):
    user: str
    y1: str
    y2: str


class RegisterResponse(BaseModel):
    pass


class ChallengeRequest(BaseModel):
    user: str
    r1: str
    r2: str


class ChallengeResponse(BaseModel):
    auth_id: str
    c: str


class VerifyRequest(BaseModel):
    auth_id: str
    s: str


class VerifyResponse(BaseModel):
    session_id: str


class ParamsResponse(BaseModel):
    name: str
    p: str
    q: str
    g: str
    h: str


def create_app(service: Optional[AuthService] = None) -> FastAPI:
    """Build the HTTP app around ``service`` (configured from the environment if omitted)."""

    if service is None:
        service = AuthService.from_settings(Settings.from_env())

    app = FastAPI(title="cpauth", description="Chaum-Pedersen zero-knowledge authentication")
    app.state.service = service

    @app.exception_handler(AuthError)
    async def _auth_error(request: Request, exc: AuthError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    # Plain ``def`` handlers run in the worker thread pool.
    @app.get("/params", response_model=ParamsResponse)
    def params() -> ParamsResponse:
        group = service.params
        return ParamsResponse(
            name=group.name,
            p=int_to_hex(group.p),
            q=int_to_hex(group.q),
            g=int_to_hex(group.g),
            h=int_to_hex(group.h),
        )

    @app.post("/register", response_model=RegisterResponse)
    def register(request: RegisterRequest) -> RegisterResponse:
        y1 = hex_to_int(request.y1, "y1")
        y2 = hex_to_int(request.y2, "y2")
        service.register(request.user, y1, y2)
        return RegisterResponse()

    @app.post("/challenge", response_model=ChallengeResponse)
    def create_challenge(request: ChallengeRequest) -> ChallengeResponse:
        r1 = hex_to_int(request.r1, "r1")
        r2 = hex_to_int(request.r2, "r2")
        auth_id, challenge = service.create_challenge(request.user, r1, r2)
        return ChallengeResponse(auth_id=auth_id, c=int_to_hex(challenge))

    @app.post("/verify", response_model=VerifyResponse)
    def verify_authentication(request: VerifyRequest) -> VerifyResponse:
        s = hex_to_int(request.s, "s")
        session_id = service.verify_authentication(request.auth_id, s)
        return VerifyResponse(session_id=session_id)

    logger.debug("HTTP app created for group %s", service.params.name)
    return app


__all__ = ["create_app"]
