"""Auth API — sign-up and sign-in.

- POST /auth/sign-up → create a user, returns {"id"}
- POST /auth/sign-in → username/password → {"token"}
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.auth.dependencies import get_token_service
from todoapp.auth.jwt import TokenService
from todoapp.db.engine import get_db
from todoapp.schemas.auth import (
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
)
from todoapp.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


def _svc(
    request: Request,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, tokens, bcrypt_rounds=request.app.state.bcrypt_rounds)


@router.post("/sign-up", response_model=SignUpResponse)
async def sign_up(body: SignUpRequest, svc: AuthService = Depends(_svc)):
    user_id = await svc.register(body.username, body.name, body.password)
    return {"id": user_id}


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(body: SignInRequest, svc: AuthService = Depends(_svc)):
    token = await svc.sign_in(body.username, body.password)
    return {"token": token}
