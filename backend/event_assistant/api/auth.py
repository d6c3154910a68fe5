from fastapi import APIRouter, Depends, Form
from fastapi.security import OAuth2PasswordBearer

from ..errors import AuthError
from ..services.auth_service import AuthService
from .dependencies import get_auth_service

router = APIRouter(prefix="/auth", tags=["auth"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


@router.post("/token")
async def login_for_access_token(
    password: str = Form(...),
    auth: AuthService = Depends(get_auth_service),
):
    token = auth.login(password)
    return {"access_token": token, "token_type": "bearer"}


def require_access_token(
    token: str | None = Depends(oauth2_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> str:
    if not token:
        raise AuthError("INVALID_TOKEN", "not authenticated")
    return auth.verify_token(token)
