
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from docchat.auth.deps import COOKIE_NAME, get_db, get_current_user, get_settings, get_token_codec
from docchat.auth.service import register_user, authenticate_user
from docchat.config import Settings
from docchat.models.user import User
from docchat.schemas import CredentialsIn, AuthOut, AuthCheckOut, UserOut
from docchat.utils.security import TokenCodec

router = APIRouter(prefix="/auth", tags=["auth"])

def _cookie_policy(settings: Settings) -> dict:
    # cross-origin SPA in production needs SameSite=None, which browsers only accept with Secure
    if settings.is_production:
        return {"httponly": True, "samesite": "none", "secure": True, "path": "/"}
    return {"httponly": True, "samesite": "lax", "secure": False, "path": "/"}

def set_auth_cookie(response: Response, token: str, settings: Settings):
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.access_token_expire_days * 24 * 60 * 60,
        **_cookie_policy(settings),
    )

@router.post("/signup", response_model=AuthOut)
def signup(
    body: CredentialsIn,
    response: Response,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
    settings: Settings = Depends(get_settings),
):
    user = register_user(db, body.email, body.password)
    set_auth_cookie(response, codec.issue(user.id), settings)
    return AuthOut(user=UserOut.model_validate(user))

@router.post("/login", response_model=AuthOut)
def login(
    body: CredentialsIn,
    response: Response,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
    settings: Settings = Depends(get_settings),
):
    user = authenticate_user(db, body.email, body.password)
    set_auth_cookie(response, codec.issue(user.id), settings)
    return AuthOut(user=UserOut.model_validate(user))

@router.get("/check", response_model=AuthCheckOut)
def check(user: User = Depends(get_current_user)):
    return AuthCheckOut(user=UserOut.model_validate(user))

@router.post("/logout")
def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(COOKIE_NAME, **_cookie_policy(settings))
    return {"success": True}
