
from collections.abc import Iterator
from fastapi import Request, Depends
from sqlalchemy.orm import Session
from docchat.config import Settings
from docchat.errors import Unauthorized
from docchat.files.blob_store import BlobStore
from docchat.llm.llm_gateway import InferenceGateway
from docchat.models.user import User
from docchat.utils.security import TokenCodec

COOKIE_NAME = "docchat_token"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.sessionmaker()
    try:
        yield db
    finally:
        db.close()

def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec

def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store

def get_gateway(request: Request) -> InferenceGateway:
    return request.app.state.gateway

def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> User:
    check = codec.verify(request.cookies.get(COOKIE_NAME))
    if not check.authenticated:
        raise Unauthorized()

    user = db.get(User, check.user_id)
    if user is None:
        raise Unauthorized()

    return user
