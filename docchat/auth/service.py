
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from docchat.errors import Conflict, InvalidCredentials
from docchat.models.user import User
from docchat.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

def normalize_email(email: str) -> str:
    return email.strip().lower()

def register_user(db: Session, email: str, password: str) -> User:
    email = normalize_email(email)
    if db.query(User).filter(User.email == email).first():
        raise Conflict()
    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent signup for the same email
        db.rollback()
        raise Conflict()
    db.refresh(user)
    logger.info("user registered id=%s", user.id)
    return user

def authenticate_user(db: Session, email: str, password: str) -> User:
    email = normalize_email(email)
    user = db.query(User).filter(User.email == email).first()
    if not verify_password(password, user.password_hash if user else None):
        logger.info("login failed email=%s", email)
        raise InvalidCredentials()
    return user
