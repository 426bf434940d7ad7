
from dataclasses import dataclass
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError

BCRYPT_ROUNDS = 12
ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, hashed: str | None) -> bool:
    if hashed is None:
        # unknown account: burn the same bcrypt cost before failing
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(password, hashed)


@dataclass(frozen=True)
class TokenCheck:
    user_id: int | None = None

    @property
    def authenticated(self) -> bool:
        return self.user_id is not None


UNAUTHORIZED = TokenCheck()


class TokenCodec:
    """Signs and checks the stateless session token kept in the cookie."""

    def __init__(self, secret_key: str, lifetime: timedelta):
        self.secret_key = secret_key
        self.lifetime = lifetime

    def issue(self, user_id: int, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        to_encode = {"sub": str(user_id), "iat": now, "exp": now + self.lifetime}
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def verify(self, token: str | None) -> TokenCheck:
        if not token:
            return UNAUTHORIZED
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError:
            return UNAUTHORIZED
        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub.isdigit():
            return UNAUTHORIZED
        return TokenCheck(user_id=int(sub))
