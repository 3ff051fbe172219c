from datetime import datetime, timedelta

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from . import config
from .errors import Unauthorized
from .schemas import Principal, Role, User

pwd_context = CryptContext(schemes=["bcrypt"], bcrypt__rounds=config.BCRYPT_ROUNDS)

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


# checked against when the account does not exist, so both paths pay for bcrypt
UNKNOWN_USER_HASH = hash_password("unknown-user-placeholder")


def issue_token(user: User, now: datetime) -> str:
    claims = {
        "sub": user.id,
        "userId": user.id,
        "email": user.email,
        "role": user.role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=config.TOKEN_TTL_HOURS)).timestamp()),
    }
    return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str | None, now: datetime) -> Principal:
    if not token:
        raise Unauthorized("Access token required")

    # expiry is checked against the injected clock below
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError:
        raise Unauthorized("Invalid token")

    exp = payload.get("exp")
    if not isinstance(exp, (int, float)) or exp <= now.timestamp():
        raise Unauthorized("Invalid token")

    user_id = payload.get("userId") or payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")
    if not user_id or not email or role not in {r.value for r in Role}:
        raise Unauthorized("Invalid token")

    return Principal(user_id=user_id, email=email, role=Role(role))


def get_current_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    token = None
    if creds and creds.scheme.lower() == "bearer":
        token = creds.credentials

    principal = request.app.state.identity.verify_session(token)

    request.state.user_sub = principal.user_id
    request.state.user_role = principal.role.value

    return principal
