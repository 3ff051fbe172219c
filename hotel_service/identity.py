import logging
import uuid

from .clock import Clock
from .errors import Conflict, InvalidInput, NotFound, Unauthorized
from .rabbitmq import RabbitPublisher
from .repositories import UserRepository
from .schemas import Login, Principal, Register, Role, User
from .security import UNKNOWN_USER_HASH, decode_token, hash_password, issue_token, verify_password

logger = logging.getLogger(__name__)

_ALLOWED_ROLES = {r.value for r in Role}


class IdentityStore:
    """Registration, login and session verification over a user repository."""

    def __init__(self, users: UserRepository, clock: Clock, publisher: RabbitPublisher):
        self._users = users
        self._clock = clock
        self._publisher = publisher

    async def register(self, data: Register) -> tuple[str, User]:
        if not data.email or not data.password or not data.first_name or not data.last_name:
            raise InvalidInput("All fields are required")

        role = data.role or Role.customer.value
        if role not in _ALLOWED_ROLES:
            raise InvalidInput(f"Invalid role: {data.role}. Allowed: {sorted(_ALLOWED_ROLES)}")

        if await self._users.get_by_email(data.email):
            raise Conflict("User already exists")

        now = self._clock.now_utc()
        user = User(
            id=str(uuid.uuid4()),
            email=data.email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=Role(role),
            created_at=now,
            updated_at=now,
        )
        await self._users.add(user)
        logger.info("registered user %s (%s)", user.id, user.role.value)

        await self._publisher.emit(
            "user.registered",
            {"user_id": user.id, "email": user.email, "role": user.role.value},
            occurred_at=now,
        )
        return issue_token(user, now), user

    async def login(self, data: Login) -> tuple[str, User]:
        if not data.email or not data.password:
            raise InvalidInput("Email and password are required")

        user = await self._users.get_by_email(data.email)

        # same outcome and the same bcrypt work for unknown email and wrong password
        hashed = user.password_hash if user else UNKNOWN_USER_HASH
        password_ok = verify_password(data.password, hashed)
        if not user or not password_ok:
            logger.warning("failed login for %s", data.email)
            raise Unauthorized("Invalid credentials")

        return issue_token(user, self._clock.now_utc()), user

    def verify_session(self, token: str | None) -> Principal:
        return decode_token(token, self._clock.now_utc())

    async def get_profile(self, principal: Principal) -> User:
        user = await self._users.get(principal.user_id)
        if not user:
            raise NotFound("User not found")
        return user
