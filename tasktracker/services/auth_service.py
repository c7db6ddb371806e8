"""Local account registry and login state.

This is a credential lookup for a single-machine demo, not a security
system: passwords are stored and compared as plain text.
"""

import json
import logging
from dataclasses import dataclass

from pydantic import TypeAdapter, ValidationError

from tasktracker.models.user import User
from tasktracker.services.persistence import CURRENT_USER_KEY, USERS_KEY, PersistenceGateway
from tasktracker.services.reducer import Clock

logger = logging.getLogger(__name__)

_users_adapter: TypeAdapter[list[User]] = TypeAdapter(list[User])


@dataclass
class AuthResult:
    """Outcome of a login or registration attempt."""

    success: bool
    user: User | None = None
    message: str | None = None


class AuthService:
    """Registers users and tracks who is logged in.

    Users live under ``todo_users`` and the logged-in user under
    ``todo_current_user`` in the persistence gateway. Gateway errors are
    not caught.

    Args:
        gateway: Where accounts and the current-user pointer are stored.
        clock: Source of ``created_at`` and of new user ids.
    """

    def __init__(self, gateway: PersistenceGateway, clock: Clock):
        self._gateway = gateway
        self._clock = clock

    def list_users(self) -> list[User]:
        """All registered users, in registration order."""
        raw = self._gateway.get(USERS_KEY)
        if not raw:
            return []
        try:
            return _users_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable user registry: {e.error_count()} errors")
            return []

    def current_user(self) -> User | None:
        """The logged-in user, if any."""
        raw = self._gateway.get(CURRENT_USER_KEY)
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except ValidationError:
            logger.warning("Ignoring unreadable current-user pointer")
            return None

    def login(self, username: str, password: str) -> AuthResult:
        """Log in with an exact username and password match."""
        for user in self.list_users():
            if user.username == username and user.password == password:
                self._set_current(user)
                logger.info(f"User {user.username} logged in")
                return AuthResult(success=True, user=user)
        logger.info(f"Failed login for {username!r}")
        return AuthResult(success=False, message="Invalid credentials")

    def register(self, username: str, password: str, email: str | None = None) -> AuthResult:
        """Create an account and log it in.

        Fails without changing anything if the username is blank, the
        password is empty, or the username is taken.
        """
        username = (username or "").strip()
        if not username or not password:
            return AuthResult(success=False, message="Username and password are required")

        users = self.list_users()
        if any(u.username == username for u in users):
            return AuthResult(success=False, message="Username already exists")

        now = self._clock()
        user_id = int(now.timestamp() * 1000)
        last_id = max((u.id for u in users), default=0)
        user = User(
            id=max(user_id, last_id + 1),
            username=username,
            password=password,
            email=email or None,
            created_at=now,
        )
        users.append(user)
        self._gateway.set(USERS_KEY, _dump_users(users))
        self._set_current(user)
        logger.info(f"Registered user {username} (id={user.id})")
        return AuthResult(success=True, user=user)

    def logout(self) -> None:
        """Forget the logged-in user."""
        self._gateway.remove(CURRENT_USER_KEY)

    def _set_current(self, user: User) -> None:
        self._gateway.set(CURRENT_USER_KEY, user.model_dump_json(by_alias=True))


def _dump_users(users: list[User]) -> str:
    return json.dumps([u.model_dump(mode="json", by_alias=True) for u in users])
