"""Process-wide authentication context.

Lifecycle: ``init`` (load the persisted token) → ``authenticate`` (fetch
the staff identity behind the token) → ``clear`` (logout, or a ``401``
seen by ``ApiClient``).

The context is passed explicitly to whatever needs it (``ApiClient`` for
the bearer header, ``SaleRecorder`` for the staff id); nothing looks it
up implicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import structlog

from modules.core.exceptions import RemoteError, ValidationError

if TYPE_CHECKING:
    from modules.core.http import ApiClient

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UserInfo:
    """Identity returned by ``/me/token-info``."""

    id: int
    email: str


class TokenStore:
    """Persists the bearer token in a file between console sessions."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def load(self) -> Optional[str]:
        try:
            token = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.touch(mode=0o600, exist_ok=True)
        self._path.chmod(0o600)
        self._path.write_text(token, encoding="utf-8")

    def remove(self) -> None:
        self._path.unlink(missing_ok=True)


class SessionContext:
    """Bearer token plus the identity of the logged-in staff member."""

    def __init__(self, store: TokenStore) -> None:
        self._store = store
        self._token: Optional[str] = None
        self._user: Optional[UserInfo] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[UserInfo]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token) and self._user is not None

    @property
    def staff_id(self) -> Optional[int]:
        return self._user.id if self._user else None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Load the token persisted by a previous session, if any."""
        self._token = self._store.load()
        self._user = None
        logger.info("session.initialized", has_token=self._token is not None)

    def login(self, api: ApiClient, username: str, password: str) -> UserInfo:
        """Exchange credentials for a token, persist it and authenticate.

        Raises:
            ValidationError: blank credentials.
            RemoteError: the API rejected the credentials.
        """
        if not username.strip() or not password:
            raise ValidationError("Informe e-mail e senha.", field="username")

        payload = api.request(
            "login",
            "POST",
            "/token",
            data={"username": username, "password": password},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            fallback="Falha no login. Verifique suas credenciais.",
        )
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise RemoteError("login", fallback="Token não recebido da API.")

        self._token = token
        self._store.save(token)
        logger.info("session.logged_in")
        return self.authenticate(api)

    def authenticate(self, api: ApiClient) -> UserInfo:
        """Fetch the identity behind the current token.

        Any failure clears the session before the error propagates.

        Raises:
            ValidationError: there is no token to authenticate.
            RemoteError: the identity could not be fetched.
        """
        if not self._token:
            raise ValidationError("Nenhum token de acesso disponível.")
        try:
            payload = api.get("fetch_user_info", "/me/token-info")
            user = UserInfo(id=int(payload["id"]), email=str(payload["sub"]))
        except RemoteError:
            logger.warning("session.authentication_failed")
            self.clear()
            raise
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("session.authentication_failed", error=str(exc))
            self.clear()
            raise RemoteError(
                "fetch_user_info",
                fallback="Resposta inválida ao buscar o usuário.",
            ) from exc

        self._user = user
        logger.info("session.authenticated", user_id=user.id)
        return user

    def clear(self) -> None:
        """Forget the token and the identity (logout or ``401``)."""
        self._token = None
        self._user = None
        self._store.remove()
        logger.info("session.cleared")

    logout = clear
