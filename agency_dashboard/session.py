"""Session provider - the single owner of the persisted token and agency id."""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Protocol

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Session:
    """Authenticated principal as stored on the client."""

    token: str | None = None
    agency_id: str | None = None
    agency_name: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


EMPTY_SESSION = Session()

Listener = Callable[[Session], None]


class SessionStore(Protocol):
    """Persistence backend for the session."""

    def load(self) -> Session: ...

    def save(self, session: Session) -> None: ...

    def delete(self) -> None: ...


class MemorySessionStore:
    """Keeps the session in process memory only."""

    def __init__(self, session: Session | None = None):
        self._session = session or EMPTY_SESSION

    def load(self) -> Session:
        return self._session

    def save(self, session: Session) -> None:
        self._session = session

    def delete(self) -> None:
        self._session = EMPTY_SESSION


class FileSessionStore:
    """Persists the session as a small JSON document.

    A missing or unreadable file is an empty session.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> Session:
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            return EMPTY_SESSION
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("session_file_unreadable", path=str(self.path), error=str(e))
            return EMPTY_SESSION

        if not isinstance(raw, dict):
            return EMPTY_SESSION
        return Session(
            token=raw.get("token"),
            agency_id=raw.get("agency_id"),
            agency_name=raw.get("agency_name"),
        )

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(asdict(session), f)

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)


class SessionProvider:
    """Explicit read/write/clear access to the session with change notification.

    Usage:
        provider = SessionProvider(FileSessionStore(settings.SESSION_PATH))
        unsubscribe = provider.subscribe(lambda s: ...)
        provider.write(Session(token="...", agency_id="..."))
    """

    def __init__(self, store: SessionStore | None = None):
        self._store = store or MemorySessionStore()
        self._current = self._store.load()
        self._listeners: list[Listener] = []

    def read(self) -> Session:
        return self._current

    @property
    def token(self) -> str | None:
        return self._current.token

    @property
    def agency_id(self) -> str | None:
        return self._current.agency_id

    def write(self, session: Session) -> None:
        self._store.save(session)
        self._current = session
        self._notify()

    def clear(self) -> None:
        """Drop the session. Listeners are notified only if one existed."""
        had_session = self._current != EMPTY_SESSION
        self._store.delete()
        self._current = EMPTY_SESSION
        if had_session:
            logger.info("session_cleared")
            self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_cleared(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Subscribe `callback` to sign-outs only (logout, 401 anywhere)."""

        def listener(session: Session) -> None:
            if not session.is_authenticated:
                callback()

        return self.subscribe(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._current)
