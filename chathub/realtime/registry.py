from __future__ import annotations

import random
from dataclasses import dataclass
from threading import Lock


@dataclass(frozen=True)
class Session:
    sid: str
    username: str


@dataclass(frozen=True)
class RegistryView:
    """Consistent copy of the registry taken under a single lock acquisition."""

    sids: tuple[str, ...]
    users: tuple[str, ...]


class SessionRegistry:
    """Live Socket.IO connections and the display names assigned to them.

    All access goes through the lock, so it is safe to call from the event loop
    and from Django's sync worker threads alike. Dicts keep insertion order,
    which is the join order.
    """

    def __init__(self, rng: random.Random | None = None):
        self._lock = Lock()
        self._sessions: dict[str, Session] = {}
        self._rng = rng or random.Random()  # noqa: S311 - display names only

    def _generate_name(self) -> str:
        return f"User{self._rng.randrange(1000, 9999)}"

    def register(self, sid: str) -> str:
        with self._lock:
            existing = self._sessions.get(sid)
            if existing is not None:
                return existing.username
            session = Session(sid=sid, username=self._generate_name())
            self._sessions[sid] = session
            return session.username

    def unregister(self, sid: str) -> str | None:
        with self._lock:
            session = self._sessions.pop(sid, None)
        return session.username if session else None

    def lookup(self, sid: str) -> str | None:
        with self._lock:
            session = self._sessions.get(sid)
        return session.username if session else None

    def snapshot(self) -> list[str]:
        with self._lock:
            return [s.username for s in self._sessions.values()]

    def view(self) -> RegistryView:
        with self._lock:
            sessions = list(self._sessions.values())
        return RegistryView(
            sids=tuple(s.sid for s in sessions),
            users=tuple(s.username for s in sessions),
        )

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __contains__(self, sid: object) -> bool:
        with self._lock:
            return sid in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


registry = SessionRegistry()
