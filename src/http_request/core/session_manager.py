# src/http_request/core/session_manager.py
"""
Thread-local requests.Session storage for HttpClient.

Each thread dispatches through its own Session, so distinct requests may
be sent concurrently from several threads.
"""
import threading
import weakref
from typing import Callable, Set

import requests


class ThreadSafeSessionManager:
    """
    Lazily creates one Session per thread and closes all of them on demand.

    Example:
        >>> manager = ThreadSafeSessionManager(requests.Session)
        >>> session = manager.get_session()
        >>> manager.close_all()
    """

    def __init__(self, session_factory: Callable[[], requests.Session]):
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: Set[weakref.ref] = set()
        self._lock = threading.Lock()

    def get_session(self) -> requests.Session:
        """Session of the current thread (created on first use)."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._lock:
                self._sessions.add(weakref.ref(session, self._forget))
        return session

    def _forget(self, ref: weakref.ref) -> None:
        with self._lock:
            self._sessions.discard(ref)

    def close_all(self) -> None:
        """Close the sessions of every thread. Safe to call repeatedly."""
        self._local.session = None
        with self._lock:
            refs = list(self._sessions)
            self._sessions.clear()
        for ref in refs:
            session = ref()
            if session is not None:
                session.close()

    def get_active_sessions_count(self) -> int:
        with self._lock:
            return sum(1 for ref in self._sessions if ref() is not None)
