"""
Session-keyed conversation history for simulated workflow execution.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

DEFAULT_MAX_MESSAGES = 20


@dataclass
class _SessionLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class ConversationStore:
    """
    In-process history store, one chat history per session id.

    Histories are created on first use, emptied on request, and trimmed to
    the newest ``max_messages`` entries once a session scope closes, so an
    exchange appended inside one scope is never cut in half. Mutations of
    one session are serialized by that session's lock; different sessions
    do not share a lock. A session lock is dropped as soon as no caller
    holds or waits for it and the session has no history left.
    """

    def __init__(self, max_messages: int = DEFAULT_MAX_MESSAGES) -> None:
        if max_messages < 2:
            raise ValueError("max_messages must be >= 2")
        self.max_messages = max_messages
        self._histories: Dict[str, List[BaseMessage]] = {}
        self._session_locks: Dict[str, _SessionLock] = {}
        self._lock = threading.Lock()

    @contextmanager
    def _locked(self, session_id: str) -> Iterator[None]:
        with self._lock:
            entry = self._session_locks.get(session_id)
            if entry is None:
                entry = _SessionLock()
                self._session_locks[session_id] = entry
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._lock:
                entry.users -= 1
                if entry.users == 0 and session_id not in self._histories:
                    self._session_locks.pop(session_id, None)

    def _history(self, session_id: str) -> List[BaseMessage]:
        with self._lock:
            history = self._histories.get(session_id)
            if history is None:
                history = []
                self._histories[session_id] = history
            return history

    def _trim(self, history: List[BaseMessage]) -> None:
        overflow = len(history) - self.max_messages
        if overflow > 0:
            del history[:overflow]

    @contextmanager
    def session(self, session_id: str) -> Iterator[List[BaseMessage]]:
        with self._locked(session_id):
            history = self._history(session_id)
            try:
                yield history
            finally:
                self._trim(history)

    def append_exchange(self, session_id: str, user_message: str, ai_message: str) -> None:
        with self.session(session_id) as history:
            history.append(HumanMessage(content=user_message))
            history.append(AIMessage(content=ai_message))

    def messages(self, session_id: str) -> List[BaseMessage]:
        with self._locked(session_id):
            with self._lock:
                history = self._histories.get(session_id)
            return list(history) if history else []

    def clear(self, session_id: str) -> None:
        with self._locked(session_id):
            with self._lock:
                history = self._histories.get(session_id)
            if history is not None:
                del history[:]

    def forget(self, session_id: str) -> None:
        """Drop the session entirely, history and lock included."""
        with self._locked(session_id):
            with self._lock:
                self._histories.pop(session_id, None)

    def sessions(self) -> List[str]:
        with self._lock:
            return sorted(self._histories)

    def tracked_locks(self) -> int:
        with self._lock:
            return len(self._session_locks)
