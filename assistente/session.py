"""
Gerenciador de sessões — mantém o SessionContext entre turnos.
Em produção, troque por Redis ou PostgreSQL.

Concorrência: o dicionário é protegido por um lock global (get-or-create
atômico) e cada sessão tem um RLock próprio. O controller segura o lock da
sessão durante o turno inteiro, então turnos da mesma sessão são serializados.

Os nós do grafo mutam a cópia de trabalho do turno e gravam com `save`. Os
mutadores individuais (`set_collected_field`, `update_intent`, ...) servem à
superfície de administração e inspeção.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Iterable, Iterator, Optional

from assistente.chat_log import ChatLogger
from assistente.config import HISTORY_LIMIT, SESSION_TTL_MINUTES
from assistente.intents import apply_intent
from assistente.schemas import (
    ARTIFACT_KEYS,
    Intent,
    Message,
    SessionContext,
    utcnow,
)

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory session store."""

    def __init__(self, history_limit: int = HISTORY_LIMIT):
        self.history_limit = history_limit
        self._sessions: dict[str, SessionContext] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    # ── Locks ─────────────────────────────────────────────────────────

    def _lock_for(self, session_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = self._locks[session_id] = threading.RLock()
            return lock

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        """Serializa tudo que acontece numa sessão enquanto o bloco roda."""
        with self._lock_for(session_id):
            yield

    def _live(self, session_id: str) -> SessionContext:
        with self._guard:
            context = self._sessions.get(session_id)
            if context is None:
                context = self._sessions[session_id] = SessionContext(session_id=session_id)
            return context

    # ── Leitura ───────────────────────────────────────────────────────

    def get_or_create(self, session_id: str) -> SessionContext:
        """Retorna uma cópia do contexto, criando-o se necessário."""
        with self.lock(session_id):
            context = self._live(session_id)
            context.touch()
            return context.model_copy(deep=True)

    def get_history(self, session_id: str) -> list[Message]:
        return self.get_or_create(session_id).conversation_history

    def exists(self, session_id: str) -> bool:
        with self._guard:
            return session_id in self._sessions

    def list_sessions(self) -> list[str]:
        with self._guard:
            return list(self._sessions.keys())

    # ── Escrita ───────────────────────────────────────────────────────

    def save(self, context: SessionContext) -> None:
        """Grava a cópia de trabalho de um turno."""
        with self.lock(context.session_id):
            context.touch()
            if len(context.conversation_history) > self.history_limit:
                context.conversation_history = context.conversation_history[-self.history_limit:]
            with self._guard:
                self._sessions[context.session_id] = context.model_copy(deep=True)

    def touch(self, session_id: str) -> None:
        with self.lock(session_id):
            self._live(session_id).touch()

    def append_message(self, session_id: str, message: Message) -> None:
        with self.lock(session_id):
            self._live(session_id).append_message(message, self.history_limit)

    def set_collected_field(self, session_id: str, key: str, value: Any) -> None:
        with self.lock(session_id):
            context = self._live(session_id)
            context.set_field(key, value)
            ChatLogger.log_data_collection(
                session_id,
                context.current_intent.value if context.current_intent else None,
                context.collected_data,
            )

    def update_intent(self, session_id: str, intent: Intent, confidence: float) -> None:
        with self.lock(session_id):
            apply_intent(self._live(session_id), intent, confidence)

    def set_waiting_for(self, session_id: str, field: str, question: str) -> None:
        with self.lock(session_id):
            context = self._live(session_id)
            context.waiting_for = field
            context.last_bot_question = question
            context.touch()

    def clear_waiting_for(self, session_id: str) -> None:
        with self.lock(session_id):
            context = self._live(session_id)
            context.waiting_for = None
            context.last_bot_question = None
            context.touch()

    def reset_keeping_history(
        self, session_id: str, preserve_keys: Iterable[str] = ARTIFACT_KEYS
    ) -> None:
        with self.lock(session_id):
            self._live(session_id).reset_keeping_history(preserve_keys)

    def clear(self, session_id: str) -> None:
        with self.lock(session_id):
            with self._guard:
                self._sessions.pop(session_id, None)
                self._locks.pop(session_id, None)

    # ── Expiração ─────────────────────────────────────────────────────

    def sweep_inactive(self, threshold_minutes: float = SESSION_TTL_MINUTES) -> int:
        """Remove sessões sem atividade; pula as que estão no meio de um turno."""
        cutoff = utcnow() - timedelta(minutes=threshold_minutes)
        removed = 0
        with self._guard:
            for session_id, context in list(self._sessions.items()):
                if context.last_activity >= cutoff:
                    continue
                lock = self._locks.get(session_id)
                if lock is not None and not lock.acquire(blocking=False):
                    continue
                try:
                    del self._sessions[session_id]
                    self._locks.pop(session_id, None)
                    removed += 1
                finally:
                    if lock is not None:
                        lock.release()
        if removed:
            logger.info(f"Sweep removeu {removed} sessão(ões) inativa(s)")
        return removed

    def get(self, session_id: str) -> Optional[SessionContext]:
        """Leitura sem criação, usada por inspeção/testes."""
        with self._guard:
            context = self._sessions.get(session_id)
            return context.model_copy(deep=True) if context else None
