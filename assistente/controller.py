"""
Controller do diálogo — um turno completo por chamada.

Segura o lock da sessão durante o turno inteiro, roda o grafo sobre uma cópia
do contexto e só grava no store se o turno terminar sem exceção.
"""

from __future__ import annotations

import logging
from typing import Optional

from assistente.chat_log import ChatLogger
from assistente.fallbacks import GENERIC_ERROR
from assistente.graph import build_graph
from assistente.oracles import Oracles
from assistente.schemas import (
    GraphState,
    Message,
    MessageType,
    ProcessResult,
    Sender,
    SessionContext,
)
from assistente.session import SessionStore

logger = logging.getLogger(__name__)


class DialogueController:
    def __init__(self, store: SessionStore, oracles: Oracles):
        self.store = store
        self.oracles = oracles
        self.graph = build_graph(oracles)

    def process_message(
        self,
        message: str,
        session_id: str,
        message_type: MessageType = MessageType.text,
    ) -> ProcessResult:
        """Processa uma mensagem do professor e devolve a resposta do turno."""
        with self.store.lock(session_id):
            context = self.store.get_or_create(session_id)
            logger.info(f"[{session_id}] User: {message}")

            state = GraphState(
                session_id=session_id,
                user_input=message,
                message_type=message_type,
                context=context,
            )
            try:
                result = GraphState(**self.graph.invoke(state.model_dump()))
            except Exception as e:
                logger.exception(f"[{session_id}] Erro ao processar mensagem: {e}")
                ChatLogger.log_error(session_id, e, {"context": "process_message", "message": message})
                self._record_failed_turn(session_id, message, message_type)
                return ProcessResult(session_id=session_id, text=GENERIC_ERROR)

            if result.clear_session:
                self.store.clear(session_id)
                logger.info(f"[{session_id}] Sessão encerrada pela despedida")
            else:
                self.store.save(result.context)

        logger.info(
            f"[{session_id}] Intent={result.resolved_intent.value if result.resolved_intent else 'N/A'} "
            f"Command={result.command.value if result.command else 'N/A'}"
        )
        return ProcessResult(
            session_id=session_id,
            text=result.reply,
            intent=result.resolved_intent,
            side_effects=result.side_effects,
        )

    def _record_failed_turn(self, session_id: str, message: str, message_type: MessageType) -> None:
        # Estado de intenção/slots do turno é descartado; só o diálogo fica
        self.store.touch(session_id)
        self.store.append_message(session_id, Message(text=message, sender=Sender.user, type=message_type))
        self.store.append_message(session_id, Message(text=GENERIC_ERROR, sender=Sender.bot))

    # ── Inspeção ──────────────────────────────────────────────────────

    def get_context(self, session_id: str) -> Optional[SessionContext]:
        return self.store.get(session_id)

    def get_history(self, session_id: str) -> list[Message]:
        context = self.store.get(session_id)
        return context.conversation_history if context else []

    def clear_context(self, session_id: str) -> None:
        self.store.clear(session_id)
        logger.info(f"[{session_id}] Contexto limpo")
