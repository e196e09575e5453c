"""
Log de auditoria da conversa (intenções, trocas, coleta de dados, erros).

Separado do logging operacional: pode ser ligado/desligado em tempo de
execução pela rota /logs sem afetar os logs do servidor.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from assistente.config import ENABLE_LOGS

logger = logging.getLogger("assistente.chat")


class ChatLogger:
    enabled: bool = ENABLE_LOGS

    @classmethod
    def set_enabled(cls, enabled: bool) -> None:
        cls.enabled = enabled

    @classmethod
    def is_enabled(cls) -> bool:
        return cls.enabled

    @classmethod
    def log_intent(cls, session_id: str, intent: str, confidence: float, message: str) -> None:
        if not cls.enabled:
            return
        logger.info(
            f"[{session_id}] Intent detected: {intent} (confidence: {confidence:.2f})",
            extra={"session_id": session_id, "intent": intent, "original_message": message},
        )

    @classmethod
    def log_conversation(cls, session_id: str, user_message: str, bot_response: str) -> None:
        if not cls.enabled:
            return
        logger.info(
            f"[{session_id}] Conversation exchange",
            extra={"session_id": session_id, "user_message": user_message, "bot_response": bot_response},
        )

    @classmethod
    def log_data_collection(
        cls,
        session_id: str,
        intent: Optional[str],
        collected_data: dict[str, Any],
        missing: Optional[list[str]] = None,
    ) -> None:
        if not cls.enabled:
            return
        logger.info(
            f"[{session_id}] Data collection for {intent or 'unknown'}: "
            f"collected={sorted(collected_data)} missing={missing or []}",
            extra={"session_id": session_id, "intent": intent},
        )

    @classmethod
    def log_error(cls, session_id: str, error: BaseException, context: Optional[dict[str, Any]] = None) -> None:
        if not cls.enabled:
            return
        logger.error(
            f"[{session_id}] Error: {error}",
            exc_info=error,
            extra={"session_id": session_id, "error_context": context or {}},
        )
