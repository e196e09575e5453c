"""
Resolução de intenção: decide se o candidato do classificador substitui a
intenção ativa da conversa.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple, Optional

from assistente.chat_log import ChatLogger
from assistente.config import INTENT_OVERRIDE_THRESHOLD
from assistente.schemas import Intent, IntentCandidate, SessionContext

logger = logging.getLogger(__name__)

# Intenções que não representam uma tarefa em andamento
PASSIVE_INTENTS = frozenset({Intent.saudacao, Intent.despedida, Intent.unclear})

# Tarefas com coleta de slots própria
TASK_INTENTS = frozenset({Intent.plano_aula, Intent.planejamento_semanal})

# Intenções que respondem e devolvem a conversa à tarefa anterior
ANSWER_INTENTS = frozenset({Intent.tira_duvidas, Intent.reflexao_pedagogica})

# Intenções retomadas depois de uma pergunta ou de um "sim"
RESUMABLE_INTENTS = TASK_INTENTS | {Intent.revisar_plano}


class Resolution(NamedTuple):
    intent: Intent
    confidence: float
    kept: bool


def has_active_task(
    current_intent: Optional[Intent],
    collected_data: dict[str, Any],
    waiting_for: Optional[str] = None,
) -> bool:
    """Há tarefa em andamento: slots coletados ou uma pergunta aguardando resposta."""
    return (
        current_intent is not None
        and current_intent not in PASSIVE_INTENTS
        and (bool(collected_data) or waiting_for is not None)
    )


def resolve_intent(
    candidate: IntentCandidate,
    current_intent: Optional[Intent],
    current_confidence: float,
    collected_data: dict[str, Any],
    waiting_for: Optional[str] = None,
    threshold: float = INTENT_OVERRIDE_THRESHOLD,
) -> Resolution:
    """Mantém a tarefa em andamento contra candidatos fracos ou `unclear`."""
    if has_active_task(current_intent, collected_data, waiting_for):
        if candidate.confidence < threshold or candidate.intent == Intent.unclear:
            return Resolution(current_intent, current_confidence, kept=True)
    return Resolution(candidate.intent, candidate.confidence, kept=False)


def switches_task(previous: Optional[Intent], new: Intent) -> bool:
    """Troca entre duas tarefas diferentes invalida os slots coletados."""
    return previous in TASK_INTENTS and new in TASK_INTENTS and previous != new


def apply_intent(context: SessionContext, intent: Intent, confidence: float) -> None:
    """Grava a intenção no contexto, registrando o progresso perdido numa troca."""
    previous = context.current_intent
    if previous is not None and previous != intent and context.collected_data:
        logger.info(
            f"[{context.session_id}] Intenção mudou de '{previous.value}' para "
            f"'{intent.value}' com dados coletados: {sorted(context.collected_data)}"
        )
        ChatLogger.log_data_collection(context.session_id, previous.value, context.collected_data)

    if switches_task(previous, intent):
        context.collected_data = {}
        context.waiting_for = None
        context.last_bot_question = None

    context.set_intent(intent, confidence)
