"""
Nó Classification — consulta o classificador e aplica a política de
substituição de intenção.

Única responsabilidade: decidir a intenção do turno e o handler. NÃO gera
linguagem natural e não extrai slots.
"""

from __future__ import annotations

import logging

from assistente.config import CLASSIFIER_HISTORY_SIZE
from assistente.intents import apply_intent, resolve_intent
from assistente.nodes.helpers import working_copy
from assistente.nodes.routing import route_for
from assistente.oracles import Oracles
from assistente.schemas import GraphState

logger = logging.getLogger(__name__)


def classification_node(state: GraphState, oracles: Oracles) -> dict:
    context = working_copy(state)
    session_id = state.session_id

    # A mensagem atual já está no histórico (intake); o classificador a recebe à parte
    history = context.recent_messages(CLASSIFIER_HISTORY_SIZE + 1)[:-1]
    candidate = oracles.classify(session_id, state.user_input, history, context.current_intent)

    previous = context.current_intent
    previous_confidence = context.intent_confidence
    resolution = resolve_intent(
        candidate,
        previous,
        previous_confidence,
        context.collected_data,
        context.waiting_for,
    )

    if resolution.kept:
        logger.info(
            f"[{session_id}] Mantendo '{previous.value}' "
            f"(candidato '{candidate.intent.value}' com {candidate.confidence:.2f})"
        )
    apply_intent(context, resolution.intent, resolution.confidence)

    return {
        "context": context,
        "candidate": candidate,
        "resolved_intent": resolution.intent,
        "previous_intent": previous,
        "previous_confidence": previous_confidence,
        "route": route_for(resolution.intent),
    }
