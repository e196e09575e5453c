"""
Nós Reset e Negação — descartam a tarefa em andamento sem apagar o histórico
nem os artefatos já gerados.
"""

from __future__ import annotations

import logging

from assistente.nodes.helpers import append_user_marker, generation_context, working_copy
from assistente.oracles import Oracles
from assistente.schemas import GraphState, Intent, SituationTag

logger = logging.getLogger(__name__)

RESET_MARKER = "[Usuário solicitou reiniciar conversa]"


def reset_node(state: GraphState, oracles: Oracles) -> dict:
    """Comando de saída (ou intenção `sair`): zera a tarefa e recomeça."""
    context = working_copy(state)
    abandoned = context.current_intent
    append_user_marker(context, RESET_MARKER)
    context.reset_keeping_history()
    logger.info(
        f"[{state.session_id}] Conversa reiniciada (tarefa anterior: "
        f"{abandoned.value if abandoned else 'nenhuma'})"
    )

    reply = oracles.generate(
        state.session_id,
        SituationTag.sair,
        generation_context(
            context,
            state.user_input,
            previous_task=abandoned.value if abandoned else None,
        ),
    )
    return {"context": context, "reply": reply, "resolved_intent": Intent.sair}


def negation_node(state: GraphState, oracles: Oracles) -> dict:
    """Recusa enquanto uma pergunta de slot estava pendente."""
    context = working_copy(state)
    abandoned = context.current_intent
    context.reset_keeping_history()

    reply = oracles.generate(
        state.session_id,
        SituationTag.negacao,
        generation_context(
            context,
            state.user_input,
            previous_task=abandoned.value if abandoned else None,
        ),
    )
    return {"context": context, "reply": reply}
