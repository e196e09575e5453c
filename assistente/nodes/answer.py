"""
Nó Answer — dúvidas educacionais e reflexões pedagógicas.

Se havia uma tarefa em andamento antes da pergunta, a intenção dela é
restaurada para que a coleta de slots continue no próximo turno.
"""

from __future__ import annotations

from assistente.intents import RESUMABLE_INTENTS
from assistente.nodes.helpers import generation_context, working_copy
from assistente.oracles import Oracles
from assistente.schemas import GraphState, Intent, SessionContext, SituationTag


def answer_question(state: GraphState, context: SessionContext, oracles: Oracles, tag: SituationTag) -> str:
    return oracles.generate(
        state.session_id,
        tag,
        generation_context(context, state.user_input, question=state.user_input),
    )


def answer_node(state: GraphState, oracles: Oracles) -> dict:
    context = working_copy(state)
    tag = (
        SituationTag.reflexao_pedagogica
        if context.current_intent == Intent.reflexao_pedagogica
        else SituationTag.tira_duvidas
    )
    reply = answer_question(state, context, oracles, tag)

    previous = state.previous_intent
    if previous in RESUMABLE_INTENTS and (context.collected_data or context.waiting_for):
        context.set_intent(previous, state.previous_confidence)

    return {"context": context, "reply": reply}
