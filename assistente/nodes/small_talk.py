"""
Nós de conversa geral: saudação, despedida e mensagens sem intenção clara.
"""

from __future__ import annotations

import re

from assistente.commands import is_negation, normalize
from assistente.config import VIDEO_ROUTE
from assistente.nodes.answer import answer_question
from assistente.nodes.helpers import generation_context, is_first_interaction, working_copy
from assistente.oracles import Oracles
from assistente.schemas import GraphState, SideEffects, SituationTag, VideoRef

GREETING_VIDEO = "saudacao"

_QUESTION_WORDS = re.compile(r"\b(como|qual|quais|quando|onde|por que|porque|o que|quem|quanto)\b")


def looks_like_question(message: str) -> bool:
    return "?" in message or bool(_QUESTION_WORDS.search(message.lower()))


def greeting_node(state: GraphState, oracles: Oracles) -> dict:
    """Na primeira interação, a resposta leva o vídeo de boas-vindas."""
    context = working_copy(state)
    first = is_first_interaction(context)

    reply = oracles.generate(
        state.session_id,
        SituationTag.saudacao,
        generation_context(context, state.user_input, is_first_interaction=first),
    )

    side_effects = SideEffects()
    if first:
        side_effects.video = VideoRef(
            kind=GREETING_VIDEO,
            url=f"{VIDEO_ROUTE}?type={GREETING_VIDEO}",
        )
    return {"context": context, "reply": reply, "side_effects": side_effects}


def farewell_node(state: GraphState, oracles: Oracles) -> dict:
    """Despedida encerra a sessão: o controller descarta o contexto."""
    context = working_copy(state)
    reply = oracles.generate(
        state.session_id,
        SituationTag.despedida,
        generation_context(context, state.user_input),
    )
    return {"context": context, "reply": reply, "clear_session": True}


def unclear_node(state: GraphState, oracles: Oracles) -> dict:
    context = working_copy(state)

    if is_negation(normalize(state.user_input)):
        tag = SituationTag.negacao
    elif looks_like_question(state.user_input):
        return {
            "context": context,
            "reply": answer_question(state, context, oracles, SituationTag.tira_duvidas),
        }
    else:
        tag = SituationTag.unclear_intent

    reply = oracles.generate(
        state.session_id,
        tag,
        generation_context(context, state.user_input),
    )
    return {"context": context, "reply": reply}
