"""
Nó Continue — resolve um "sim"/"ok"/"vamos" para uma tarefa concreta.

Ordem: tarefa anterior com progresso → sugestão nas últimas mensagens do bot
→ pedir esclarecimento. Só define a rota; quem responde é o handler escolhido.
"""

from __future__ import annotations

import re
from typing import Optional

from assistente.config import CONTINUE_ADOPT_CONFIDENCE
from assistente.intents import RESUMABLE_INTENTS
from assistente.nodes.helpers import generation_context, working_copy
from assistente.nodes.routing import route_for
from assistente.oracles import Oracles
from assistente.schemas import GraphState, Intent, SessionContext, Sender, SituationTag

SUGGESTION_WINDOW = 3

# Avaliadas em ordem dentro de cada mensagem do bot
SUGGESTION_RULES: tuple[tuple[Intent, re.Pattern], ...] = (
    (Intent.plano_aula, re.compile(r"plano de aula")),
    (Intent.planejamento_semanal, re.compile(r"planejamento|semana|organizar")),
    (Intent.tira_duvidas, re.compile(r"dúvida|duvida|pergunta|esclarecer")),
)


def suggested_intent(context: SessionContext) -> Optional[Intent]:
    """Tarefa oferecida nas últimas mensagens do bot, da mais recente para a mais antiga."""
    bot_messages = context.recent_messages(SUGGESTION_WINDOW, sender=Sender.bot)
    for message in reversed(bot_messages):
        text = message.text.lower()
        for intent, pattern in SUGGESTION_RULES:
            if pattern.search(text):
                return intent
    return None


def continue_node(state: GraphState, oracles: Oracles) -> dict:
    context = working_copy(state)

    previous = state.previous_intent
    if previous in RESUMABLE_INTENTS and (context.collected_data or context.waiting_for):
        context.set_intent(previous, state.previous_confidence)
        return {"context": context, "resolved_intent": previous, "route": route_for(previous)}

    suggested = suggested_intent(context)
    if suggested is not None:
        context.set_intent(suggested, CONTINUE_ADOPT_CONFIDENCE)
        return {"context": context, "resolved_intent": suggested, "route": route_for(suggested)}

    reply = oracles.generate(
        state.session_id,
        SituationTag.continuar_sem_contexto,
        generation_context(context, state.user_input),
    )
    return {"context": context, "reply": reply, "route": "respond"}
