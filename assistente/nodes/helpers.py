"""
Helpers compartilhados pelos nós: cópia de trabalho do contexto, contexto
para o gerador e pergunta de slot faltante.
"""

from __future__ import annotations

from typing import Any

from assistente.chat_log import ChatLogger
from assistente.config import GENERATOR_HISTORY_SIZE, HISTORY_LIMIT
from assistente.fallbacks import FALLBACK_QUESTIONS
from assistente.oracles import Oracles
from assistente.schemas import GraphState, Intent, Message, SessionContext, Sender, SituationTag
from assistente.slots import WAITING_TAGS


def working_copy(state: GraphState) -> SessionContext:
    """Nós nunca mutam o contexto recebido; trabalham numa cópia."""
    return state.context.model_copy(deep=True)


def history_payload(context: SessionContext, count: int = GENERATOR_HISTORY_SIZE) -> list[dict[str, str]]:
    return [
        {"sender": m.sender.value, "text": m.text}
        for m in context.recent_messages(count)
    ]


def generation_context(context: SessionContext, message: str, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "message": message,
        "history": history_payload(context),
        "current_intent": context.current_intent.value if context.current_intent else None,
        "collected_data": dict(context.collected_data),
        "has_plano": bool(context.artifacts.last_plano_content),
        "has_planejamento": bool(context.artifacts.last_planejamento_content),
    }
    payload.update(extra)
    return payload


def is_first_interaction(context: SessionContext) -> bool:
    return len(context.recent_messages(HISTORY_LIMIT, sender=Sender.user)) <= 1


def append_user_marker(context: SessionContext, text: str) -> None:
    context.append_message(Message(text=text, sender=Sender.user), HISTORY_LIMIT)


def ask_for_missing(
    state: GraphState,
    context: SessionContext,
    oracles: Oracles,
    intent: Intent,
    missing: list[str],
) -> str:
    """Pergunta pelo primeiro campo faltante e marca `waiting_for`."""
    field = missing[0]
    question = oracles.generate(
        state.session_id,
        SituationTag.pergunta_slot,
        generation_context(
            context,
            state.user_input,
            task=intent.value,
            missing_field=field,
            missing_fields=missing,
        ),
        fallback=FALLBACK_QUESTIONS.get(field),
    )
    context.waiting_for = WAITING_TAGS.get(field, field)
    context.last_bot_question = question
    ChatLogger.log_data_collection(state.session_id, intent.value, context.collected_data, missing)
    return question
