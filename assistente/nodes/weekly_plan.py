"""
Nó Planejamento Semanal — só a data de início é obrigatória.
"""

from __future__ import annotations

import logging

from assistente.artifacts import format_schedule_reply
from assistente.chat_log import ChatLogger
from assistente.fallbacks import fallback_for
from assistente.nodes.helpers import ask_for_missing, generation_context, working_copy
from assistente.oracles import Oracles
from assistente.schemas import GraphState, Intent, SituationTag
from assistente.slots import merge_slots, missing_weekly_plan_fields, weekly_plan_payload

logger = logging.getLogger(__name__)


def weekly_plan_node(state: GraphState, oracles: Oracles) -> dict:
    context = working_copy(state)
    session_id = state.session_id

    extracted = oracles.extract(
        session_id, state.user_input, Intent.planejamento_semanal, context.collected_data
    )
    if merge_slots(context.collected_data, extracted):
        ChatLogger.log_data_collection(
            session_id, Intent.planejamento_semanal.value, context.collected_data
        )

    missing = missing_weekly_plan_fields(context.collected_data)
    if missing:
        reply = ask_for_missing(state, context, oracles, Intent.planejamento_semanal, missing)
        return {"context": context, "reply": reply}

    payload = weekly_plan_payload(context.collected_data)
    logger.info(f"[{session_id}] Gerando planejamento semanal: {payload}")

    schedule = oracles.try_generate(
        session_id,
        SituationTag.planejamento_semanal,
        generation_context(context, state.user_input, dados=payload),
    )
    if schedule is None:
        context.waiting_for = None
        return {"context": context, "reply": fallback_for(SituationTag.planejamento_semanal)}

    context.artifacts.last_planejamento_content = schedule
    context.artifacts.last_planejamento_data = payload

    intro = oracles.generate(
        session_id,
        SituationTag.planejamento_concluido,
        generation_context(context, state.user_input, dados=payload),
    )
    context.reset_keeping_history()
    return {"context": context, "reply": format_schedule_reply(intro, schedule)}
