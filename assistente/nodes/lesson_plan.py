"""
Nó Plano de Aula — coleta ano e tema (ou habilidade BNCC) e gera o plano.

Cada turno mescla o que o extrator encontrou. Enquanto faltar algo, pergunta
pelo primeiro campo faltante; com tudo preenchido, gera o plano, guarda o
artefato e reseta a tarefa preservando os artefatos.
"""

from __future__ import annotations

import logging

from assistente.artifacts import format_plan_reply, pdf_download_url
from assistente.chat_log import ChatLogger
from assistente.fallbacks import fallback_for
from assistente.nodes.helpers import ask_for_missing, generation_context, working_copy
from assistente.oracles import Oracles
from assistente.schemas import GraphState, Intent, SideEffects, SituationTag
from assistente.slots import detect_difficulty, lesson_plan_payload, merge_slots, missing_lesson_plan_fields

logger = logging.getLogger(__name__)


def lesson_plan_node(state: GraphState, oracles: Oracles) -> dict:
    context = working_copy(state)
    session_id = state.session_id

    extracted = oracles.extract(session_id, state.user_input, Intent.plano_aula, context.collected_data)
    changed = merge_slots(context.collected_data, extracted)

    if not context.collected_data.get("nivel_dificuldade"):
        difficulty = detect_difficulty(state.user_input)
        if difficulty:
            context.collected_data["nivel_dificuldade"] = difficulty
            changed.append("nivel_dificuldade")

    if changed:
        ChatLogger.log_data_collection(session_id, Intent.plano_aula.value, context.collected_data)

    missing = missing_lesson_plan_fields(context.collected_data)
    if missing:
        reply = ask_for_missing(state, context, oracles, Intent.plano_aula, missing)
        return {"context": context, "reply": reply}

    payload = lesson_plan_payload(context.collected_data)
    logger.info(f"[{session_id}] Gerando plano de aula: {payload}")

    plan = oracles.try_generate(
        session_id,
        SituationTag.plano_aula,
        generation_context(context, state.user_input, dados=payload),
    )
    if plan is None:
        # Slots ficam na sessão; o professor pode pedir de novo
        context.waiting_for = None
        return {"context": context, "reply": fallback_for(SituationTag.plano_aula)}

    context.artifacts.last_plano_content = plan
    context.artifacts.last_plano_data = payload

    intro = oracles.generate(
        session_id,
        SituationTag.plano_concluido,
        generation_context(context, state.user_input, dados=payload),
    )
    context.reset_keeping_history()

    return {
        "context": context,
        "reply": format_plan_reply(intro, plan),
        "side_effects": SideEffects(pdf_url=pdf_download_url(session_id)),
    }
