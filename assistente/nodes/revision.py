"""
Nó Revisão — ajusta o último plano de aula (ano, tema, dificuldade).

Dificuldade e ano vêm de regras sobre a mensagem; o tema vem do extrator.
Sem nenhuma alteração reconhecida, pergunta o que mudar.
"""

from __future__ import annotations

import logging
from typing import Any

from assistente.artifacts import find_lesson_plan, format_plan_reply, pdf_download_url
from assistente.fallbacks import NO_PLAN_FOR_REVISION, fallback_for
from assistente.nodes.helpers import generation_context, working_copy
from assistente.oracles import Oracles
from assistente.schemas import GraphState, Intent, SideEffects, SituationTag
from assistente.slots import detect_difficulty, detect_grade, lesson_plan_payload

logger = logging.getLogger(__name__)

WAITING_REVISION = "revisao"


def revision_changes(message: str, extracted: dict[str, Any]) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    difficulty = detect_difficulty(message)
    if difficulty:
        changes["nivel_dificuldade"] = difficulty
    grade = detect_grade(message)
    if grade:
        changes["ano"] = grade
    theme = extracted.get("tema")
    if isinstance(theme, str) and theme.strip():
        changes["tema"] = theme.strip()
    return changes


def revision_node(state: GraphState, oracles: Oracles) -> dict:
    context = working_copy(state)
    session_id = state.session_id

    found = find_lesson_plan(context)
    if found is None:
        context.waiting_for = None
        return {"context": context, "reply": NO_PLAN_FOR_REVISION}

    base = dict(context.artifacts.last_plano_data or {})
    extracted = oracles.extract(session_id, state.user_input, Intent.revisar_plano, base)
    changes = revision_changes(state.user_input, extracted)

    if not changes:
        question = oracles.generate(
            session_id,
            SituationTag.revisao_sem_alteracao,
            generation_context(context, state.user_input, dados_atuais=base),
        )
        context.waiting_for = WAITING_REVISION
        context.last_bot_question = question
        return {"context": context, "reply": question}

    merged = lesson_plan_payload({**base, **changes})
    logger.info(f"[{session_id}] Revisando plano: alterações={changes}")

    plan = oracles.try_generate(
        session_id,
        SituationTag.plano_aula,
        generation_context(
            context,
            state.user_input,
            dados=merged,
            alteracoes=changes,
            plano_anterior=found.content,
        ),
    )
    if plan is None:
        return {"context": context, "reply": fallback_for(SituationTag.plano_aula)}

    context.artifacts.last_plano_content = plan
    context.artifacts.last_plano_data = merged

    intro = oracles.generate(
        session_id,
        SituationTag.plano_revisado,
        generation_context(context, state.user_input, alteracoes=changes),
    )
    context.reset_keeping_history()

    return {
        "context": context,
        "reply": format_plan_reply(intro, plan),
        "side_effects": SideEffects(pdf_url=pdf_download_url(session_id)),
    }
