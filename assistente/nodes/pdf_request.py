"""
Nó PDF — localiza o último plano de aula (sessão ou histórico) e devolve o
link de download. Sem plano, responde com orientação fixa, sem LLM.
"""

from __future__ import annotations

import logging

from assistente.artifacts import find_lesson_plan, pdf_download_url
from assistente.fallbacks import NO_PLAN_FOR_PDF
from assistente.nodes.helpers import generation_context, working_copy
from assistente.oracles import Oracles
from assistente.schemas import GraphState, SideEffects, SituationTag

logger = logging.getLogger(__name__)


def pdf_request_node(state: GraphState, oracles: Oracles) -> dict:
    context = working_copy(state)
    found = find_lesson_plan(context)
    if found is None:
        logger.info(f"[{state.session_id}] Pedido de PDF sem plano disponível")
        return {"context": context, "reply": NO_PLAN_FOR_PDF}

    if found.from_history:
        # Recuperado do histórico: passa a ser o artefato da sessão
        context.artifacts.last_plano_content = found.content

    url = pdf_download_url(state.session_id)
    suggestions = oracles.generate(
        state.session_id,
        SituationTag.pdf_pronto,
        generation_context(context, state.user_input, pdf_url=url),
    )
    reply = f"📄 Seu plano de aula em PDF está pronto! Baixe aqui: {url}\n\n{suggestions}"
    return {"context": context, "reply": reply, "side_effects": SideEffects(pdf_url=url)}
