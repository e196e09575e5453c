"""
Nó Intake — ponto de entrada. Registra a mensagem no histórico e detecta
comandos (sair, negação, pdf). Sem LLM.
"""

from __future__ import annotations

import logging

from assistente.commands import cancels_pending_question, detect_command
from assistente.config import HISTORY_LIMIT
from assistente.nodes.helpers import working_copy
from assistente.schemas import GraphState, Message, Sender, SideEffects

logger = logging.getLogger(__name__)


def intake_node(state: GraphState) -> dict:
    """Registra a mensagem do usuário no histórico."""
    context = working_copy(state)
    context.append_message(
        Message(text=state.user_input, sender=Sender.user, type=state.message_type),
        HISTORY_LIMIT,
    )
    command = detect_command(state.user_input, context.waiting_for)
    if command is None and cancels_pending_question(state.user_input, context.waiting_for):
        logger.info(f"[{state.session_id}] Pergunta pendente '{context.waiting_for}' cancelada")
        context.waiting_for = None
        context.last_bot_question = None
    return {
        "context": context,
        "command": command,
        "route": None,
        "reply": "",
        "side_effects": SideEffects(),
    }
