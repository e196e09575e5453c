"""
Nó Respond — último nó de todos os caminhos. Registra a resposta do bot no
histórico e no log de conversa. Não gera linguagem natural.
"""

from __future__ import annotations

from assistente.chat_log import ChatLogger
from assistente.config import HISTORY_LIMIT
from assistente.fallbacks import GENERIC_ERROR
from assistente.nodes.helpers import working_copy
from assistente.schemas import GraphState, Message, Sender


def respond_node(state: GraphState) -> dict:
    context = working_copy(state)
    reply = state.reply or GENERIC_ERROR

    video = state.side_effects.video
    context.append_message(
        Message(text=reply, sender=Sender.bot, video_url=video.url if video else None),
        HISTORY_LIMIT,
    )
    ChatLogger.log_conversation(state.session_id, state.user_input, reply)
    return {"context": context, "reply": reply}
