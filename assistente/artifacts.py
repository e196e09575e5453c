"""
Artefatos gerados: formatação das respostas com plano e busca do último plano.

O plano é embutido na resposta entre dois marcadores estáveis. Isso permite
recuperar o conteúdo pelo histórico quando o artefato não está na sessão.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from assistente.config import PDF_DOWNLOAD_PATH
from assistente.schemas import SessionContext, Sender

PLAN_START_MARKER = "### Plano de Aula"
PLAN_END_MARKER = "📄 Prontinho! Aqui está o seu plano de aula."
SCHEDULE_START_MARKER = "### Planejamento Semanal"


class FoundPlan(NamedTuple):
    content: str
    from_history: bool


def format_plan_reply(intro: str, plan: str, outro: str = "") -> str:
    parts = [intro.strip(), f"{PLAN_START_MARKER}\n\n{plan.strip()}", PLAN_END_MARKER]
    if outro.strip():
        parts.append(outro.strip())
    return "\n\n".join(part for part in parts if part)


def format_schedule_reply(intro: str, schedule: str) -> str:
    return f"{intro.strip()}\n\n{SCHEDULE_START_MARKER}\n\n{schedule.strip()}"


def extract_plan_content(text: str) -> Optional[str]:
    """Recorta o plano de uma resposta antiga: corta no marcador final e
    descarta o que vem antes do marcador inicial."""
    content = text
    end = content.find(PLAN_END_MARKER)
    if end != -1:
        content = content[:end]
    start = content.find(PLAN_START_MARKER)
    if start != -1:
        content = content[start + len(PLAN_START_MARKER):]
    content = content.strip()
    return content or None


def _mentions_plan(text: str) -> bool:
    return PLAN_END_MARKER in text or PLAN_START_MARKER in text


def find_lesson_plan(context: SessionContext) -> Optional[FoundPlan]:
    """Artefato da sessão primeiro; depois a última mensagem do bot com plano."""
    if context.artifacts.last_plano_content:
        return FoundPlan(context.artifacts.last_plano_content, from_history=False)

    for message in reversed(context.conversation_history):
        if message.sender != Sender.bot or not _mentions_plan(message.text):
            continue
        content = extract_plan_content(message.text)
        if content:
            return FoundPlan(content, from_history=True)
    return None


def pdf_download_url(session_id: str) -> str:
    return f"{PDF_DOWNLOAD_PATH}?session_id={session_id}"
