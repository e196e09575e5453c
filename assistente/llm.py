"""
Implementações dos oráculos de texto sobre LangChain (ChatOpenAI).

Classificador e extrator devolvem dados estruturados (JSON da LLM).
O gerador devolve linguagem natural no tom de voz configurado.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from assistente.config import (
    ASSISTANT_PERSONA,
    GENERATOR_HISTORY_SIZE,
    KEYWORD_FALLBACK_THRESHOLD,
    TASK_REGISTRY,
    get_classifier_llm,
    get_llm,
)
from assistente.prompts import (
    CLASSIFICATION_PROMPT,
    EXTRACTION_PROMPT,
    GENERATION_PROMPT,
    SITUATION_INSTRUCTIONS,
)
from assistente.schemas import Intent, IntentCandidate, Message, Sender, SituationTag

logger = logging.getLogger(__name__)

# Mensagens óbvias que dispensam a LLM quando ela hesita
OBVIOUS_INTENTS: dict[Intent, tuple[frozenset[str], float]] = {
    Intent.saudacao: (frozenset({"oi", "olá", "ola", "eae", "oii", "bom dia", "boa tarde", "boa noite"}), 1.0),
    Intent.despedida: (frozenset({"tchau", "obrigado", "obrigada", "valeu", "bye", "até logo", "até mais"}), 1.0),
    Intent.sair: (frozenset({"sair", "cancelar", "parar", "reiniciar", "recomeçar"}), 1.0),
    Intent.continuar: (frozenset({"ok", "sim", "certo", "beleza", "show", "dale", "bora", "vamos"}), 0.9),
}


def parse_json_response(raw: str) -> Any:
    """Remove cercas de markdown e faz o parse do JSON."""
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("\n", 1)[1] if "\n" in raw else raw[3:]
    if raw.endswith("```"):
        raw = raw[:-3]
    return json.loads(raw.strip())


def _history_messages(history: Sequence[Message]) -> list[BaseMessage]:
    messages: list[BaseMessage] = []
    for msg in history:
        if msg.sender == Sender.user:
            messages.append(HumanMessage(content=msg.text))
        else:
            messages.append(AIMessage(content=msg.text))
    return messages


def _tasks_description() -> str:
    return "\n".join(
        f"- intent='{card.intent.value}' → {card.name}: {card.description} "
        f"(slots={card.required_slots + card.optional_slots})"
        for card in TASK_REGISTRY.values()
    )


class LLMIntentClassifier:
    """Classifica via LLM; mensagens óbvias usam regra fixa se a LLM hesitar."""

    def __init__(self, llm: Optional[BaseChatModel] = None):
        self.llm = llm or get_classifier_llm()

    def classify(
        self,
        message: str,
        recent_history: Sequence[Message],
        current_intent: Optional[Intent],
    ) -> IntentCandidate:
        candidate = self._classify_llm(message, recent_history, current_intent)
        if candidate.confidence >= KEYWORD_FALLBACK_THRESHOLD:
            return candidate
        return self._obvious_intent(message) or candidate

    def _classify_llm(
        self,
        message: str,
        recent_history: Sequence[Message],
        current_intent: Optional[Intent],
    ) -> IntentCandidate:
        system = SystemMessage(content=CLASSIFICATION_PROMPT.format(
            tasks_description=_tasks_description(),
            current_intent=current_intent.value if current_intent else "nenhuma",
        ))
        human = HumanMessage(content=f"Mensagem atual do professor: {message}")
        response = self.llm.invoke([system] + _history_messages(recent_history) + [human])

        try:
            data = parse_json_response(str(response.content))
            intent = Intent(data.get("intent"))
            confidence = min(max(float(data.get("confidence", 0.0)), 0.0), 1.0)
        except (json.JSONDecodeError, ValueError, TypeError, AttributeError):
            logger.warning(f"Resposta inválida do classificador: {response.content!r}")
            return IntentCandidate(intent=Intent.unclear, confidence=0.0)

        return IntentCandidate(intent=intent, confidence=confidence)

    @staticmethod
    def _obvious_intent(message: str) -> Optional[IntentCandidate]:
        text = message.strip().lower().rstrip(".!?")
        for intent, (phrases, confidence) in OBVIOUS_INTENTS.items():
            if text in phrases:
                return IntentCandidate(intent=intent, confidence=confidence)
        return None


class LLMSlotExtractor:
    """Extração conservadora: só campos da tarefa, só valores explícitos."""

    def __init__(self, llm: Optional[BaseChatModel] = None):
        self.llm = llm or get_classifier_llm()

    def extract(self, message: str, intent: Intent, already_collected: dict[str, Any]) -> dict[str, Any]:
        card = TASK_REGISTRY.get(intent)
        if card is None:
            return {}

        system = SystemMessage(content=EXTRACTION_PROMPT.format(
            task_name=card.name,
            task_description=card.description,
            fields="\n".join(f"- {name}" for name in card.slot_names),
            already_collected=json.dumps(already_collected, ensure_ascii=False, default=str),
        ))
        response = self.llm.invoke([system, HumanMessage(content=message)])

        try:
            data = parse_json_response(str(response.content))
        except json.JSONDecodeError:
            logger.warning(f"Resposta inválida do extrator: {response.content!r}")
            return {}
        if not isinstance(data, dict):
            return {}

        allowed = set(card.slot_names)
        extracted = {
            key: value for key, value in data.items()
            if key in allowed and value not in (None, "", [])
        }
        difficulty = extracted.get("nivel_dificuldade")
        if difficulty is not None and difficulty not in ("facil", "medio", "dificil"):
            extracted.pop("nivel_dificuldade")
        return extracted


class LLMTextGenerator:
    """Transforma situação + dados estruturados em linguagem natural."""

    def __init__(self, llm: Optional[BaseChatModel] = None, persona: str = ASSISTANT_PERSONA):
        self.llm = llm or get_llm()
        self.persona = persona

    def generate(self, tag: SituationTag, context: dict[str, Any]) -> str:
        context = dict(context)
        history = context.pop("history", [])
        message = context.get("message", "")

        history_text = "\n".join(
            f"{'Professor' if m.get('sender') == Sender.user.value else 'Assistente'}: {m.get('text')}"
            for m in history[-GENERATOR_HISTORY_SIZE:]
        )

        system = SystemMessage(content=GENERATION_PROMPT.format(
            persona=self.persona,
            instructions=SITUATION_INSTRUCTIONS.get(tag, ""),
            conversation_history=history_text or "(primeira mensagem)",
            context_json=json.dumps(context, ensure_ascii=False, indent=2, default=str),
        ))
        response = self.llm.invoke([system, HumanMessage(content=message or f"[{tag.value}]")])
        return str(response.content).strip()
