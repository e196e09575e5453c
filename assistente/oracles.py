"""
Colaboradores externos (LLM, áudio, PDF) vistos pelo núcleo como oráculos.

`Oracles` empacota classificador, extrator e gerador e aplica o fallback fixo
de cada um no ponto de chamada: nenhuma falha de oráculo sobe para o
controller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from assistente.chat_log import ChatLogger
from assistente.fallbacks import fallback_for
from assistente.schemas import Intent, IntentCandidate, Message, SituationTag

logger = logging.getLogger(__name__)


class IntentClassifier(Protocol):
    def classify(
        self,
        message: str,
        recent_history: Sequence[Message],
        current_intent: Optional[Intent],
    ) -> IntentCandidate: ...


class SlotExtractor(Protocol):
    def extract(self, message: str, intent: Intent, already_collected: dict[str, Any]) -> dict[str, Any]: ...


class TextGenerator(Protocol):
    def generate(self, tag: SituationTag, context: dict[str, Any]) -> str: ...


class Transcriber(Protocol):
    def transcribe(self, audio: bytes, filename: str = "audio.webm") -> str: ...


class SpeechSynthesizer(Protocol):
    def synthesize(self, text: str, voice: str) -> bytes: ...


class PdfRenderer(Protocol):
    def render(self, formatted_text: str, title: str) -> bytes: ...


@dataclass
class Oracles:
    classifier: IntentClassifier
    extractor: SlotExtractor
    generator: TextGenerator

    def classify(
        self,
        session_id: str,
        message: str,
        recent_history: Sequence[Message],
        current_intent: Optional[Intent],
    ) -> IntentCandidate:
        try:
            candidate = self.classifier.classify(message, recent_history, current_intent)
        except Exception as e:
            logger.warning(f"[{session_id}] Classificador falhou: {e}")
            ChatLogger.log_error(session_id, e, {"context": "intent_classification", "message": message})
            return IntentCandidate(intent=Intent.unclear, confidence=0.0)
        ChatLogger.log_intent(session_id, candidate.intent.value, candidate.confidence, message)
        return candidate

    def extract(
        self,
        session_id: str,
        message: str,
        intent: Intent,
        already_collected: dict[str, Any],
    ) -> dict[str, Any]:
        try:
            extracted = self.extractor.extract(message, intent, dict(already_collected))
        except Exception as e:
            logger.warning(f"[{session_id}] Extrator falhou: {e}")
            ChatLogger.log_error(session_id, e, {"context": "slot_extraction", "message": message})
            return {}
        return {key: value for key, value in (extracted or {}).items() if value is not None}

    def try_generate(self, session_id: str, tag: SituationTag, context: dict[str, Any]) -> Optional[str]:
        """Gera texto ou retorna None em caso de falha/resposta vazia."""
        try:
            text = self.generator.generate(tag, context)
        except Exception as e:
            logger.warning(f"[{session_id}] Gerador falhou para '{tag.value}': {e}")
            ChatLogger.log_error(session_id, e, {"context": "text_generation", "tag": tag.value})
            return None
        text = (text or "").strip()
        return text or None

    def generate(
        self,
        session_id: str,
        tag: SituationTag,
        context: dict[str, Any],
        fallback: Optional[str] = None,
    ) -> str:
        text = self.try_generate(session_id, tag, context)
        if text is None:
            return fallback or fallback_for(tag)
        return text
