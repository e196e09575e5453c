"""
Schemas centrais do Assistente Educacional.

Princípio: o estado da conversa é um objeto tipado (SessionContext). Os slots
da tarefa ativa ficam em `collected_data`; os artefatos gerados (plano de aula,
planejamento semanal) ficam em `artifacts` e sobrevivem aos resets.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Enums ──────────────────────────────────────────────────────────────

class Intent(str, Enum):
    plano_aula = "plano_aula"
    tira_duvidas = "tira_duvidas"
    planejamento_semanal = "planejamento_semanal"
    saudacao = "saudacao"
    despedida = "despedida"
    sair = "sair"
    continuar = "continuar"
    revisar_plano = "revisar_plano"
    reflexao_pedagogica = "reflexao_pedagogica"
    unclear = "unclear"


class Sender(str, Enum):
    user = "user"
    bot = "bot"


class MessageType(str, Enum):
    text = "text"
    audio = "audio"
    video = "video"


class Command(str, Enum):
    """Comandos interceptados antes da classificação de intenção."""
    exit = "exit"
    negation = "negation"
    pdf_request = "pdf_request"


class SituationTag(str, Enum):
    """Situações entregues ao gerador de texto."""
    saudacao = "saudacao"
    despedida = "despedida"
    sair = "sair"
    negacao = "negacao"
    unclear_intent = "unclear_intent"
    continuar_sem_contexto = "continuar_sem_contexto"
    tira_duvidas = "tira_duvidas"
    reflexao_pedagogica = "reflexao_pedagogica"
    pergunta_slot = "pergunta_slot"
    plano_aula = "plano_aula"
    planejamento_semanal = "planejamento_semanal"
    plano_concluido = "plano_concluido"
    planejamento_concluido = "planejamento_concluido"
    plano_revisado = "plano_revisado"
    revisao_sem_alteracao = "revisao_sem_alteracao"
    pdf_pronto = "pdf_pronto"


# ── Histórico ──────────────────────────────────────────────────────────

class Message(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    text: str
    sender: Sender
    timestamp: datetime = Field(default_factory=utcnow)
    type: MessageType = MessageType.text
    audio_url: Optional[str] = None
    video_url: Optional[str] = None


# ── Slots e artefatos ──────────────────────────────────────────────────

class LessonPlanSlots(BaseModel):
    """Visão tipada dos dados de um plano de aula."""
    ano: Optional[str] = None
    tema: Optional[str] = None
    habilidade_bncc: Optional[str] = None
    nivel_dificuldade: Optional[str] = None


class WeeklyScheduleSlots(BaseModel):
    """Visão tipada dos dados de um planejamento semanal."""
    data_inicio: Optional[str] = None
    data_fim: Optional[str] = None
    atividades: list[str] = Field(default_factory=list)
    materias: list[str] = Field(default_factory=list)


class Artifacts(BaseModel):
    """Conteúdo gerado que precisa sobreviver aos resets da conversa."""
    last_plano_content: Optional[str] = None
    last_plano_data: Optional[dict[str, Any]] = None
    last_planejamento_content: Optional[str] = None
    last_planejamento_data: Optional[dict[str, Any]] = None

    def keep_only(self, keys: Iterable[str]) -> "Artifacts":
        keys = set(keys)
        return Artifacts(**{
            name: value for name, value in self.model_dump().items() if name in keys
        })


ARTIFACT_KEYS: tuple[str, ...] = tuple(Artifacts.model_fields)


# ── Sessão ─────────────────────────────────────────────────────────────

class SessionContext(BaseModel):
    """Estado de uma conversa, mantido entre turnos."""

    session_id: str
    current_intent: Optional[Intent] = None
    intent_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    collected_data: dict[str, Any] = Field(default_factory=dict)
    artifacts: Artifacts = Field(default_factory=Artifacts)
    conversation_history: list[Message] = Field(default_factory=list)
    last_activity: datetime = Field(default_factory=utcnow)
    waiting_for: Optional[str] = None
    last_bot_question: Optional[str] = None

    def touch(self) -> None:
        self.last_activity = utcnow()

    def append_message(self, message: Message, limit: int) -> None:
        self.conversation_history.append(message)
        if len(self.conversation_history) > limit:
            self.conversation_history = self.conversation_history[-limit:]
        self.touch()

    def set_field(self, key: str, value: Any) -> None:
        if key in ARTIFACT_KEYS:
            setattr(self.artifacts, key, value)
        else:
            self.collected_data[key] = value
        self.touch()

    def set_intent(self, intent: Optional[Intent], confidence: float) -> None:
        self.current_intent = intent
        self.intent_confidence = confidence
        self.touch()

    def reset_keeping_history(self, preserve_keys: Iterable[str] = ARTIFACT_KEYS) -> None:
        preserve_keys = set(preserve_keys)
        self.current_intent = None
        self.intent_confidence = 0.0
        self.collected_data = {
            key: value for key, value in self.collected_data.items() if key in preserve_keys
        }
        self.artifacts = self.artifacts.keep_only(preserve_keys)
        self.waiting_for = None
        self.last_bot_question = None
        self.touch()

    def recent_messages(self, count: int, sender: Optional[Sender] = None) -> list[Message]:
        messages = self.conversation_history
        if sender is not None:
            messages = [m for m in messages if m.sender == sender]
        return messages[-count:] if count else []


# ── Oráculos ──────────────────────────────────────────────────────────

class IntentCandidate(BaseModel):
    """Saída estruturada do classificador de intenção."""
    intent: Intent = Intent.unclear
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class TaskCard(BaseModel):
    """Tarefa que exige coleta de slots antes da geração."""
    intent: Intent
    name: str
    description: str
    required_slots: list[str] = Field(default_factory=list)
    optional_slots: list[str] = Field(default_factory=list)

    @property
    def slot_names(self) -> list[str]:
        names: list[str] = []
        for slot in self.required_slots + self.optional_slots:
            names.extend(slot.split("|"))
        return names


# ── Resultado do processamento ────────────────────────────────────────

class VideoRef(BaseModel):
    kind: str
    url: str


class SideEffects(BaseModel):
    """Artefatos fora de banda que a camada de transporte interpreta."""
    video: Optional[VideoRef] = None
    pdf_url: Optional[str] = None
    audio_voice: Optional[str] = None


class ProcessResult(BaseModel):
    session_id: str
    text: str
    intent: Optional[Intent] = None
    side_effects: SideEffects = Field(default_factory=SideEffects)


# ── Graph State ────────────────────────────────────────────────────────

class GraphState(BaseModel):
    """Estado que flui por todos os nós do LangGraph durante um turno."""

    session_id: str
    user_input: str = ""
    message_type: MessageType = MessageType.text

    # Cópia de trabalho da sessão; só é gravada no store ao final do turno
    context: SessionContext

    # Comando interceptado no intake (sair, negação, pdf)
    command: Optional[Command] = None

    # Classificação crua, intenção resolvida e intenção anterior ao turno
    candidate: Optional[IntentCandidate] = None
    resolved_intent: Optional[Intent] = None
    previous_intent: Optional[Intent] = None
    previous_confidence: float = 0.0

    # Próximo handler escolhido por um nó de roteamento
    route: Optional[str] = None

    reply: str = ""
    side_effects: SideEffects = Field(default_factory=SideEffects)

    # Despedida: a sessão é descartada em vez de gravada
    clear_session: bool = False


# ── API Contracts ──────────────────────────────────────────────────────

class ChatRequest(BaseModel):
    session_id: Optional[str] = None
    message: str = Field(min_length=1)
    generate_audio: bool = False
    voice: str = "nova"


class ChatResponse(BaseModel):
    session_id: str
    response: str
    timestamp: datetime = Field(default_factory=utcnow)
    intent: Optional[Intent] = None
    side_effects: SideEffects = Field(default_factory=SideEffects)
    audio_url: Optional[str] = None


class AudioResponse(ChatResponse):
    transcription: str


class TTSRequest(BaseModel):
    text: str = Field(min_length=1)
    session_id: Optional[str] = None
    voice: str = "nova"


class LogsToggle(BaseModel):
    enabled: bool


class ContextResponse(BaseModel):
    session_id: str
    current_intent: Optional[Intent] = None
    intent_confidence: float = 0.0
    collected_data: dict[str, Any] = Field(default_factory=dict)
    artifacts: Artifacts = Field(default_factory=Artifacts)
    waiting_for: Optional[str] = None
    conversation_history: list[Message] = Field(default_factory=list)
    last_activity: datetime
