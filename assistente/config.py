"""
Configuração central: OpenAI, limites da sessão, registry de tarefas, tom de voz.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from langchain_openai import ChatOpenAI
from openai import OpenAI

from assistente.schemas import Intent, TaskCard

load_dotenv()


def get_llm() -> ChatOpenAI:
    """Retorna a LLM OpenAI configurada."""
    return ChatOpenAI(
        model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        api_key=os.getenv("OPENAI_API_KEY"),
        temperature=float(os.getenv("OPENAI_TEMPERATURE", "0.7")),
        timeout=float(os.getenv("OPENAI_TIMEOUT", "60")),
    )


def get_classifier_llm() -> ChatOpenAI:
    """LLM determinística para classificação e extração."""
    return ChatOpenAI(
        model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        api_key=os.getenv("OPENAI_API_KEY"),
        temperature=0,
        timeout=float(os.getenv("OPENAI_TIMEOUT", "60")),
    )


def get_openai_client() -> OpenAI:
    """Cliente OpenAI cru, usado para transcrição e TTS."""
    return OpenAI(api_key=os.getenv("OPENAI_API_KEY"))


# ── Tom de voz (usado por todas as gerações de texto) ────────────────

ASSISTANT_PERSONA = os.getenv(
    "ASSISTANT_PERSONA",
    (
        "Você é um assistente educacional entusiasta e motivador, especializado "
        "em ajudar professores. Seja caloroso, empático e propositivo. "
        "Use português brasileiro, linguagem natural e emojis ocasionais. "
        "Você é especialista em três coisas: planos de aula, tira-dúvidas "
        "pedagógicas e planejamento semanal."
    ),
)


# ── Política de diálogo ───────────────────────────────────────────────

INTENT_OVERRIDE_THRESHOLD = float(os.getenv("INTENT_OVERRIDE_THRESHOLD", "0.8"))
KEYWORD_FALLBACK_THRESHOLD = float(os.getenv("KEYWORD_FALLBACK_THRESHOLD", "0.65"))
CONTINUE_ADOPT_CONFIDENCE = 0.9
DEFAULT_DIFFICULTY = "medio"


# ── Sessões ───────────────────────────────────────────────────────────

HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "50"))
SESSION_TTL_MINUTES = int(os.getenv("SESSION_TTL_MINUTES", "15"))
SESSION_SWEEP_INTERVAL_SECONDS = float(os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", "300"))
CLASSIFIER_HISTORY_SIZE = 6
GENERATOR_HISTORY_SIZE = 10


# ── Mídia ─────────────────────────────────────────────────────────────

TRANSCRIPTION_MODEL = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")
TTS_MODEL = os.getenv("TTS_MODEL", "tts-1")
TTS_VOICE = os.getenv("TTS_VOICE", "nova")
VALID_VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")
MAX_AUDIO_BYTES = 25 * 1024 * 1024
MAX_TTS_CHARS = 4096

VIDEO_DIR = Path(os.getenv("VIDEO_DIR", "."))
VIDEO_FILES = {"saudacao": "video-saudacao.mp4"}
VIDEO_ROUTE = "/video"

PDF_SERVICE_URL = os.getenv("PDF_SERVICE_URL", "http://localhost:8002")
PDF_SERVICE_API_KEY = os.getenv("PDF_SERVICE_API_KEY", "")
PDF_DOWNLOAD_PATH = os.getenv("PDF_DOWNLOAD_PATH", "/pdf")


# ── Logs ──────────────────────────────────────────────────────────────

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
ENABLE_LOGS = os.getenv("ENABLE_LOGS", "false").lower() == "true"


# ── Registry de Tarefas ───────────────────────────────────────────────

TASK_REGISTRY: dict[Intent, TaskCard] = {
    Intent.plano_aula: TaskCard(
        intent=Intent.plano_aula,
        name="Plano de Aula",
        description="Cria um plano de aula completo para uma turma",
        required_slots=["ano", "tema|habilidade_bncc"],
        optional_slots=["nivel_dificuldade"],
    ),
    Intent.planejamento_semanal: TaskCard(
        intent=Intent.planejamento_semanal,
        name="Planejamento Semanal",
        description="Organiza a semana de trabalho do professor",
        required_slots=["data_inicio"],
        optional_slots=["data_fim", "atividades", "materias"],
    ),
    Intent.revisar_plano: TaskCard(
        intent=Intent.revisar_plano,
        name="Revisão de Plano",
        description="Ajusta um plano de aula já gerado (ano, tema ou dificuldade)",
        required_slots=[],
        optional_slots=["ano", "tema", "nivel_dificuldade"],
    ),
}
