"""
Política de dados faltantes e helpers de preenchimento de slots.

Funções puras: recebem o dict de slots coletados e não tocam na sessão.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from assistente.config import DEFAULT_DIFFICULTY
from assistente.schemas import Intent, LessonPlanSlots, WeeklyScheduleSlots

MISSING_ANO = "ano"
MISSING_TOPIC = "tema ou habilidade BNCC"
MISSING_START_DATE = "data de início"

# Campo faltante → tag gravada em `waiting_for`
WAITING_TAGS = {
    MISSING_ANO: "ano",
    MISSING_TOPIC: "tema",
    MISSING_START_DATE: "data_inicio",
}

_DIFFICULTY_PATTERNS = (
    ("facil", re.compile(r"\b(fácil|facil|simples|básico|basico|introdutório|introdutorio)\b")),
    ("dificil", re.compile(r"\b(difícil|dificil|avançado|avancado|desafiador|complexo)\b")),
    ("medio", re.compile(r"\b(médio|medio|normal|intermediário|intermediario)\b")),
)
_SCHOOL_STAGE = re.compile(r"ensino\s+m[ée]dio")

_GRADE_PATTERN = re.compile(r"\b(\d{1,2})\s*[º°ª]?\s*ano\b", re.IGNORECASE)
_HIGH_SCHOOL_PATTERN = re.compile(r"\b(\d)\s*[º°ª]?\s*(?:ano|série)\s+do\s+ensino\s+médio\b", re.IGNORECASE)


def _filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, dict)):
        return bool(value)
    return True


def missing_lesson_plan_fields(data: dict[str, Any]) -> list[str]:
    """`ano` antes do tema; dificuldade nunca é exigida."""
    missing = []
    if not _filled(data.get("ano")):
        missing.append(MISSING_ANO)
    if not _filled(data.get("tema")) and not _filled(data.get("habilidade_bncc")):
        missing.append(MISSING_TOPIC)
    return missing


def missing_weekly_plan_fields(data: dict[str, Any]) -> list[str]:
    return [] if _filled(data.get("data_inicio")) else [MISSING_START_DATE]


MISSING_FIELDS = {
    Intent.plano_aula: missing_lesson_plan_fields,
    Intent.planejamento_semanal: missing_weekly_plan_fields,
}


def missing_fields(intent: Intent, data: dict[str, Any]) -> list[str]:
    policy = MISSING_FIELDS.get(intent)
    return policy(data) if policy else []


def merge_slots(collected: dict[str, Any], extracted: dict[str, Any]) -> list[str]:
    """Mescla valores extraídos; vazio/None nunca sobrescreve. Retorna as chaves alteradas."""
    changed = []
    for key, value in extracted.items():
        if not _filled(value):
            continue
        if isinstance(value, str):
            value = value.strip()
        if collected.get(key) != value:
            collected[key] = value
            changed.append(key)
    return changed


def detect_difficulty(message: str) -> Optional[str]:
    text = _SCHOOL_STAGE.sub(" ", message.lower())
    for level, pattern in _DIFFICULTY_PATTERNS:
        if pattern.search(text):
            return level
    return None


def detect_grade(message: str) -> Optional[str]:
    """Reconhece "5º ano", "7 ano", "2º ano do ensino médio", "ensino médio"."""
    high_school = _HIGH_SCHOOL_PATTERN.search(message)
    if high_school:
        return f"{high_school.group(1)}º ano do Ensino Médio"
    grade = _GRADE_PATTERN.search(message)
    if grade:
        return f"{int(grade.group(1))}º ano"
    if "ensino médio" in message.lower() or "ensino medio" in message.lower():
        return "Ensino Médio"
    return None


def lesson_plan_payload(data: dict[str, Any]) -> dict[str, Any]:
    slots = LessonPlanSlots.model_validate(
        {key: data.get(key) for key in LessonPlanSlots.model_fields}
    )
    if not slots.nivel_dificuldade:
        slots.nivel_dificuldade = DEFAULT_DIFFICULTY
    return slots.model_dump()


def weekly_plan_payload(data: dict[str, Any]) -> dict[str, Any]:
    payload = {key: data.get(key) for key in WeeklyScheduleSlots.model_fields}
    for key in ("atividades", "materias"):
        value = payload.get(key)
        if value is None:
            payload[key] = []
        elif isinstance(value, str):
            payload[key] = [item.strip() for item in value.split(",") if item.strip()]
    return WeeklyScheduleSlots.model_validate(payload).model_dump()
