from __future__ import annotations

from typing import Any, Optional

import pytest

from assistente.chat_log import ChatLogger
from assistente.controller import DialogueController
from assistente.oracles import Oracles
from assistente.schemas import Intent, IntentCandidate, SituationTag
from assistente.session import SessionStore


class FakeClassifier:
    """Classificador por tabela; mensagens desconhecidas viram `unclear` fraco."""

    def __init__(self, rules: Optional[dict[str, tuple[Intent, float]]] = None):
        self.rules = dict(rules or {})
        self.calls: list[str] = []
        self.error: Optional[Exception] = None

    def classify(self, message, recent_history, current_intent):
        self.calls.append(message)
        if self.error:
            raise self.error
        intent, confidence = self.rules.get(message, (Intent.unclear, 0.3))
        return IntentCandidate(intent=intent, confidence=confidence)


class FakeExtractor:
    def __init__(self, rules: Optional[dict[str, dict[str, Any]]] = None):
        self.rules = dict(rules or {})
        self.calls: list[tuple[str, Intent]] = []
        self.error: Optional[Exception] = None

    def extract(self, message, intent, already_collected):
        self.calls.append((message, intent))
        if self.error:
            raise self.error
        return dict(self.rules.get(message, {}))


class FakeGenerator:
    """Texto determinístico por situação; `failing` lista as tags que falham."""

    def __init__(self):
        self.calls: list[tuple[SituationTag, dict[str, Any]]] = []
        self.failing: set[SituationTag] = set()
        self.fail_all = False

    def generate(self, tag, context):
        self.calls.append((tag, context))
        if self.fail_all or tag in self.failing:
            raise RuntimeError(f"gerador indisponível para {tag.value}")
        if tag in (SituationTag.plano_aula, SituationTag.planejamento_semanal):
            dados = context.get("dados", {})
            return f"Conteúdo gerado ({tag.value}): {dados}"
        if tag == SituationTag.pergunta_slot:
            return f"Pergunta sobre {context.get('missing_field')}"
        return f"[{tag.value}]"

    def tags(self) -> list[SituationTag]:
        return [tag for tag, _ in self.calls]


@pytest.fixture(autouse=True)
def chat_logs_enabled():
    """Log de conversa ligado nos testes, restaurado ao final."""
    previous = ChatLogger.is_enabled()
    ChatLogger.set_enabled(True)
    yield
    ChatLogger.set_enabled(previous)


@pytest.fixture()
def classifier() -> FakeClassifier:
    return FakeClassifier({
        "oi": (Intent.saudacao, 1.0),
        "quero um plano de aula": (Intent.plano_aula, 0.95),
        "quero planejar minha semana": (Intent.planejamento_semanal, 0.95),
        "tchau": (Intent.despedida, 1.0),
        "sim": (Intent.continuar, 0.9),
        "vamos": (Intent.continuar, 0.9),
        "deixa mais difícil": (Intent.revisar_plano, 0.9),
        "quero revisar o plano": (Intent.revisar_plano, 0.9),
        "muda o tema": (Intent.revisar_plano, 0.9),
        "o que é BNCC?": (Intent.tira_duvidas, 0.95),
        "me ajuda a refletir sobre minha aula": (Intent.reflexao_pedagogica, 0.9),
    })


@pytest.fixture()
def extractor() -> FakeExtractor:
    return FakeExtractor({
        "5º ano": {"ano": "5º ano"},
        "frações": {"tema": "frações"},
        "plano de frações para o 5º ano": {"ano": "5º ano", "tema": "frações"},
        "a partir de segunda": {"data_inicio": "segunda-feira"},
        "muda o tema para geometria": {"tema": "geometria"},
    })


@pytest.fixture()
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture()
def oracles(classifier, extractor, generator) -> Oracles:
    return Oracles(classifier=classifier, extractor=extractor, generator=generator)


@pytest.fixture()
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture()
def controller(store, oracles) -> DialogueController:
    return DialogueController(store, oracles)
