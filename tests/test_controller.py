"""Testes de ponta a ponta do DialogueController com oráculos falsos."""

from __future__ import annotations

import threading

import pytest

from assistente.artifacts import PLAN_END_MARKER, format_plan_reply
from assistente.controller import DialogueController
from assistente.fallbacks import (
    FALLBACK_QUESTIONS,
    GENERIC_ERROR,
    NO_PLAN_FOR_PDF,
    NO_PLAN_FOR_REVISION,
    fallback_for,
)
from assistente.nodes.reset import RESET_MARKER
from assistente.schemas import Intent, Message, Sender, SituationTag
from assistente.slots import MISSING_ANO

SID = "sessao-1"


def _start_lesson_plan(controller: DialogueController) -> None:
    controller.process_message("quero um plano de aula", SID)
    controller.process_message("5º ano", SID)


def _complete_lesson_plan(controller: DialogueController) -> None:
    _start_lesson_plan(controller)
    controller.process_message("frações", SID)


class TestLessonPlanScenario:
    """Conversa completa: saudação → coleta → plano → PDF."""

    def test_full_conversation(self, controller, store, classifier, generator):
        result = controller.process_message("oi", SID)
        assert result.intent == Intent.saudacao
        assert result.text == "[saudacao]"
        assert result.side_effects.video.kind == "saudacao"
        assert store.get(SID).current_intent == Intent.saudacao

        result = controller.process_message("quero um plano de aula", SID)
        context = store.get(SID)
        assert result.text == "Pergunta sobre ano"
        assert context.current_intent == Intent.plano_aula
        assert context.waiting_for == "ano"
        assert context.collected_data == {}

        result = controller.process_message("5º ano", SID)
        context = store.get(SID)
        assert context.current_intent == Intent.plano_aula
        assert context.collected_data == {"ano": "5º ano"}
        assert context.waiting_for == "tema"

        result = controller.process_message("frações", SID)
        context = store.get(SID)
        assert PLAN_END_MARKER in result.text
        assert "frações" in result.text
        assert result.side_effects.pdf_url == f"/pdf?session_id={SID}"
        assert context.current_intent is None
        assert context.collected_data == {}
        assert context.waiting_for is None
        assert context.artifacts.last_plano_data == {
            "ano": "5º ano",
            "tema": "frações",
            "habilidade_bncc": None,
            "nivel_dificuldade": "medio",
        }
        assert context.artifacts.last_plano_content

        calls_before = len(classifier.calls)
        result = controller.process_message("gerar pdf", SID)
        assert f"/pdf?session_id={SID}" in result.text
        assert len(classifier.calls) == calls_before

        history = store.get(SID).conversation_history
        assert len(history) == 10
        assert [m.sender for m in history[:2]] == [Sender.user, Sender.bot]

    def test_all_slots_in_one_message(self, controller, store, classifier):
        classifier.rules["plano de frações para o 5º ano"] = (Intent.plano_aula, 0.95)
        result = controller.process_message("plano de frações para o 5º ano", SID)
        assert PLAN_END_MARKER in result.text
        assert store.get(SID).artifacts.last_plano_data["tema"] == "frações"

    def test_difficulty_by_keyword(self, controller, store, classifier, extractor):
        classifier.rules["plano fácil de frações"] = (Intent.plano_aula, 0.95)
        extractor.rules["plano fácil de frações"] = {"tema": "frações"}
        controller.process_message("plano fácil de frações", SID)
        assert store.get(SID).collected_data["nivel_dificuldade"] == "facil"

    def test_generator_failure_keeps_slots(self, controller, store, generator):
        generator.failing.add(SituationTag.plano_aula)
        _start_lesson_plan(controller)

        result = controller.process_message("frações", SID)

        context = store.get(SID)
        assert result.text == fallback_for(SituationTag.plano_aula)
        assert context.collected_data == {"ano": "5º ano", "tema": "frações"}
        assert context.artifacts.last_plano_content is None

    def test_question_fallback_when_generator_fails(self, controller, generator):
        generator.failing.add(SituationTag.pergunta_slot)
        result = controller.process_message("quero um plano de aula", SID)
        assert result.text == FALLBACK_QUESTIONS[MISSING_ANO]


class TestIntentOverride:
    def test_weak_candidate_does_not_hijack_task(self, controller, store, classifier):
        classifier.rules["como avaliar?"] = (Intent.tira_duvidas, 0.7)
        _start_lesson_plan(controller)

        controller.process_message("como avaliar?", SID)

        context = store.get(SID)
        assert context.current_intent == Intent.plano_aula
        assert context.collected_data == {"ano": "5º ano"}

    def test_switching_task_clears_slots(self, controller, store, classifier):
        classifier.rules["melhor planejar a semana"] = (Intent.planejamento_semanal, 0.9)
        _start_lesson_plan(controller)

        controller.process_message("melhor planejar a semana", SID)

        context = store.get(SID)
        assert context.current_intent == Intent.planejamento_semanal
        assert "ano" not in context.collected_data
        assert context.waiting_for == "data_inicio"

    def test_question_mid_task_resumes_task(self, controller, store, generator):
        _start_lesson_plan(controller)

        result = controller.process_message("o que é BNCC?", SID)

        context = store.get(SID)
        assert result.text == "[tira_duvidas]"
        assert context.current_intent == Intent.plano_aula
        assert context.collected_data == {"ano": "5º ano"}

        controller.process_message("frações", SID)
        assert store.get(SID).artifacts.last_plano_data["tema"] == "frações"

    def test_reflection(self, controller, generator):
        result = controller.process_message("me ajuda a refletir sobre minha aula", SID)
        assert result.text == "[reflexao_pedagogica]"


class TestCommands:
    def test_exit_resets_without_classifier(self, controller, store, classifier):
        _complete_lesson_plan(controller)
        _start_lesson_plan(controller)
        calls_before = len(classifier.calls)

        result = controller.process_message("sair", SID)

        context = store.get(SID)
        assert len(classifier.calls) == calls_before
        assert result.text == "[sair]"
        assert result.intent == Intent.sair
        assert context.current_intent is None
        assert context.collected_data == {}
        assert context.waiting_for is None
        assert context.artifacts.last_plano_content
        texts = [m.text for m in context.conversation_history]
        assert texts[-3:] == ["sair", RESET_MARKER, "[sair]"]

    def test_negation_while_waiting(self, controller, store):
        controller.process_message("quero um plano de aula", SID)

        result = controller.process_message("não quero", SID)

        context = store.get(SID)
        assert result.text == "[negacao]"
        assert context.current_intent is None
        assert context.waiting_for is None

    def test_cancela_drops_question_but_keeps_task(self, controller, store, classifier):
        _start_lesson_plan(controller)

        result = controller.process_message("cancela essa pergunta", SID)

        context = store.get(SID)
        assert classifier.calls[-1] == "cancela essa pergunta"
        assert result.text == "Pergunta sobre tema"
        assert context.current_intent == Intent.plano_aula
        assert context.collected_data == {"ano": "5º ano"}

    def test_pdf_without_plan_is_canned(self, controller, classifier, generator):
        result = controller.process_message("gerar pdf", SID)

        assert result.text == NO_PLAN_FOR_PDF
        assert classifier.calls == []
        assert generator.calls == []

    def test_pdf_from_history(self, controller, store):
        store.append_message(
            SID, Message(text=format_plan_reply("Pronto!", "Plano recuperado"), sender=Sender.bot)
        )

        result = controller.process_message("baixar o pdf", SID)

        assert result.side_effects.pdf_url == f"/pdf?session_id={SID}"
        assert store.get(SID).artifacts.last_plano_content == "Plano recuperado"


class TestRevision:
    def test_revise_difficulty(self, controller, store, generator):
        _complete_lesson_plan(controller)

        result = controller.process_message("deixa mais difícil", SID)

        context = store.get(SID)
        assert PLAN_END_MARKER in result.text
        assert context.artifacts.last_plano_data["nivel_dificuldade"] == "dificil"
        assert context.artifacts.last_plano_data["tema"] == "frações"
        tag, generation_context = [call for call in generator.calls if call[0] == SituationTag.plano_aula][-1]
        assert generation_context["alteracoes"] == {"nivel_dificuldade": "dificil"}
        assert generation_context["plano_anterior"]

    def test_revise_theme_via_extractor(self, controller, store, classifier):
        classifier.rules["muda o tema para geometria"] = (Intent.revisar_plano, 0.9)
        _complete_lesson_plan(controller)

        controller.process_message("muda o tema para geometria", SID)

        assert store.get(SID).artifacts.last_plano_data["tema"] == "geometria"

    def test_revision_without_changes_asks(self, controller, store):
        _complete_lesson_plan(controller)

        result = controller.process_message("quero revisar o plano", SID)

        assert result.text == "[revisao_sem_alteracao]"
        assert store.get(SID).waiting_for == "revisao"

    def test_revision_without_plan_is_canned(self, controller, generator, extractor):
        result = controller.process_message("deixa mais difícil", SID)

        assert result.text == NO_PLAN_FOR_REVISION
        assert generator.calls == []
        assert extractor.calls == []


class TestWeeklyPlan:
    def test_schedule_flow(self, controller, store):
        result = controller.process_message("quero planejar minha semana", SID)
        assert result.text == "Pergunta sobre data de início"
        assert store.get(SID).waiting_for == "data_inicio"

        result = controller.process_message("a partir de segunda", SID)

        context = store.get(SID)
        assert "### Planejamento Semanal" in result.text
        assert context.artifacts.last_planejamento_data["data_inicio"] == "segunda-feira"
        assert context.current_intent is None


class TestContinue:
    def test_continue_resumes_task(self, controller, store):
        controller.process_message("quero um plano de aula", SID)

        result = controller.process_message("sim", SID)

        assert result.text == "Pergunta sobre ano"
        assert result.intent == Intent.plano_aula
        assert store.get(SID).current_intent == Intent.plano_aula

    def test_continue_follows_bot_suggestion(self, controller, store):
        store.append_message(SID, Message(text="Quer organizar seu planejamento da semana?", sender=Sender.bot))

        result = controller.process_message("vamos", SID)

        assert result.intent == Intent.planejamento_semanal
        assert store.get(SID).waiting_for == "data_inicio"
        assert store.get(SID).intent_confidence == 0.9

    def test_continue_without_context(self, controller):
        result = controller.process_message("sim", SID)
        assert result.text == "[continuar_sem_contexto]"


class TestSmallTalk:
    def test_greeting_video_only_first_time(self, controller):
        assert controller.process_message("oi", SID).side_effects.video is not None
        assert controller.process_message("oi", SID).side_effects.video is None

    def test_farewell_clears_session(self, controller, store):
        _start_lesson_plan(controller)

        result = controller.process_message("tchau", SID)

        assert result.text == "[despedida]"
        assert store.get(SID) is None

    def test_unclear_message(self, controller):
        assert controller.process_message("xyz", SID).text == "[unclear_intent]"

    def test_unclear_question_is_answered(self, controller):
        assert controller.process_message("qual a melhor dinâmica?", SID).text == "[tira_duvidas]"


class TestFailures:
    def test_classifier_failure_degrades_to_unclear(self, controller, classifier):
        classifier.error = RuntimeError("timeout")
        result = controller.process_message("oi", SID)
        assert result.intent == Intent.unclear
        assert result.text == "[unclear_intent]"

    def test_extractor_failure_keeps_collecting(self, controller, store, extractor):
        extractor.error = RuntimeError("timeout")
        controller.process_message("quero um plano de aula", SID)
        controller.process_message("5º ano", SID)
        assert store.get(SID).waiting_for == "ano"

    def test_generator_failure_is_never_empty(self, controller, generator):
        generator.fail_all = True
        result = controller.process_message("oi", SID)
        assert result.text == fallback_for(SituationTag.saudacao)

    def test_internal_error_returns_apology_without_partial_state(self, controller, store, monkeypatch):
        _start_lesson_plan(controller)

        class ExplodingGraph:
            def invoke(self, state):
                raise RuntimeError("falha inesperada")

        monkeypatch.setattr(controller, "graph", ExplodingGraph())
        result = controller.process_message("frações", SID)

        context = store.get(SID)
        assert result.text == GENERIC_ERROR
        assert context.collected_data == {"ano": "5º ano"}
        assert context.current_intent == Intent.plano_aula
        assert [m.text for m in context.conversation_history[-2:]] == ["frações", GENERIC_ERROR]


class TestInspection:
    def test_history_and_clear(self, controller):
        controller.process_message("oi", SID)
        assert len(controller.get_history(SID)) == 2
        assert controller.get_context(SID).current_intent == Intent.saudacao

        controller.clear_context(SID)
        assert controller.get_context(SID) is None
        assert controller.get_history(SID) == []


def test_concurrent_turns_are_serialized(controller, store):
    """Turnos simultâneos da mesma sessão não perdem mensagens."""
    threads = [
        threading.Thread(target=controller.process_message, args=("xyz", SID))
        for _ in range(8)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    history = store.get(SID).conversation_history
    assert len(history) == 16
    assert [m.sender for m in history] == [Sender.user, Sender.bot] * 8


@pytest.mark.parametrize("message", ["", "   "])
def test_empty_message_is_classified_normally(controller, message):
    result = controller.process_message(message, SID)
    assert result.text == "[unclear_intent]"
