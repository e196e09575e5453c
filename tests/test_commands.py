"""Testes da detecção de comandos (sair, negação, pdf)."""

from __future__ import annotations

import pytest

from assistente.commands import cancels_pending_question, detect_command, is_pdf_request, normalize
from assistente.schemas import Command


class TestExitCommands:
    @pytest.mark.parametrize(
        "message",
        ["sair", "Sair", "  cancelar  ", "reiniciar!", "Recomeçar.", "quero começar de novo"],
    )
    def test_exit(self, message):
        assert detect_command(message) == Command.exit

    def test_exit_word_inside_sentence_is_not_a_command(self):
        assert detect_command("como faço para sair da rotina na aula?") is None


class TestNegation:
    def test_only_while_waiting(self):
        assert detect_command("não quero", waiting_for="ano") == Command.negation
        assert detect_command("não quero") is None

    def test_exit_has_priority(self):
        assert detect_command("cancelar", waiting_for="ano") == Command.exit

    def test_cancela_is_not_a_negation(self):
        assert detect_command("cancela essa pergunta", waiting_for="ano") is None

    def test_cancela_drops_only_pending_question(self):
        assert cancels_pending_question("Cancela essa pergunta", waiting_for="tema")
        assert not cancels_pending_question("cancela essa pergunta", waiting_for=None)


class TestPdfRequest:
    @pytest.mark.parametrize(
        "message",
        [
            "gerar pdf",
            "Quero baixar o PDF",
            "me manda o pdf por favor",
            "pode exportar em pdf?",
            "baixar o plano",
            "me envia o plano",
            "quero o plano em pdf",
            "manda o plano",
            "pode enviar o pdf",
            "salvar o plano",
            "quero imprimir o pdf",
        ],
    )
    def test_pdf_requests(self, message):
        assert detect_command(message) == Command.pdf_request

    @pytest.mark.parametrize(
        "message",
        [
            "quero um plano de aula",
            "gerar um plano de aula sobre frações",
            "o que é um pdf?",
            "qual o pdf da minha vida",
            "quero um plano de aula sobre como salvar o planeta",
            "como imprimir mais energia no plano de aula?",
            "oi",
        ],
    )
    def test_not_pdf_requests(self, message):
        assert detect_command(message) is None

    def test_normalized_text(self):
        assert is_pdf_request(normalize("GERAR PDF!!"))
