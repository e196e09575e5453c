"""
Detecção de comandos por regras: sair/reiniciar, negação e pedido de PDF.

Tudo o que conta como comando está na tabela COMMAND_RULES, avaliada em
ordem de prioridade. A primeira regra que casa vence.
"""

from __future__ import annotations

import re
from typing import Callable, NamedTuple, Optional

from assistente.schemas import Command

EXIT_COMMANDS = frozenset({"sair", "cancelar", "parar", "reiniciar", "recomeçar", "volta", "voltar"})
EXIT_PHRASES = ("começar de novo", "começar denovo", "sair daqui", "cancelar tudo")

NEGATION_PHRASES = ("não quero", "nao quero")
CANCEL_QUESTION_PHRASE = "cancela"

PDF_PHRASES = (
    "gerar pdf",
    "gera pdf",
    "gere o pdf",
    "gerar o pdf",
    "baixar pdf",
    "baixar o pdf",
    "baixar plano",
    "baixar o plano",
    "exportar pdf",
    "pdf do plano",
    "plano em pdf",
    "versão em pdf",
    "versao em pdf",
)

_MENTIONS_PDF = re.compile(r"\bpdf\b")
_MENTIONS_PLAN = re.compile(r"\bplano\b")
_SEND_VERB = re.compile(r"\b(mand[aeo]r?|mande|envi[aeo]r?|envie|compartilh[aeo]r?)\b")
_DOWNLOAD_VERB = re.compile(r"\b(baix[aeo]r?|baixe|download|export[aeo]r?|export[ae])\b")
_SAVE_VERB = re.compile(r"\b(salv[aeo]r?|salve|imprim[aei]r?|imprima)\b")
_SAVE_PLAN = re.compile(r"\b(salv[aeo]r?|salve|imprim[aei]r?|imprima) (o |meu |esse |este )?plano\b")
_GENERATE_VERB = re.compile(r"\b(ger[aeo]r?|gere|cri[ae]r?|crie|fa[zç][ae]r?)\b")


def normalize(message: str) -> str:
    return message.strip().lower().rstrip(".!?").strip()


def is_exit_command(text: str) -> bool:
    return text in EXIT_COMMANDS or any(phrase in text for phrase in EXIT_PHRASES)


def is_negation(text: str) -> bool:
    return any(phrase in text for phrase in NEGATION_PHRASES)


def cancels_pending_question(message: str, waiting_for: Optional[str]) -> bool:
    """Com pergunta pendente, "cancela" descarta só a pergunta e a mensagem segue para a classificação."""
    return waiting_for is not None and CANCEL_QUESTION_PHRASE in normalize(message)


def is_pdf_request(text: str) -> bool:
    """Frase explícita, ou "pdf" + verbo de baixar/gerar/enviar/salvar, ou "plano" + baixar/enviar.

    "plano" com verbo de geração fica de fora: "gerar um plano de aula" é um
    pedido de criação, não de exportação. Salvar/imprimir só contam com o
    plano como objeto ("salvar o plano"), para não capturar "como salvar o
    planeta" num pedido de plano.
    """
    if any(phrase in text for phrase in PDF_PHRASES):
        return True
    if _MENTIONS_PDF.search(text):
        return bool(
            _SEND_VERB.search(text)
            or _DOWNLOAD_VERB.search(text)
            or _SAVE_VERB.search(text)
            or _GENERATE_VERB.search(text)
        )
    if _MENTIONS_PLAN.search(text):
        return bool(_SEND_VERB.search(text) or _DOWNLOAD_VERB.search(text) or _SAVE_PLAN.search(text))
    return False


class CommandRule(NamedTuple):
    command: Command
    matches: Callable[[str, Optional[str]], bool]


COMMAND_RULES: tuple[CommandRule, ...] = (
    CommandRule(Command.exit, lambda text, waiting_for: is_exit_command(text)),
    CommandRule(Command.negation, lambda text, waiting_for: waiting_for is not None and is_negation(text)),
    CommandRule(Command.pdf_request, lambda text, waiting_for: is_pdf_request(text)),
)


def detect_command(message: str, waiting_for: Optional[str] = None) -> Optional[Command]:
    text = normalize(message)
    for rule in COMMAND_RULES:
        if rule.matches(text, waiting_for):
            return rule.command
    return None
