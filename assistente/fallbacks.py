"""
Respostas fixas usadas quando o gerador de texto falha ou quando a resposta
não deve depender da LLM (ex.: nenhum plano para exportar).
"""

from __future__ import annotations

from assistente.schemas import SituationTag
from assistente.slots import MISSING_ANO, MISSING_START_DATE, MISSING_TOPIC

_MENU = (
    "🎯 **Criar planos de aula personalizados**\n"
    "❓ **Tirar dúvidas educacionais**\n"
    "📅 **Planejar sua semana**"
)

GENERIC_ERROR = "Desculpe, ocorreu um erro ao processar sua mensagem. Pode tentar novamente?"

NO_PLAN_FOR_PDF = (
    "Ainda não encontrei nenhum plano de aula nesta conversa para transformar em PDF. 📄\n\n"
    "Que tal criarmos um agora? É só dizer \"quero um plano de aula\"! 😊"
)

NO_PLAN_FOR_REVISION = (
    "Ainda não temos um plano de aula para revisar. 🤔\n\n"
    "Vamos criar um primeiro? Me diga \"quero um plano de aula\" e começamos! ✨"
)

TRANSCRIPTION_FAILED = "Não consegui entender o áudio. Pode escrever sua mensagem?"
SPEECH_FAILED = "Desculpe, não consegui gerar o áudio desta resposta agora."
PDF_FAILED = "Desculpe, não consegui gerar o PDF agora. Tente novamente em instantes."

FALLBACK_REPLIES: dict[SituationTag, str] = {
    SituationTag.saudacao: (
        f"Oi! 👋 Que alegria te encontrar aqui! Sou seu assistente educacional e posso te ajudar com:\n\n"
        f"{_MENU}\n\nPor onde começamos? 😊"
    ),
    SituationTag.despedida: (
        "Foi incrível trabalhar com você! 🌟 Volte sempre que precisar. Boa aula e muito sucesso! 📚✨"
    ),
    SituationTag.sair: (
        f"🔄 Perfeito! Vamos recomeçar do zero. Posso te ajudar com:\n\n{_MENU}\n\n"
        "Por onde você gostaria de começar agora? ✨"
    ),
    SituationTag.negacao: (
        f"Tudo bem! Não tem problema nenhum. 😊 Quando quiser, estarei aqui para:\n\n{_MENU}"
    ),
    SituationTag.unclear_intent: (
        "Hmm, não consegui entender exatamente o que você precisa! 🤔\n\n"
        f"{_MENU}\n\nQual dessas opções te interessa agora?"
    ),
    SituationTag.continuar_sem_contexto: (
        "😊 Vejo que você quer continuar, mas preciso saber com o quê! Você gostaria de:\n\n"
        f"{_MENU}"
    ),
    SituationTag.tira_duvidas: (
        "Desculpe, não consegui responder sua dúvida agora. Pode tentar novamente?"
    ),
    SituationTag.reflexao_pedagogica: (
        "Desculpe, não consegui preparar essa reflexão agora. Pode tentar novamente?"
    ),
    SituationTag.pergunta_slot: (
        "😊 Estamos quase lá! Só preciso de mais algumas informações para continuar."
    ),
    SituationTag.plano_aula: (
        "Desculpe, ocorreu um erro ao gerar o plano de aula. Tente novamente."
    ),
    SituationTag.planejamento_semanal: (
        "Desculpe, ocorreu um erro ao gerar o planejamento semanal. Tente novamente."
    ),
    SituationTag.plano_concluido: "🎉 Pronto! Aqui está seu plano de aula personalizado:",
    SituationTag.planejamento_concluido: "📅 Incrível! Aqui está seu planejamento semanal:",
    SituationTag.plano_revisado: "✅ Feito! Ajustei o plano como você pediu:",
    SituationTag.revisao_sem_alteracao: (
        "Claro, posso ajustar o plano! 😊 O que você quer mudar: o ano, o tema ou o nível "
        "de dificuldade (fácil, médio ou difícil)?"
    ),
    SituationTag.pdf_pronto: (
        "Quer criar outro plano, organizar sua semana ou tirar alguma dúvida? Estou aqui! ✨"
    ),
}

FALLBACK_QUESTIONS: dict[str, str] = {
    MISSING_ANO: (
        "🎯 Vamos criar um plano de aula incrível! Para começar: para qual ano escolar "
        "será esse plano? (1º ao 9º ano, ou ensino médio)"
    ),
    MISSING_TOPIC: (
        "✨ Perfeito! Agora me conta: qual tema você quer abordar ou qual habilidade da "
        "BNCC vamos trabalhar?"
    ),
    MISSING_START_DATE: (
        "🗓️ Vamos organizar sua semana! A partir de quando começamos? Desta segunda-feira, "
        "da próxima semana ou de uma data específica?"
    ),
}


def fallback_for(tag: SituationTag) -> str:
    return FALLBACK_REPLIES.get(tag, GENERIC_ERROR)
