"""
Tabela intenção → nó handler, e regras de roteamento usadas pelas arestas
condicionais do grafo.
"""

from __future__ import annotations

from assistente.schemas import Command, GraphState, Intent

INTENT_ROUTES: dict[Intent, str] = {
    Intent.plano_aula: "lesson_plan",
    Intent.planejamento_semanal: "weekly_plan",
    Intent.revisar_plano: "revision",
    Intent.tira_duvidas: "answer",
    Intent.reflexao_pedagogica: "answer",
    Intent.saudacao: "greeting",
    Intent.despedida: "farewell",
    Intent.sair: "reset",
    Intent.continuar: "continue",
    Intent.unclear: "unclear",
}

COMMAND_ROUTES: dict[Command, str] = {
    Command.exit: "reset",
    Command.negation: "negation",
    Command.pdf_request: "pdf_request",
}


def route_for(intent: Intent) -> str:
    return INTENT_ROUTES.get(intent, "unclear")


def route_after_intake(state: GraphState) -> str:
    """Comandos pulam a classificação de intenção."""
    if state.command is None:
        return "classification"
    return COMMAND_ROUTES[state.command]


def route_by_state(state: GraphState) -> str:
    return state.route or "unclear"
