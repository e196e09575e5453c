"""
Grafo LangGraph do Assistente Educacional.

PRINCÍPIO: Todos os caminhos terminam no Respond, que registra a resposta.

Fluxo:
  intake ─┬─ reset ───────────────────────────────────────────┐
          ├─ negation ────────────────────────────────────────┤
          ├─ pdf_request ─────────────────────────────────────┤
          └─ classification ─┬─ lesson_plan / weekly_plan ────┤
                             ├─ revision / answer ────────────┤──→ respond → END
                             ├─ greeting / farewell / unclear ┤
                             ├─ reset ────────────────────────┤
                             └─ continue ──→ (handler acima) ─┘
"""

from __future__ import annotations

from typing import Callable

from langgraph.graph import END, StateGraph

from assistente.nodes import (
    answer_node,
    classification_node,
    continue_node,
    farewell_node,
    greeting_node,
    intake_node,
    lesson_plan_node,
    negation_node,
    pdf_request_node,
    reset_node,
    respond_node,
    revision_node,
    unclear_node,
    weekly_plan_node,
)
from assistente.nodes.routing import route_after_intake, route_by_state
from assistente.oracles import Oracles
from assistente.schemas import GraphState

HANDLERS = (
    "lesson_plan",
    "weekly_plan",
    "revision",
    "answer",
    "greeting",
    "farewell",
    "unclear",
    "reset",
)


def _bind(node: Callable[[GraphState, Oracles], dict], oracles: Oracles) -> Callable[[GraphState], dict]:
    """Injeta os oráculos num nó, mantendo a assinatura que o LangGraph espera."""

    def run(state: GraphState) -> dict:
        return node(state, oracles)

    run.__name__ = node.__name__
    return run


def build_graph(oracles: Oracles):
    """Constrói e compila o grafo do assistente."""

    graph = StateGraph(GraphState)

    # ── Nós ────────────────────────────────────────────────
    graph.add_node("intake", intake_node)
    graph.add_node("reset", _bind(reset_node, oracles))
    graph.add_node("negation", _bind(negation_node, oracles))
    graph.add_node("pdf_request", _bind(pdf_request_node, oracles))
    graph.add_node("classification", _bind(classification_node, oracles))
    graph.add_node("lesson_plan", _bind(lesson_plan_node, oracles))
    graph.add_node("weekly_plan", _bind(weekly_plan_node, oracles))
    graph.add_node("revision", _bind(revision_node, oracles))
    graph.add_node("answer", _bind(answer_node, oracles))
    graph.add_node("greeting", _bind(greeting_node, oracles))
    graph.add_node("farewell", _bind(farewell_node, oracles))
    graph.add_node("unclear", _bind(unclear_node, oracles))
    graph.add_node("continue", _bind(continue_node, oracles))
    graph.add_node("respond", respond_node)

    # ── Arestas ────────────────────────────────────────────

    graph.set_entry_point("intake")

    # intake → [comando ou classificação]
    graph.add_conditional_edges(
        "intake",
        route_after_intake,
        {
            "reset": "reset",
            "negation": "negation",
            "pdf_request": "pdf_request",
            "classification": "classification",
        },
    )

    # classification → [handler da intenção]
    graph.add_conditional_edges(
        "classification",
        route_by_state,
        {name: name for name in HANDLERS + ("continue",)},
    )

    # continue → [handler da tarefa retomada] ou resposta direta
    graph.add_conditional_edges(
        "continue",
        route_by_state,
        {name: name for name in HANDLERS + ("respond",)},
    )

    # TODOS os handlers → respond → END
    for name in HANDLERS + ("negation", "pdf_request"):
        graph.add_edge(name, "respond")
    graph.add_edge("respond", END)

    return graph.compile()
