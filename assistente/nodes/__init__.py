from assistente.nodes.intake import intake_node
from assistente.nodes.reset import reset_node, negation_node
from assistente.nodes.pdf_request import pdf_request_node
from assistente.nodes.classification import classification_node
from assistente.nodes.lesson_plan import lesson_plan_node
from assistente.nodes.weekly_plan import weekly_plan_node
from assistente.nodes.revision import revision_node
from assistente.nodes.answer import answer_node
from assistente.nodes.small_talk import greeting_node, farewell_node, unclear_node
from assistente.nodes.continuation import continue_node
from assistente.nodes.respond import respond_node

__all__ = [
    "intake_node",
    "reset_node",
    "negation_node",
    "pdf_request_node",
    "classification_node",
    "lesson_plan_node",
    "weekly_plan_node",
    "revision_node",
    "answer_node",
    "greeting_node",
    "farewell_node",
    "unclear_node",
    "continue_node",
    "respond_node",
]
