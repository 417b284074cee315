"""Specification drafter.

Graph topology::

    START → build_prompt → generate → check_response → END
"""

from langgraph.graph import StateGraph, END

from src.agents.state import DraftAgentState
from src.agents.draft.nodes import (
    build_prompt_node,
    generate_node,
    check_response_node,
)


def create_draft_agent():
    workflow = StateGraph(DraftAgentState)

    # Nodes
    workflow.add_node("build_prompt", build_prompt_node)
    workflow.add_node("generate", generate_node)
    workflow.add_node("check_response", check_response_node)

    # Edges
    workflow.set_entry_point("build_prompt")
    workflow.add_edge("build_prompt", "generate")
    workflow.add_edge("generate", "check_response")
    workflow.add_edge("check_response", END)

    return workflow.compile()


draft_agent = create_draft_agent()
