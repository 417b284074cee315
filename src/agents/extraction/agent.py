"""Keyword extraction: generate, then recover structured fields.

Graph topology::

    START → generate → recover → END
"""

import logging

from langgraph.graph import StateGraph, END

from src.agents.state import ExtractionAgentState
from src.extraction.parser import recover_extracted_data
from src.extraction.prompts import build_extraction_prompt
from src.llm.client import generate_text
from src.llm.factory import get_extraction_llm

logger = logging.getLogger(__name__)


async def generate_node(state: ExtractionAgentState):
    llm = get_extraction_llm()
    raw = await generate_text(
        llm,
        build_extraction_prompt(state["text"]),
        empty_message="키워드 추출 결과가 없습니다.",
    )
    return {"raw_response": raw}


def recover_node(state: ExtractionAgentState):
    extracted = recover_extracted_data(state.get("raw_response") or "")
    if extracted is None:
        logger.error("[extract-keywords] No JSON object or keyword list in model response")
        return {"errors": ["unparseable response"]}
    return {"extracted_data": extracted, "errors": []}


def create_extraction_agent():
    workflow = StateGraph(ExtractionAgentState)
    workflow.add_node("generate", generate_node)
    workflow.add_node("recover", recover_node)
    workflow.set_entry_point("generate")
    workflow.add_edge("generate", "recover")
    workflow.add_edge("recover", END)
    return workflow.compile()


extraction_agent = create_extraction_agent()
