import logging

from src.agents.state import DraftAgentState
from src.drafting.prompts import build_default_prompt, build_memo_prompt, build_revision_prompt
from src.drafting.schemas import GenerateDraftRequest
from src.llm.client import generate_text
from src.llm.factory import get_drafting_llm

logger = logging.getLogger(__name__)

TIMEOUT_MARKERS = ("FUNCTION_INVOCATION_TIMEOUT", "An error occurred")


def resolve_title(request: GenerateDraftRequest) -> str:
    """User title, else '<first keyword> 기반 시스템'."""
    title = (request.invention_title or "").strip()
    if title:
        return title
    input_text = request.input_text
    head = input_text.split(",")[0].strip() or input_text[:30]
    return f"{head} 기반 시스템"


def build_prompt_node(state: DraftAgentState):
    request = state["request"]
    title = resolve_title(request)
    inventor = (request.inventor or "").strip()
    applicant = (request.applicant or "").strip()

    if request.wants_revision and request.revision_source and request.revision_feedback:
        kind = "revision"
        prompt = build_revision_prompt(request.revision_source, request.revision_feedback)
    elif request.structured_data is not None and request.mode == "memo":
        kind = "memo"
        data = request.structured_data
        prompt = build_memo_prompt(
            title=title,
            inventor=inventor,
            applicant=applicant,
            input_text=request.input_text,
            technical_field=data.technical_field,
            problems=data.problems,
            features=data.features,
            reference_patents=request.reference_patents,
        )
    else:
        kind = "default"
        prompt = build_default_prompt(
            title=title,
            inventor=inventor,
            applicant=applicant,
            input_text=request.input_text,
        )

    logger.info("[generate] Using %s prompt (%d chars)", kind, len(prompt))
    return {"prompt_kind": kind, "prompt": prompt}


async def generate_node(state: DraftAgentState):
    llm = get_drafting_llm()
    text = await generate_text(llm, state["prompt"])
    return {"result": text}


def check_response_node(state: DraftAgentState):
    """Catch gateway timeouts and HTML error pages returned as 'text'."""
    text = state.get("result") or ""
    if any(marker in text for marker in TIMEOUT_MARKERS):
        logger.error("[generate] Upstream timeout marker in response")
        return {"error_kind": "timeout", "errors": ["timeout"], "result": None}
    if text.strip().startswith("<"):
        logger.error("[generate] HTML response from generation endpoint: %s", text[:120])
        return {"error_kind": "invalid_response", "errors": ["invalid_response"], "result": None}
    return {"error_kind": None, "errors": []}
