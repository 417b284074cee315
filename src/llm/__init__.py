from src.llm.factory import (
    get_extraction_llm,
    get_drafting_llm,
    clear_llm_cache,
)
from src.llm.client import generate_text
