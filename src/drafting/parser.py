"""Recovers sections and a short structured summary from generated draft text."""

import re
from typing import List, Optional, Tuple

from src.drafting.schemas import DraftSection, StructuredSummary

# (section title, colour, heading markers), checked in order for every line
SECTION_RULES: List[Tuple[str, str, Tuple[str, ...]]] = [
    ("기술분야", "blue", ("기술분야", "기술 분야")),
    ("발명배경", "green", ("배경기술", "발명의 배경")),
    ("구성요소", "cyan", ("구성요소", "주요 구성", "시스템 구성", "장치 구성")),
    ("발명내용", "teal", ("발명의 내용", "발명 내용", "구체적인 내용", "실시예")),
    ("해결과제", "orange", ("해결하고자 하는 과제", "해결하려는 과제", "해결과제")),
    ("해결수단", "purple", ("과제의 해결 수단", "해결 수단", "발명의 구성")),
    ("발명효과", "red", ("발명의 효과", "효과")),
    ("청구항", "indigo", ("청구항", "청구범위")),
    ("요약", "gray", ("요약",)),
]

CLAIM_PATTERN = re.compile(r"【청구항\s*\d+】[^【]*")
CLAIM_MARKER = re.compile(r"【청구항\s*\d+】")
SENTENCE_SPLIT = re.compile(r"[.。]")
LIST_PREFIX = re.compile(r"^[\d\-•.\s]+")

TITLE_PATTERN = re.compile(r"발명의\s*명칭[:\s]*(.+?)(?:\n|$)")
ABSTRACT_PATTERN = re.compile(r"요약[:\s]*\n([\s\S]*?)(?=\n\n|청구|기술분야|\Z)")
CLAIMS_SECTION_PATTERN = re.compile(r"【?청구항[\s\S]*?(?=\n\n|발명의\s*효과|\Z)")
FIELD_PATTERN = re.compile(r"기술\s*분야[:\s]*\n([\s\S]*?)(?=\n\n|배경|\Z)")
PROBLEMS_PATTERN = re.compile(
    r"해결하(?:[고자]*\s*하는|려는)\s*과제[:\s]*\n([\s\S]*?)(?=\n\n과제의\s*해결|발명의\s*효과|\Z)"
)
EFFECTS_PATTERN = re.compile(r"발명의\s*효과[:\s]*\n([\s\S]*?)(?=\n\n|청구|\Z)")


def clean_content(content: str) -> str:
    """Strip markdown emphasis markers."""
    if not content:
        return content
    return content.replace("**", "").replace("*", "")


def _match_section(line: str) -> Optional[Tuple[str, str]]:
    for title, color, markers in SECTION_RULES:
        if any(marker in line for marker in markers):
            return title, color
    return None


def _first_sentence(text: str) -> str:
    return SENTENCE_SPLIT.split(text)[0]


def _summarize(text: str, section_title: str) -> str:
    cleaned = text.strip()
    if not cleaned:
        return ""

    if section_title == "청구항":
        claims = CLAIM_PATTERN.findall(cleaned)
        if claims:
            return "\n".join(
                f"• {_first_sentence(CLAIM_MARKER.sub('', claim, count=1).strip())}..."
                for claim in claims[:5]
            )

    sentences = [s.strip() for s in SENTENCE_SPLIT.split(cleaned) if s.strip()]
    if not sentences:
        return cleaned[:200] + "..."

    summary = ". ".join(sentences[:3]) + "."
    return summary[:300] + "..." if len(summary) > 300 else summary


def split_sections(content: str) -> List[DraftSection]:
    """Split a draft at its section headings, keeping the full body text."""
    sections: List[DraftSection] = []
    current: Optional[DraftSection] = None

    for line in clean_content(content or "").split("\n"):
        # 【청구항 N】 lines are claim bodies, not headings
        if CLAIM_MARKER.match(line.strip()):
            if not current or current.title != "청구항":
                if current:
                    sections.append(current)
                current = DraftSection(title="청구항", content="", color="indigo")
            current.content += line + "\n"
            continue

        matched = _match_section(line.strip())
        if matched:
            if current:
                sections.append(current)
            current = DraftSection(title=matched[0], content="", color=matched[1])
        elif current:
            current.content += line + "\n"

    if current:
        sections.append(current)
    return [s for s in sections if s.content.strip()]


def parse_draft_sections(content: str) -> List[DraftSection]:
    """Split a draft into summarised sections, in the order they appear."""
    return [
        DraftSection(title=s.title, color=s.color, content=_summarize(s.content, s.title))
        for s in split_sections(content)
    ]


def _list_items(block: str) -> List[str]:
    items = []
    for line in block.split("\n"):
        trimmed = line.strip()
        if re.match(r"^[\d\-•]", trimmed) or len(trimmed) > 20:
            items.append(LIST_PREFIX.sub("", trimmed).strip())
    return items[:3]


def parse_structured_summary(content: str, invention_title: str = "") -> StructuredSummary:
    cleaned = clean_content(content or "")

    title_match = TITLE_PATTERN.search(cleaned)
    title = title_match.group(1).strip() if title_match else (invention_title or "제목 없음")

    abstract_match = ABSTRACT_PATTERN.search(cleaned)
    abstract = abstract_match.group(1).strip() if abstract_match else ""

    claims: List[str] = []
    claims_section = CLAIMS_SECTION_PATTERN.search(cleaned)
    if claims_section:
        for claim in CLAIM_PATTERN.findall(claims_section.group(0))[:3]:
            sentence = _first_sentence(CLAIM_MARKER.sub("", claim, count=1).strip())
            claims.append(sentence[:150] + "..." if len(sentence) > 150 else sentence)

    technical_field = ""
    field_match = FIELD_PATTERN.search(cleaned)
    if field_match:
        sentences = [s.strip() for s in SENTENCE_SPLIT.split(field_match.group(1)) if s.strip()]
        if sentences:
            technical_field = ". ".join(sentences[:2]) + "."

    problems_match = PROBLEMS_PATTERN.search(cleaned)
    problems = _list_items(problems_match.group(1)) if problems_match else []

    effects_match = EFFECTS_PATTERN.search(cleaned)
    effects = _list_items(effects_match.group(1)) if effects_match else []

    return StructuredSummary(
        title=title,
        abstract=abstract,
        claims=claims,
        technical_field=technical_field,
        problems=problems,
        effects=effects,
    )
