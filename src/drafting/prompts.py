from typing import List, Optional

from src.patents.schemas import PatentRecord

SECTION_OUTLINE = """# 발명의 명칭
# 요약
# 청구범위
# 발명의 설명
## 기술분야
## 배경기술
## 발명의 내용
### 해결하려는 과제
### 과제의 해결 수단
### 발명의 효과
## 발명을 실시하기 위한 구체적인 내용"""

REVISION_PROMPT = """다음 특허 명세서를 피드백에 따라 개선해주세요:

=== 기존 명세서 ===
{original_content}

=== 피드백 ===
{feedback}

위 피드백을 반영하여 한국 특허청 형식에 맞게 개선된 특허 명세서를 작성하세요.
다음 구조를 따르되, 단락 번호나 도면 관련 내용은 제외하세요:

{outline}"""

MEMO_PROMPT = """한국 특허청 형식의 완전한 특허 명세서를 작성하세요.

**발명 정보**
- 발명의 명칭: {title}
{inventor_line}
{applicant_line}
- 키워드: {input_text}
- 기술분야: {technical_field}
- 해결할 문제점: {problems}
- 핵심 기능: {features}{reference_info}

**작성 지침**

다음 구조로 완전한 특허 명세서를 작성하세요. 단락 번호([0001] 등)와 도면 관련 내용은 제외합니다.
**중요: 각 섹션을 반드시 완결된 문장으로 마무리하고, 문장이 중간에 끊기지 않도록 하세요.**

# 표지 정보

{cover_info}

# 요약
발명의 핵심 내용을 500-700자로 요약하세요. 기술분야, 해결하려는 과제, 해결 수단, 효과를 포함하여 자연스러운 문장으로 작성하세요.

# 청구범위

**총 3-5개 청구항 작성 (독립항 1-2개, 종속항 2-3개)**

청구항 1
[독립항] 발명의 핵심 구성요소를 포함한 완전한 청구항을 작성하세요. "~를 포함하는 시스템" 또는 "~하는 방법" 형식으로 작성하세요.

청구항 2
[종속항] 청구항 1에 있어서, 가장 중요한 추가 특징을 기재하세요.

청구항 3
[종속항] 청구항 1 또는 2에 있어서, 또 다른 핵심 특징을 기재하세요.

청구항 4 (선택)
[독립항 또는 종속항] 발명의 다른 측면이나 추가 특징을 기재하세요.

청구항 5 (선택)
[종속항] 청구항 1 내지 4 중 어느 한 항에 있어서, 구체적인 실시 형태를 기재하세요.

# 발명의 설명

## 기술분야

본 발명은 {field_sentence}에 관한 것으로, 더욱 상세하게는 [구체적인 기술 내용]에 관한 것이다.

(2개 문단으로 기술분야를 설명하세요. 발명이 속하는 기술 분야와 그 중요성을 설명하세요.)

## 배경기술

종래의 기술에서는 [기존 기술의 내용]이 사용되어 왔다. 그러나 이러한 종래 기술은 다음과 같은 문제점을 가지고 있었다.

첫째, {first_problem}

둘째, [문제점 2에 대한 설명]

따라서, 이러한 문제점들을 해결할 수 있는 새로운 기술의 개발이 요구되고 있는 실정이다.

(3개 문단으로 배경기술과 문제점을 설명하세요.)

## 발명의 내용

### 해결하려는 과제

본 발명은 상기와 같은 종래 기술의 문제점을 해결하기 위하여 안출된 것으로, 그 목적은 [주요 목적]을 제공하는 것이다.

본 발명의 다른 목적은 [부가적인 목적]을 제공하는 것이다.

(2개 문단으로 해결하려는 과제를 명확히 제시하세요.)

### 과제의 해결 수단

상기 목적을 달성하기 위한 본 발명의 일 실시예에 따른 {title}은(는) [핵심 구성요소 1]; [핵심 구성요소 2]; 및 [핵심 구성요소 3]을 포함한다.

상기 [구성요소 1]은(는) [구체적인 기능과 작동 방식]을 수행한다.

상기 [구성요소 2]는 [구체적인 기능]을 수행하며, [작동 원리]를 특징으로 한다.

상기 [구성요소 3]은 [구체적인 기능]을 수행하며, 이를 통해 [달성되는 효과]를 제공한다.

**이 섹션을 반드시 완결된 문장으로 마무리하세요.**

(3-4개 문단으로 발명의 구성과 작동 원리를 설명하세요.)

### 발명의 효과

본 발명에 따르면, [주요 효과 1]을 달성할 수 있다.

또한, 본 발명은 [효과 2]를 제공함으로써, [실용적인 이점]을 가져온다.

더 나아가, 본 발명은 [효과 3]을 통해 [산업적 가치]를 제공한다.

(3개 문단으로 발명의 효과를 설명하세요.)

## 발명을 실시하기 위한 구체적인 내용

이하, 본 발명의 바람직한 실시예를 상세히 설명한다.

**[실시예 1]**

본 발명의 제1 실시예에 따른 {title}은(는) [구체적인 구성]을 포함한다.

[실시예 1의 상세한 설명 - 구성요소, 작동 방식, 구체적인 조건이나 수치 포함]

[실시예 1의 효과 및 특징]

**[실시예 2]**

본 발명의 제2 실시예는 제1 실시예와 유사하나, [차이점]을 특징으로 한다.

[실시예 2의 상세한 설명]

[실시예 2의 효과 및 특징]

**[산업상 이용가능성]**

본 발명은 [산업 분야]에 광범위하게 적용될 수 있다. 특히, [구체적인 응용 분야]에서 유용하게 활용될 수 있다.

또한, 본 발명은 [미래 발전 가능성]을 가지고 있어, [장기적인 산업적 가치]를 제공할 수 있다.

**이 섹션을 반드시 완결된 문장으로 마무리하세요.**

(실시예 2개를 각각 3개 문단으로 작성하고, 산업상 이용가능성을 2개 문단으로 작성하세요.)

**작성 시 주의사항:**
- 모든 섹션을 완결된 문장으로 마무리하세요
- 문장이 중간에 끊기지 않도록 주의하세요
- 자연스러운 문장으로 작성하세요
- 특허 전문 용어를 적절히 사용하세요
- 청구항은 완전한 문장으로 작성하세요"""

DEFAULT_PROMPT = """한국 특허청 형식의 완전한 특허 명세서를 작성하세요.

**발명 정보**
- 발명의 명칭: {title}
{inventor_line}
{applicant_line}
- 키워드: {input_text}

**작성 지침**

다음 구조로 완전한 특허 명세서를 작성하세요. 단락 번호([0001] 등)와 도면 관련 내용은 제외합니다.

# 표지 정보

{cover_info}

# 요약
발명의 핵심 내용을 500-700자로 요약하세요.

# 청구범위
청구항 1-12 (독립항 2개, 종속항 10개)를 완전한 문장으로 작성하세요.

# 발명의 설명

## 기술분야
2-3개 문단

## 배경기술
4개 문단 (종래 기술과 문제점)

## 발명의 내용

### 해결하려는 과제
3개 문단

### 과제의 해결 수단
5개 문단 (구성과 작동 원리)

### 발명의 효과
4개 문단

## 발명을 실시하기 위한 구체적인 내용
실시예 4개 (각 3개 문단) + 산업상 이용가능성 (2개 문단)

모든 내용을 자연스러운 문장으로 작성하고, 특허 전문 용어를 사용하세요."""


def _join_or_na(values: Optional[List[str]]) -> str:
    return ", ".join(values) if values else "N/A"


def build_cover_info(title: str, inventor: str, applicant: str) -> str:
    cover = f"**발명의 명칭:** {title}\n\n"
    if inventor:
        cover += f"**발명자:** {inventor}\n\n"
    if applicant:
        cover += f"**출원인:** {applicant}\n\n"
    return cover


def build_reference_info(patents: List[PatentRecord]) -> str:
    if not patents:
        return ""
    lines = [
        f"- {p.patent_number}: {p.title}\n  요약: {p.summary or 'N/A'}"
        for p in patents
    ]
    return "\n\n참고 특허:\n" + "\n".join(lines)


def build_revision_prompt(original_content: str, feedback: str) -> str:
    return REVISION_PROMPT.format(
        original_content=original_content,
        feedback=feedback,
        outline=SECTION_OUTLINE,
    )


def build_memo_prompt(
    *,
    title: str,
    inventor: str,
    applicant: str,
    input_text: str,
    technical_field: List[str],
    problems: List[str],
    features: List[str],
    reference_patents: List[PatentRecord],
) -> str:
    return MEMO_PROMPT.format(
        title=title,
        inventor_line=f"- 발명자: {inventor}" if inventor else "",
        applicant_line=f"- 출원인: {applicant}" if applicant else "",
        input_text=input_text,
        technical_field=_join_or_na(technical_field),
        problems=_join_or_na(problems),
        features=_join_or_na(features),
        reference_info=build_reference_info(reference_patents),
        cover_info=build_cover_info(title, inventor, applicant),
        field_sentence=", ".join(technical_field) if technical_field else "관련 기술",
        first_problem=problems[0] if problems else "[문제점 1]",
    )


def build_default_prompt(*, title: str, inventor: str, applicant: str, input_text: str) -> str:
    return DEFAULT_PROMPT.format(
        title=title,
        inventor_line=f"- 발명자: {inventor}" if inventor else "",
        applicant_line=f"- 출원인: {applicant}" if applicant else "",
        input_text=input_text,
        cover_info=build_cover_info(title, inventor, applicant),
    )
