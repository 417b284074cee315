KEYWORD_EXTRACTION_PROMPT = """다음 텍스트에서 특허 명세서 작성에 필요한 정보를 추출해주세요.

텍스트: {text}

다음 형식의 JSON으로만 응답해주세요:
{{
  "keywords": ["키워드1", "키워드2", ...],  // 7-20개의 핵심 기술 키워드
  "technicalField": ["분야1", "분야2", "분야3"],  // 3-5개의 기술 분야 (예: "IoT", "농업", "자동화")
  "problems": ["문제1", "문제2", "문제3"],  // 3-5개의 해결하려는 문제점들
  "features": ["기능1", "기능2", ...],  // 3-7개의 핵심 기능/특징
}}

JSON 형식으로만 응답하고, 다른 설명은 포함하지 마세요."""


def build_extraction_prompt(text: str) -> str:
    return KEYWORD_EXTRACTION_PROMPT.format(text=text)
