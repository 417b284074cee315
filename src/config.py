from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Patent Draft Assistant"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:3001",
    ]

    # LLM providers per role: "ollama" | "openai" | "anthropic"
    LLM_PROVIDER_EXTRACTION: str = "ollama"
    LLM_PROVIDER_DRAFTING: str = "ollama"
    LLM_REQUEST_TIMEOUT: float = 300.0

    # Ollama (text-generation endpoint)
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL_EXTRACTION: str = "gpt-oss:120b-128k"
    OLLAMA_MODEL_DRAFTING: str = "gpt-oss:120b-128k"

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL_EXTRACTION: str = "gpt-4o-mini"
    OPENAI_MODEL_DRAFTING: str = "gpt-4o"

    # Anthropic
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_MODEL_EXTRACTION: str = "claude-3-5-haiku-latest"
    ANTHROPIC_MODEL_DRAFTING: str = "claude-3-5-sonnet-latest"

    # Generation parameters
    EXTRACTION_TEMPERATURE: float = 0.3
    DRAFTING_TEMPERATURE: float = 0.9
    DRAFTING_TOP_K: int = 40
    DRAFTING_TOP_P: float = 0.95
    MAX_OUTPUT_TOKENS: int = 8192

    # Biznavi patent search
    BIZNAVI_SEARCH_URL: str = "https://api.biznavi.co.kr/api/v1/common/patent/selectKeyword"
    BIZNAVI_DETAIL_URL: str = "https://api.biznavi.co.kr/api/v1/common/patent"
    BIZNAVI_TOKEN: str = ""
    BIZNAVI_X_TOKEN: str = ""
    BIZNAVI_GW_TOKEN: str = ""
    BIZNAVI_TIMEOUT: float = 30.0
    BIZNAVI_RETRIES: int = 3
    BIZNAVI_RETRY_DELAY: float = 1.0
    PATENT_SEARCH_PAGE_SIZE: int = 10

    # Patent source: the live API or local JSON files
    PATENT_SOURCE: Literal["api", "file"] = "api"
    PATENT_DATA_DIR: str = "data/patents"
    PATENT_CACHE_TTL_SECONDS: int = 3600

    # Saved sessions
    SAVED_SESSIONS_DIR: str = "data/saved-patents"

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")

    @property
    def biznavi_x_token(self) -> str:
        # The admin token takes precedence over the regular one
        return self.BIZNAVI_TOKEN or self.BIZNAVI_X_TOKEN

settings = Settings()
