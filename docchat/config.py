from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    app_name: str = "DocChat"
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    access_token_expire_days: int = Field(7, alias="ACCESS_TOKEN_EXPIRE_DAYS")
    database_url: str = Field(default="sqlite:///./docchat.db", alias="DATABASE_URL")

    upload_dir: str = Field("./uploads", alias="UPLOAD_DIR")
    max_upload_mb: int = Field(10, alias="MAX_UPLOAD_MB")

    llm_api_key: str | None = Field(default=None, alias="LLM_API_KEY")
    llm_base_url: str = Field("https://api.groq.com/openai/v1", alias="LLM_BASE_URL")
    llm_model: str = Field("openai/gpt-oss-20b", alias="LLM_MODEL")
    llm_timeout_seconds: float = Field(30, alias="LLM_TIMEOUT_SECONDS")
    llm_max_tokens: int = Field(512, alias="LLM_MAX_TOKENS")
    context_max_chars: int = Field(6000, alias="CONTEXT_MAX_CHARS")

    allowed_origins: str = Field("http://localhost:5173", alias="ALLOWED_ORIGINS")

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() in ("prod", "production")

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

@lru_cache
def get_settings() -> Settings:
    return Settings()
