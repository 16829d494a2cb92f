from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	# Optional: cheaper model for enrichment calls (dissections, deeper questions)
	gemini_model_enrich: str | None = Field(default=None, validation_alias="GEMINI_MODEL_ENRICH")
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# OpenRouter fallback configuration (optional)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="openai/gpt-4o-mini", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="DigiCraft", validation_alias="OPENROUTER_TITLE")

	# Per-request HTTP timeout and whole-batch ceiling, in seconds
	llm_request_timeout_seconds: float = Field(default=90, validation_alias="LLM_REQUEST_TIMEOUT_SECONDS")
	generation_timeout_seconds: float = Field(default=120, validation_alias="GENERATION_TIMEOUT_SECONDS")

	# Debug mode records prompts (_meta) and writes the AI log; usage tracking adds _usage
	debug_mode: bool = Field(default=False, validation_alias="DEBUG_MODE")
	track_usage: bool = Field(default=True, validation_alias="TRACK_USAGE")

	# Store caps (oldest entries evicted first)
	max_products: int = Field(default=100, validation_alias="MAX_PRODUCTS")
	max_configurations: int = Field(default=200, validation_alias="MAX_CONFIGURATIONS")
	max_log_entries: int = Field(default=500, validation_alias="MAX_LOG_ENTRIES")

	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
