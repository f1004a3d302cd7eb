"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Placement Advisor"
    app_version: str = "1.0.0"
    debug: bool = True

    # Remote authentication API
    auth_api_base_url: str = "http://localhost:5000/api"
    auth_api_timeout: float = 30.0

    # Session token storage (client cookie)
    token_cookie_name: str = "token"
    token_cookie_max_age: Optional[int] = None  # session cookie if not set
    token_cookie_secure: bool = False

    # Pre-auth client cookie, keys in-flight login/registration submissions
    auth_client_cookie_name: str = "auth_client"

    # LLM Provider settings
    llm_provider: str = "gemini"  # "gemini" or "openai"
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None  # uses provider default if not set
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_timeout: float = 120.0

    # Legacy key name (still accepted)
    google_api_key: Optional[str] = None

    # Generation parameters
    generation_temperature: float = 1.0
    generation_top_p: float = 0.95
    generation_top_k: int = 64
    generation_max_output_tokens: int = 8192
    generation_response_mime_type: str = "text/plain"

    # Advisor persona (built-in placement advisor prompts if not set)
    advisor_system_instruction: Optional[str] = None
    advisor_greeting: Optional[str] = None
    chat_fallback_message: Optional[str] = None

    # Active chat views held in memory
    chat_max_views: int = 1000
    chat_view_idle_timeout: Optional[float] = 3600.0  # seconds

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/placement_advisor.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
