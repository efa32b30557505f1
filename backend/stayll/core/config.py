"""
Application configuration
"""

from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Logging Settings
    LOG_LEVEL: str = "INFO"

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Stayll Listing Service"
    VERSION: str = "1.0.0"

    # CORS Settings
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Database Settings
    DATABASE_URL: str = "sqlite:///./stayll.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Hugging Face Inference
    HUGGINGFACE_API_KEY: str = ""
    HUGGINGFACE_API_URL: str = "https://api-inference.huggingface.co/models"
    HUGGINGFACE_MODELS: str = "tiiuae/falcon-7b-instruct,google/flan-t5-base,gpt2"

    # Google Gemini
    GEMINI_API_KEY: str = ""
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"
    GEMINI_MODEL: str = "gemini-2.0-flash-lite"

    # Provider orchestration
    PROVIDER_ORDER: str = "huggingface,gemini"
    PROVIDER_TIMEOUT_SECONDS: float = 10.0
    GENERATION_MAX_LENGTH: int = 150
    GENERATION_TEMPERATURE: float = 0.8
    SUBSTITUTE_ON_STATUS: List[int] = [404, 500, 502, 503, 504]  # any 5xx always substitutes

    # Environment
    ENVIRONMENT: str = "development"  # development, staging, production

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def get_database_url(self) -> str:
        """Database URL with legacy postgres:// scheme normalised"""
        if self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)
        return self.DATABASE_URL

    def get_cors_origins(self) -> List[str]:
        """Return the list of allowed CORS origins"""
        if self.BACKEND_CORS_ORIGINS:
            origins = [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]
            return origins if origins else self.CORS_ORIGINS
        return self.CORS_ORIGINS

    def get_huggingface_models(self) -> List[str]:
        return [m.strip() for m in self.HUGGINGFACE_MODELS.split(",") if m.strip()]

    def get_provider_order(self) -> List[str]:
        return [p.strip().lower() for p in self.PROVIDER_ORDER.split(",") if p.strip()]


# Create global settings instance
settings = Settings()
