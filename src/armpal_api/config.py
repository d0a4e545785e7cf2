"""Configuration settings for the ArmPal API."""
import os
from typing import Literal


EnvironmentType = Literal["development", "staging", "production"]
ProviderType = Literal["openai", "anthropic"]


class Settings:
    """Application settings."""

    # Feature flags
    HELICONE_ENABLED: bool = False

    # Environment
    ENVIRONMENT: EnvironmentType = "development"

    # Model selection
    AI_PROVIDER: ProviderType = "openai"
    CONVERTER_MODEL: str = "gpt-4o-mini"
    ANTHROPIC_MODEL: str = "claude-3-5-sonnet-20241022"
    FOOD_SCAN_MODEL: str = "gpt-4o-mini"
    CHAT_MODEL: str = "gpt-4o-mini"

    # API Keys
    OPENAI_API_KEY: str | None = None
    ANTHROPIC_API_KEY: str | None = None
    HELICONE_API_KEY: str | None = None

    # Profile store
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        provider = os.getenv("AI_PROVIDER", "openai").lower()
        self.AI_PROVIDER = provider if provider in ("openai", "anthropic") else "openai"  # type: ignore
        self.CONVERTER_MODEL = os.getenv("CONVERTER_MODEL", self.CONVERTER_MODEL)
        self.ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", self.ANTHROPIC_MODEL)
        self.FOOD_SCAN_MODEL = os.getenv("FOOD_SCAN_MODEL", self.FOOD_SCAN_MODEL)
        self.CHAT_MODEL = os.getenv("CHAT_MODEL", self.CHAT_MODEL)

        # Feature flags
        self.HELICONE_ENABLED = os.getenv("HELICONE_ENABLED", "false").lower() == "true"

        # API Keys
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
        self.ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
        self.HELICONE_API_KEY = os.getenv("HELICONE_API_KEY")

        self.SUPABASE_URL = os.getenv("SUPABASE_URL")
        self.SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

        origins = os.getenv("CORS_ORIGINS")
        if origins:
            self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]


def tier_gate_bypassed() -> bool:
    """True when BYPASS_TIER_GATE is set to 'true' (any case)."""
    return os.getenv("BYPASS_TIER_GATE", "").strip().lower() == "true"


settings = Settings()
