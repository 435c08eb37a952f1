import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str | None
    gemini_model: str = "gemini-1.5-flash-002"
    request_delay: float = 0.0
    llm_attempts: int = 1
    telegram_bot_token: str | None = None
    dev_mode: bool = False
    webhook_url: str | None = None
    port: int = 8443
    store_dir: str = "analyses"
    forecast_templates_path: str | None = None
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read settings from the environment (and a .env file, if present)."""
    load_dotenv()
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash-002"),
        request_delay=float(os.getenv("LLM_REQUEST_DELAY", "0")),
        llm_attempts=max(1, int(os.getenv("LLM_ATTEMPTS", "1"))),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN"),
        dev_mode=os.getenv("DEV_MODE", "False").lower() == "true",
        webhook_url=os.getenv("WEBHOOK_URL"),
        port=int(os.getenv("PORT", "8443")),
        store_dir=os.getenv("ANALYSIS_STORE_DIR", "analyses"),
        forecast_templates_path=os.getenv("FORECAST_TEMPLATES_PATH") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
