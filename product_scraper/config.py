"""Application configuration using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # App Settings
    debug: bool = False
    log_level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    app_host: str = "0.0.0.0"
    app_port: int = 8001

    # ==========================================================================
    # Static Fetch Settings
    # ==========================================================================
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )
    accept_language: str = "en-US,en;q=0.9"
    default_referer: str = "https://www.google.com/"
    static_request_timeout: float = 30.0
    static_follow_redirects: bool = True

    # ==========================================================================
    # Headless Browser Settings
    # ==========================================================================
    headless_navigation_timeout_ms: int = 30000
    headless_locale: str = "en-US"
    headless_launch_args: list[str] = [
        "--disable-blink-features=AutomationControlled",
        "--disable-dev-shm-usage",
        "--no-sandbox",
    ]
    # Dwell time after network idle, drawn uniformly from [min, max)
    dwell_delay_min_seconds: float = 2.0
    dwell_delay_max_seconds: float = 4.0

    # ==========================================================================
    # Fallback Settings
    # ==========================================================================
    # When True, a hard static failure (network error) also escalates to headless
    escalate_on_static_failure: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
