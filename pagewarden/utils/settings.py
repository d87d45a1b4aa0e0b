import logging
import os

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

env_path = os.getenv("ENV_PATH")
if not env_path:
    logger.debug("ENV_PATH is not set, using default values")


class Settings(BaseSettings):
    DISMISS_TIMEOUT_SECONDS: float = 1.0
    CLICK_TIMEOUT_SECONDS: float = 2.0
    BANNER_WAIT_SECONDS: float = 0.5
    RELOAD_WAIT_SECONDS: float = 1.0

    # Upper bound for the resolve-until-quiescent loop after navigation
    MAX_RESOLVE_ITERATIONS: int = 5

    DIRECT_INJECTION_DOMAINS: list[str] = ["bing.com"]
    CATALOG_PATH: str | None = None

    TAB_WAIT_SECONDS: float = 1.0
    HOME_TAB_HOSTNAME: str = "rewards.bing.com"

    SEARCH_START_WAIT_SECONDS: float = 5.0
    SEARCH_STEP_WAIT_SECONDS: float = 0.5
    SEARCH_RETRY_WAIT_SECONDS: float = 2.0
    SEARCH_MAX_ATTEMPTS: int = 3

    SEARCH_ON_BING_LOCAL_QUERIES: bool = False
    LOCAL_QUERIES_PATH: str = "queries.json"
    REMOTE_QUERIES_URL: str = (
        "https://raw.githubusercontent.com/TheNetsky/Microsoft-Rewards-Script"
        "/refs/heads/main/src/functions/queries.json"
    )

    class Config:
        env_file = env_path if env_path else None
        extra = "allow"


settings = Settings()
