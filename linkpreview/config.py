from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko)"
)
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LINKPREVIEW_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = DEFAULT_ACCEPT
    accept_encoding: str = "gzip, deflate"
    max_redirects: int = 20

    # Subresource prefetch
    fetch_subresources: bool = False
    image_timeout: float = 15.0
    video_timeout: float = 30.0
    max_image_bytes: int = 5_000_000
    max_video_bytes: int = 20_000_000


@lru_cache
def get_settings() -> Settings:
    return Settings()
