"""Configuration management using Pydantic Settings"""

from urllib.parse import urlsplit

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Backends
    sager_api_base: str = "http://10.0.2.2:8000/"
    mandii_api_base: str = "http://10.0.2.2:8001/"

    # Destinations
    sager_public_url: str = "http://10.0.2.2:8000/"
    mandii_feed_path: str = "v1/feed/page/"
    mandii_shop_path: str = "v1/shop/{shop_id}/"

    # Service
    service_name: str = "my-sanvi"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 30.0  # connect/read/write ceiling for mobile networks

    # Shop profile
    summary_days: int = 14
    summary_top: int = 10
    overview_fallback_amount: str = "1250"
    overview_fallback_count: int = 8

    @property
    def mandii_host(self) -> str:
        """host:port used to allow-list navigation inside the community web view"""
        return urlsplit(self.mandii_api_base).netloc

    @property
    def mandii_feed_url(self) -> str:
        return self.mandii_api_base.rstrip("/") + "/" + self.mandii_feed_path.lstrip("/")

    def mandii_shop_url(self, shop_id: int) -> str:
        path = self.mandii_shop_path.format(shop_id=shop_id)
        return self.mandii_api_base.rstrip("/") + "/" + path.lstrip("/")


settings = Settings()
