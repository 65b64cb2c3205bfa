from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from credly_client.errors import ConfigError
from credly_client.services.credly_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, CredlyClient


class AppConfig(BaseSettings):
    """Settings read from ``CREDLY_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="CREDLY_")

    api_token: str = Field(default="", repr=False)
    organization_id: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def load(cls, **overrides) -> "AppConfig":
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def build_client(self) -> CredlyClient:
        missing = [
            name
            for name, value in (("CREDLY_API_TOKEN", self.api_token), ("CREDLY_ORGANIZATION_ID", self.organization_id))
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing configuration: {', '.join(missing)}")
        return CredlyClient.create(
            self.api_token,
            self.organization_id,
            base_url=self.base_url,
            timeout=self.timeout,
        )
