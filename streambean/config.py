from types import MappingProxyType
from typing import Mapping
import logging

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

PRODUCTION_BASE_URL = "https://api.streambean.tv"


class CategoryConfig(BaseModel):
    """Upstream category a client-facing key resolves to"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


DEFAULT_CATEGORIES: dict[str, dict[str, str]] = {
    "gaming": {"id": "000000", "name": "Gaming"},
    "irl": {"id": "509660", "name": "IRL"},
    "just-chatting": {"id": "509658", "name": "Just Chatting"},
    "asmr": {"id": "509659", "name": "ASMR"},
    "music": {"id": "26936", "name": "Music"},
    "art": {"id": "509664", "name": "Art"},
    "djs": {"id": "1669431183", "name": "DJs"},
    "animals-aquariums-and-zoos": {"id": "272263131", "name": "Animals, Aquariums, and Zoos"},
    "sports": {"id": "518203", "name": "Sports"},
    "talk-shows-and-podcasts": {"id": "417752", "name": "Talk Shows and Podcasts"},
    "co-working-and-studying": {"id": "1599346425", "name": "Co-working and Studying"},
    "software-and-game-development": {"id": "1469308723", "name": "Software and Game Development"},
    "miniatures-and-models": {"id": "1397210469", "name": "Miniatures and Models"},
    "makers-and-crafting": {"id": "509673", "name": "Makers and Crafting"},
    "food-and-drink": {"id": "509667", "name": "Food and Drink"},
    "writing-and-reading": {"id": "772157971", "name": "Writing and Reading"},
}


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    twitch_client_id: str = ""
    twitch_client_secret: str = ""
    twitch_auth_url: str = "https://id.twitch.tv/oauth2/token"
    twitch_api_base_url: str = "https://api.twitch.tv/helix"

    environment: str = "development"
    port: int = 8018
    public_base_url: str | None = None  # Derived from environment/port when unset
    landing_iframe_url: str = "https://trentbrew.com/tv"
    log_level: str = "INFO"

    upstream_timeout_sec: float = 10.0
    streams_page_size: int = 100
    search_page_size: int = 20
    schedule_fetch_concurrency: int = 0  # 0 means one in-flight lookup per broadcaster
    schedule_lookup_timeout_sec: float = 0  # 0 disables the per-lookup timeout

    categories: dict[str, CategoryConfig] = {
        key: CategoryConfig(**value) for key, value in DEFAULT_CATEGORIES.items()
    }

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("twitch_auth_url", "twitch_api_base_url", "landing_iframe_url", "public_base_url")
    @classmethod
    def validate_urls(cls, value: str | None, info) -> str | None:
        """Validate configured URLs are HTTP/HTTPS."""
        if value is None:
            return value
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"{info.field_name} must be an HTTP/HTTPS URL: {value}")
        return value.rstrip("/")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, value: str) -> str:
        """Validate deployment environment name."""
        normalized = value.lower()
        allowed = {"development", "production", "test"}
        if normalized not in allowed:
            raise ValueError(f"environment must be one of {sorted(allowed)}")
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate logging level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError("port must be between 1 and 65535")
        return value

    @field_validator("upstream_timeout_sec")
    @classmethod
    def validate_upstream_timeout(cls, value: float) -> float:
        """Validate upstream HTTP timeout (seconds)."""
        if value <= 0:
            raise ValueError("upstream_timeout_sec must be > 0")
        return value

    @field_validator("streams_page_size", "search_page_size")
    @classmethod
    def validate_page_sizes(cls, value: int, info) -> int:
        """Helix accepts between 1 and 100 items per page."""
        if not 1 <= value <= 100:
            raise ValueError(f"{info.field_name} must be between 1 and 100")
        return value

    @field_validator("schedule_fetch_concurrency", "schedule_lookup_timeout_sec")
    @classmethod
    def validate_non_negative(cls, value, info):
        """Ensure fetcher limits are non-negative (0 disables them)."""
        if value < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return value

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, value: dict[str, CategoryConfig]) -> dict[str, CategoryConfig]:
        """Reject blank category keys."""
        for key in value:
            if not key.strip():
                raise ValueError("category keys must not be blank")
        return value

    @model_validator(mode="after")
    def validate_credentials(self):
        """Validate cross-field configuration."""
        if not self.twitch_client_id or not self.twitch_client_secret:
            logger.warning(
                "Twitch credentials not configured - upstream requests will fail"
            )
        return self

    @property
    def base_url(self) -> str:
        """Public base URL used to build player links."""
        if self.public_base_url:
            return self.public_base_url
        if self.environment == "production":
            return PRODUCTION_BASE_URL
        return f"http://localhost:{self.port}"

    def category_table(self) -> Mapping[str, CategoryConfig]:
        """Read-only view of the category table for injection into services."""
        return MappingProxyType(dict(self.categories))

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Environment: %s", self.environment)
        logger.info("  Base URL: %s", self.base_url)
        logger.info("  Twitch API: %s", self.twitch_api_base_url)
        logger.info("  Twitch Client ID: %s", "configured" if self.twitch_client_id else "missing")
        logger.info("  Upstream Timeout: %ss", self.upstream_timeout_sec)
        logger.info("  Streams Page Size: %s", self.streams_page_size)
        logger.info("  Search Page Size: %s", self.search_page_size)
        logger.info(
            "  Schedule Fetch Concurrency: %s",
            self.schedule_fetch_concurrency or "unbounded",
        )
        logger.info(
            "  Schedule Lookup Timeout: %s",
            f"{self.schedule_lookup_timeout_sec}s" if self.schedule_lookup_timeout_sec else "disabled",
        )
        logger.info("  Categories: %s configured", len(self.categories))


settings = CustomSettings()


def get_settings() -> CustomSettings:
    """Settings dependency for FastAPI"""
    return settings


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
