"""
Configuration management for the storefront core.

Loads settings from a YAML config file and provides typed access.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import yaml

# Load environment variables from .env file (LOG_LEVEL and friends)
from dotenv import load_dotenv
load_dotenv()


def _project_root() -> Path:
    """Return project root (parent of the storefront package)."""
    return Path(__file__).resolve().parent.parent.parent


DEFAULT_CONFIG_PATH = _project_root() / "config" / "default.yaml"


@dataclass
class StorefrontConfig:
    """Configuration for the catalog loader, listings and highlight sections."""

    # Catalog sources
    base_url: str = "http://localhost:4200"
    primary_url: str = "/assets/json/shop.json"
    fallback_url: str = "assets/json/shop.json"

    # Retry policy (extra attempts after the first one, per source)
    primary_retries: int = 2
    fallback_retries: int = 1
    retry_delay: float = 0.5            # seconds between attempts
    request_timeout: float = 30.0       # seconds per HTTP request

    # Listing
    page_size: int = 9

    # Home page sections
    highlight_limit: int = 3            # blended top highlights
    section_limit: int = 4              # featured / best seller / hot sale rows

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "StorefrontConfig":
        """Load configuration from YAML file."""
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        if not path.exists():
            return cls()

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        catalog_config = data.get('catalog', {})
        retry_config = catalog_config.get('retry', {})
        listing_config = data.get('listing', {})
        highlights_config = data.get('highlights', {})

        defaults = cls()
        return cls(
            base_url=catalog_config.get('base_url', defaults.base_url),
            primary_url=catalog_config.get('primary_url', defaults.primary_url),
            fallback_url=catalog_config.get('fallback_url', defaults.fallback_url),
            primary_retries=int(retry_config.get('primary', defaults.primary_retries)),
            fallback_retries=int(retry_config.get('fallback', defaults.fallback_retries)),
            retry_delay=float(retry_config.get('delay', defaults.retry_delay)),
            request_timeout=float(catalog_config.get('request_timeout', defaults.request_timeout)),
            page_size=int(listing_config.get('page_size', defaults.page_size)),
            highlight_limit=int(highlights_config.get('limit', defaults.highlight_limit)),
            section_limit=int(highlights_config.get('section_limit', defaults.section_limit)),
        )


# Global config instance
_config: Optional[StorefrontConfig] = None


def get_config() -> StorefrontConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = StorefrontConfig.from_yaml()
    return _config


def set_config(config: Optional[StorefrontConfig]) -> None:
    """Set (or, with None, reset) the global configuration instance."""
    global _config
    _config = config
