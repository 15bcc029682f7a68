"""Clipper configuration.

Defaults are merged with overrides persisted as JSON. Only the options
declared on :class:`ClipperConfig` are recognized.
"""

import json
import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from article_clipper.clients.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "article-clipper" / "config.json"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class ClipperConfig(BaseModel):
    """Settings for a clip.

    Attributes:
        reading_root: Store folder that holds all clips
        image_dir_name: Media folder name inside each clip folder
        asset_attempts: Total download attempts per asset
        retry_delay: Seconds to wait after a failed asset attempt
        politeness_delay: Seconds to wait after a successful asset download
        timeout: HTTP timeout in seconds
        user_agent: User-Agent header sent with every request
        on_collision: What to do when the clip folder already exists
        max_concurrent_assets: Cap on simultaneous downloads (None = unbounded)
    """

    reading_root: str = Field(default="0 Reading", min_length=1)
    image_dir_name: str = Field(default="images", min_length=1)
    asset_attempts: int = Field(default=4, ge=1)
    retry_delay: float = Field(default=5.0, ge=0)
    politeness_delay: float = Field(default=1.0, ge=0)
    timeout: float = Field(default=30.0, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    on_collision: Literal["fail", "suffix", "overwrite"] = "suffix"
    max_concurrent_assets: int | None = Field(default=None, ge=1)

    model_config = {"extra": "forbid", "validate_assignment": True}


def load_config(path: Path | None = None) -> ClipperConfig:
    """Load configuration, falling back to defaults for missing options.

    Args:
        path: JSON file with overrides (default: DEFAULT_CONFIG_PATH)

    Returns:
        Validated configuration

    Raises:
        ConfigError: If the file is not valid JSON or has invalid options
    """
    path = path or DEFAULT_CONFIG_PATH
    if not path.exists():
        logger.debug(f"No config at {path}, using defaults")
        return ClipperConfig()

    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a JSON object")

    try:
        config = ClipperConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    logger.debug(f"Loaded config from {path}")
    return config


def save_config(config: ClipperConfig, path: Path | None = None) -> Path:
    """Persist the full configuration as JSON.

    Args:
        config: Configuration to write
        path: Destination file (default: DEFAULT_CONFIG_PATH)

    Returns:
        The path written
    """
    path = path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2))
    logger.debug(f"Wrote config to {path}")
    return path
