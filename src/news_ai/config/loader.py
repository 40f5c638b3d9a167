"""YAML configuration loading utilities."""

from pathlib import Path

import yaml

from news_ai.config.models import NewsAIConfig


def load_config(path: Path | str) -> NewsAIConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML config file.

    Returns:
        Validated NewsAIConfig. An empty file yields all defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f)

    return NewsAIConfig.model_validate(raw or {})


def get_default_config_path() -> Path:
    """Get path to default config file."""
    return Path(__file__).resolve().parents[3] / "configs" / "default.yaml"
