"""Configuration management for benchreport."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_DIR = PROJECT_ROOT / "configs"
RESULTS_DIR = Path("results")

DEFAULT_ENDPOINT = "https://gql.codspeed.io/"
DEFAULT_TIMEOUT = 10.0

# YAML section -> AppConfig fields it may set
YAML_SECTIONS = {
    "api": {"token": "api_token", "endpoint": "api_endpoint", "timeout": "api_timeout"},
    "repository": {"owner": "owner", "name": "name"},
    "report": {"title": "report_title", "output": "output_path"},
}


@dataclass
class AppConfig:
    """Application configuration with environment-based defaults."""

    api_token: Optional[str] = field(default_factory=lambda: os.getenv("CODSPEED_GRAPHQL_TOKEN"))
    api_endpoint: str = field(
        default_factory=lambda: os.getenv("CODSPEED_GRAPHQL_ENDPOINT", DEFAULT_ENDPOINT)
    )
    api_timeout: float = field(
        default_factory=lambda: float(os.getenv("CODSPEED_API_TIMEOUT", DEFAULT_TIMEOUT))
    )

    owner: Optional[str] = field(default_factory=lambda: os.getenv("CODSPEED_REPOSITORY_OWNER"))
    name: Optional[str] = field(default_factory=lambda: os.getenv("CODSPEED_REPOSITORY_NAME"))

    report_title: Optional[str] = None
    output_path: Path = field(default_factory=lambda: RESULTS_DIR / "report.md")

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.output_path = Path(self.output_path)
        self.api_timeout = float(self.api_timeout)
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        if not self.api_token:
            import warnings
            warnings.warn("CODSPEED_GRAPHQL_TOKEN not set. API calls will fail at runtime.")

        if self.api_timeout <= 0:
            raise ValueError(f"api_timeout must be positive, got {self.api_timeout}")

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.name}"


def load_config_from_yaml(config_path: Path, **overrides: Any) -> AppConfig:
    """Load an AppConfig from a YAML file.

    Values in the file override the environment defaults, keyword overrides
    that are not None win over both.

    Args:
        config_path: Path to the YAML file
        **overrides: AppConfig field values

    Returns:
        AppConfig instance
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    values: Dict[str, Any] = {}
    for section, section_values in data.items():
        if section not in YAML_SECTIONS:
            raise ValueError(f"Unknown config section '{section}' in {config_path}")
        section_values = section_values or {}
        if not isinstance(section_values, dict):
            raise ValueError(f"Config section '{section}' must be a mapping in {config_path}")
        for key, value in section_values.items():
            if key not in YAML_SECTIONS[section]:
                raise ValueError(f"Unknown config key '{section}.{key}' in {config_path}")
            values[YAML_SECTIONS[section][key]] = value

    known = {f.name for f in fields(AppConfig)}
    values.update({k: v for k, v in overrides.items() if k in known and v is not None})
    return AppConfig(**values)
