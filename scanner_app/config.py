"""Configuration helpers for the shopping scanner app."""

from dataclasses import dataclass, field
from pathlib import Path
import os
from typing import List, Optional

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_DATABASE_PATH = "data/scanner.db"
DEFAULT_SUPPORTED_DOMAINS = [
    "zara.com",
    "hm.com",
    "asos.com",
    "mango.com",
    "uniqlo.com",
    "everlane.com",
]


@dataclass
class ScannerConfig:
    """Configuration values for the scanner app.

    Secrets such as the Gemini API key are expected to come from the runtime
    environment; everything else has a local default.
    """

    gemini_api_key: Optional[str] = None
    model: str = DEFAULT_GEMINI_MODEL
    database_path: str = DEFAULT_DATABASE_PATH
    scrape_timeout: float = 10.0
    supported_domains: List[str] = field(default_factory=lambda: list(DEFAULT_SUPPORTED_DOMAINS))
    history_limit: int = 20
    environment: str | None = None

    def __post_init__(self) -> None:
        if self.scrape_timeout <= 0:
            raise ValueError("scrape_timeout must be positive")
        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self.supported_domains = [domain.strip().lower() for domain in self.supported_domains if domain.strip()]

    @classmethod
    def from_env(cls) -> "ScannerConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables, which take precedence.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("SCANNER_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        domains_raw = get_value("supported_domains")
        supported_domains = (
            [domain.strip().lower() for domain in domains_raw.split(",") if domain.strip()]
            if domains_raw
            else list(DEFAULT_SUPPORTED_DOMAINS)
        )

        return cls(
            gemini_api_key=get_value("gemini_api_key"),
            model=str(get_value("model", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL),
            database_path=str(get_value("database_path", DEFAULT_DATABASE_PATH) or DEFAULT_DATABASE_PATH),
            scrape_timeout=float(get_value("scrape_timeout", "10") or 10),
            supported_domains=supported_domains,
            history_limit=int(get_value("history_limit", "20") or 20),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a flat ``key: value`` YAML file."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
