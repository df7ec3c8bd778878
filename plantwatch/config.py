"""Configuration loader with type-safe dataclasses."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


# Minimum dashboard auto-refresh interval in seconds.
MIN_REFRESH_SECONDS = 5

# Insight types a webhook can be limited to, from least to most urgent.
NOTIFY_LEVELS = ("prediction", "warning", "critical")


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for the dashboard HTTP server."""

    enabled: bool = True
    host: str = ""  # empty string binds all interfaces
    port: int = 8080

    def __post_init__(self) -> None:
        if self.port < 1 or self.port > 65535:
            raise ConfigError(f"Server port must be between 1 and 65535, got {self.port}")


@dataclass(frozen=True)
class DashboardConfig:
    """Configuration for the rendered dashboard."""

    title: str = "Facility Monitor"
    refresh_seconds: int = 30

    def __post_init__(self) -> None:
        if not self.title:
            raise ConfigError("Dashboard title cannot be empty")
        if self.refresh_seconds < MIN_REFRESH_SECONDS:
            raise ConfigError(
                f"Dashboard refresh_seconds must be at least {MIN_REFRESH_SECONDS} (got {self.refresh_seconds})"
            )


@dataclass(frozen=True)
class DataConfig:
    """Where facility data comes from.

    facilities_file: Optional YAML dataset. None uses the built-in dataset.
    """

    facilities_file: str | None = None


@dataclass(frozen=True)
class WebhookConfig:
    """Configuration for a single insight webhook."""

    url: str
    enabled: bool = True
    min_level: str = "warning"  # lowest insight type that gets delivered

    def __post_init__(self) -> None:
        if not self.url:
            raise ConfigError("Webhook URL cannot be empty")
        if not self.url.startswith(("http://", "https://")):
            raise ConfigError(f"Webhook URL must start with http:// or https://, got '{self.url}'")
        if self.min_level not in NOTIFY_LEVELS:
            raise ConfigError(f"Invalid webhook min_level '{self.min_level}'. Must be one of: {NOTIFY_LEVELS}")


@dataclass(frozen=True)
class AlertsConfig:
    """Configuration for insight notifications."""

    webhooks: list[WebhookConfig] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.webhooks, list):
            raise ConfigError("Webhooks must be a list")


@dataclass(frozen=True)
class Config:
    """Main configuration container."""

    server: ServerConfig = field(default_factory=ServerConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    data: DataConfig = field(default_factory=DataConfig)
    alerts: AlertsConfig = field(default_factory=AlertsConfig)


def _section(data: dict, name: str) -> dict:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' section must be a dictionary")
    return section


def _parse_server_config(data: dict) -> ServerConfig:
    """Parse server configuration section."""
    try:
        port = int(data.get("port", 8080))
    except (TypeError, ValueError):
        raise ConfigError(f"Server port must be an integer, got '{data.get('port')}'")

    return ServerConfig(
        enabled=bool(data.get("enabled", True)),
        host=str(data.get("host", "")),
        port=port,
    )


def _parse_dashboard_config(data: dict) -> DashboardConfig:
    """Parse dashboard configuration section."""
    try:
        refresh_seconds = int(data.get("refresh_seconds", 30))
    except (TypeError, ValueError):
        raise ConfigError(f"Dashboard refresh_seconds must be an integer, got '{data.get('refresh_seconds')}'")

    return DashboardConfig(
        title=str(data.get("title", "Facility Monitor")),
        refresh_seconds=refresh_seconds,
    )


def _parse_data_config(data: dict) -> DataConfig:
    """Parse data configuration section."""
    facilities_file = data.get("facilities_file")
    return DataConfig(facilities_file=str(facilities_file) if facilities_file is not None else None)


def _parse_webhook_config(data: dict, index: int) -> WebhookConfig:
    """Parse a single webhook configuration entry."""
    if not isinstance(data, dict):
        raise ConfigError(f"Webhook entry {index} must be a dictionary")

    url = data.get("url")
    if url is None:
        raise ConfigError(f"Webhook entry {index} is missing 'url' field")

    return WebhookConfig(
        url=str(url),
        enabled=bool(data.get("enabled", True)),
        min_level=str(data.get("min_level", "warning")),
    )


def _parse_alerts_config(data: dict) -> AlertsConfig:
    """Parse alerts configuration section."""
    webhooks_data = data.get("webhooks", [])
    if not isinstance(webhooks_data, list):
        raise ConfigError("'alerts.webhooks' must be a list")

    return AlertsConfig(webhooks=[_parse_webhook_config(w, i) for i, w in enumerate(webhooks_data)])


def _apply_env_overrides(config_data: dict) -> dict:
    """Apply environment variable overrides to configuration.

    Supported overrides:
    - PLANTWATCH_PORT: Override server.port
    - PLANTWATCH_HOST: Override server.host
    - PLANTWATCH_SERVER_ENABLED: Override server.enabled (true/false)
    - PLANTWATCH_FACILITIES_FILE: Override data.facilities_file
    """
    config_data["server"] = _section(config_data, "server")
    config_data["data"] = _section(config_data, "data")

    port = os.environ.get("PLANTWATCH_PORT")
    if port is not None:
        try:
            config_data["server"]["port"] = int(port)
        except ValueError:
            raise ConfigError(f"PLANTWATCH_PORT must be an integer, got '{port}'")

    host = os.environ.get("PLANTWATCH_HOST")
    if host is not None:
        config_data["server"]["host"] = host

    enabled = os.environ.get("PLANTWATCH_SERVER_ENABLED")
    if enabled is not None:
        config_data["server"]["enabled"] = enabled.lower() in ("true", "1", "yes")

    facilities_file = os.environ.get("PLANTWATCH_FACILITIES_FILE")
    if facilities_file is not None:
        config_data["data"]["facilities_file"] = facilities_file

    return config_data


def parse_config(data: dict) -> Config:
    """Build a validated Config from already-parsed YAML data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML dictionary")

    data = _apply_env_overrides(data)

    return Config(
        server=_parse_server_config(_section(data, "server")),
        dashboard=_parse_dashboard_config(_section(data, "dashboard")),
        data=_parse_data_config(_section(data, "data")),
        alerts=_parse_alerts_config(_section(data, "alerts")),
    )


def load_config(config_path: str | None) -> Config:
    """Load and validate configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file, or None to use
            defaults (environment overrides still apply).

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If the file cannot be read or configuration is invalid.
    """
    if config_path is None:
        return parse_config({})

    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML configuration: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    return parse_config(data)
