"""
Configuration dataclasses for the domain registrar system.

This module defines all configuration structures used throughout the system,
including polling behavior, AWS client settings, the zone-guard whitelist
and logging, together with loaders for JSON files and the environment.
"""

import copy
import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

REGISTRAR_ZONE_COMMENT = "HostedZone created by Route53 Registrar"

ENV_PREFIX = "DOMAIN_REGISTRAR_"


@dataclass
class PollingConfig:
    """Defaults for the registration wait loop."""

    interval_seconds: float = 10.0
    timeout_seconds: float = 900.0
    backoff_multiplier: float = 1.0  # 1.0 means a fixed interval
    max_interval_seconds: float = 60.0


@dataclass
class AWSConfig:
    """Settings for the boto3 Route 53 clients."""

    region: str = "us-east-1"  # Route 53 Domains only serves us-east-1
    profile: Optional[str] = None
    retry_mode: str = "standard"
    max_attempts: int = 3


@dataclass
class ZoneGuardConfig:
    """Whitelist the zone guard checks before deleting a hosted zone."""

    registrar_comment: str = REGISTRAR_ZONE_COMMENT
    allowed_record_types: list[str] = field(default_factory=lambda: ["NS", "SOA"])
    list_max_items: int = 10


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class SystemConfig:
    """Main system configuration combining all sub-configurations."""

    polling: PollingConfig = field(default_factory=PollingConfig)
    aws: AWSConfig = field(default_factory=AWSConfig)
    zone_guard: ZoneGuardConfig = field(default_factory=ZoneGuardConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    simulation_mode: bool = False


def config_from_dict(data: dict) -> SystemConfig:
    """
    Build a SystemConfig from a plain dictionary.

    Missing sections and keys fall back to their defaults.

    Raises:
        ConfigurationError: If a section has an unknown key or a bad value
    """
    try:
        polling = PollingConfig(**data.get("polling", {}))
        aws = AWSConfig(**data.get("aws", {}))
        zone_guard = ZoneGuardConfig(**data.get("zone_guard", {}))
        logging_config = LoggingConfig(**data.get("logging", {}))
    except TypeError as e:
        raise ConfigurationError(
            code="invalid_config",
            message=f"Invalid configuration: {e}",
        ) from e

    config = SystemConfig(
        polling=polling,
        aws=aws,
        zone_guard=zone_guard,
        logging=logging_config,
        simulation_mode=bool(data.get("simulation_mode", False)),
    )
    validate_config(config)
    return config


def validate_config(config: SystemConfig) -> None:
    """Reject values the orchestrator cannot work with."""
    polling = config.polling
    if polling.interval_seconds <= 0 or polling.timeout_seconds <= 0:
        raise ConfigurationError(
            code="invalid_polling",
            message="Polling interval and timeout must be positive",
            details={
                "interval_seconds": polling.interval_seconds,
                "timeout_seconds": polling.timeout_seconds,
            },
        )
    if polling.backoff_multiplier < 1.0:
        raise ConfigurationError(
            code="invalid_polling",
            message="Backoff multiplier must be at least 1.0",
            details={"backoff_multiplier": polling.backoff_multiplier},
        )
    if config.logging.output_format not in ("json", "text", "both"):
        raise ConfigurationError(
            code="invalid_logging",
            message=f"Invalid output_format: {config.logging.output_format}",
        )


def load_config_from_file(config_path: Path) -> SystemConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        SystemConfig with file values applied over defaults

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(
            code="config_not_found",
            message=f"Config file not found: {config_path}",
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            code="invalid_json",
            message=f"Error loading config: {e}",
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            code="invalid_config",
            message="Configuration root must be a JSON object",
        )
    return config_from_dict(data)


def save_config_to_file(config: SystemConfig, config_path: Path) -> None:
    """Save configuration to a JSON file, creating parent directories."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(asdict(config), f, indent=2, ensure_ascii=False)


def load_config_from_env(
    base: Optional[SystemConfig] = None,
    dotenv_path: Optional[Path] = None,
) -> SystemConfig:
    """
    Apply environment overrides (and a .env file) to a configuration.

    Recognized variables: AWS_REGION, AWS_PROFILE and
    DOMAIN_REGISTRAR_{POLL_INTERVAL,TIMEOUT,LOG_LEVEL,LOG_FORMAT,SIMULATION}.
    Variables already set in the process environment win over the .env file.
    The base configuration is copied, never modified.
    """
    load_dotenv(dotenv_path)
    config = copy.deepcopy(base) if base is not None else SystemConfig()

    region = os.getenv("AWS_REGION", "").strip()
    if region:
        config.aws.region = region
    profile = os.getenv("AWS_PROFILE", "").strip()
    if profile:
        config.aws.profile = profile

    interval = os.getenv(ENV_PREFIX + "POLL_INTERVAL")
    timeout = os.getenv(ENV_PREFIX + "TIMEOUT")
    try:
        if interval:
            config.polling.interval_seconds = float(interval)
        if timeout:
            config.polling.timeout_seconds = float(timeout)
    except ValueError as e:
        raise ConfigurationError(
            code="invalid_env",
            message=f"Invalid polling value in environment: {e}",
        ) from e

    level = os.getenv(ENV_PREFIX + "LOG_LEVEL")
    if level:
        config.logging.level = level.lower()
    output_format = os.getenv(ENV_PREFIX + "LOG_FORMAT")
    if output_format:
        config.logging.output_format = output_format.lower()

    if os.getenv(ENV_PREFIX + "SIMULATION", "0") == "1":
        config.simulation_mode = True

    validate_config(config)
    return config
