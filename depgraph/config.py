"""
Ordering Configuration
======================

Settings for the dependency-ordering engine.

Values can be passed explicitly or read from the environment (a `.env` file is
honoured through python-dotenv):

- DEPGRAPH_DEFAULT_PRIORITY: priority used when a node has none (default 0)
- DEPGRAPH_STRICT_DEPENDENCIES: reject undeclared dependency ids (default false)
- DEPGRAPH_LOG_LEVEL: level used by configure_logging() (default INFO)
- DEPGRAPH_DOT_HIGH_PRIORITY / DEPGRAPH_DOT_MEDIUM_PRIORITY: DOT colour thresholds
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "DEPGRAPH_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_PREFIX}{name}={raw!r}, using {default}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass
class OrderingConfig:
    """
    Configuration for DependencyOrdering.

    Attributes:
        default_priority: Priority assumed for nodes without one
        strict_dependencies: Raise instead of creating placeholder nodes
            for dependency ids that were never declared as stories
        log_level: Logging level name used by configure_logging()
        dot_high_priority: Priorities above this are drawn red in DOT output
        dot_medium_priority: Priorities above this are drawn orange in DOT output
    """
    default_priority: int = 0
    strict_dependencies: bool = False
    log_level: str = "INFO"
    dot_high_priority: int = 5
    dot_medium_priority: int = 2

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "OrderingConfig":
        """
        Build a configuration from environment variables.

        Args:
            env_file: Optional .env file to load first (defaults to dotenv lookup)

        Returns:
            OrderingConfig populated from the environment
        """
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        defaults = cls()
        config = cls(
            default_priority=_env_int("DEFAULT_PRIORITY", defaults.default_priority),
            strict_dependencies=_env_bool("STRICT_DEPENDENCIES", defaults.strict_dependencies),
            log_level=os.environ.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
            dot_high_priority=_env_int("DOT_HIGH_PRIORITY", defaults.dot_high_priority),
            dot_medium_priority=_env_int("DOT_MEDIUM_PRIORITY", defaults.dot_medium_priority),
        )
        logger.debug(f"Loaded ordering config from environment: {config}")
        return config


def configure_logging(config: Optional[OrderingConfig] = None) -> None:
    """Set up root logging for applications embedding the engine."""
    config = config or OrderingConfig()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
